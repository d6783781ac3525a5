"""
DrinkLog
========

A personal drinks ledger that records what was drunk, when, and how much,
with honest uncertainty, and estimates standard alcohol units from it.

Main Components:
    - ledger: Pure measurement model (approximate values, unit registry,
      drink catalog, normalizer, schema evolution adapter)
    - database: SQLAlchemy models, entity managers and the click CLI
    - pipeline: Legacy text-log import
    - core: Exceptions, logging, paths, configuration, validation

Primary Interfaces:
    - drinklog.database.cli: Database management CLI (``drinklog``)
    - drinklog.database.manager.DrinkLogDB: Main database interface

Example Usage:
    >>> from drinklog import DrinkLogDB
    >>> from drinklog.core.paths import DB_PATH, ALEMBIC_DIR, LOG_DIR
    >>> db = DrinkLogDB(db_path=DB_PATH, alembic_dir=ALEMBIC_DIR, log_dir=LOG_DIR)
    >>> with db.session_scope() as session:
    ...     stout = db.drinks.get_or_create("Stout", 4.0, 6.0)
"""

__version__ = "1.0.0"

# Expose primary interfaces for convenience
from drinklog.database.manager import DrinkLogDB
from drinklog.core.paths import DATA_DIR, DB_PATH, LOG_DIR

__all__ = [
    "DrinkLogDB",
    "DATA_DIR",
    "DB_PATH",
    "LOG_DIR",
]
