#!/usr/bin/env python3
"""
DrinkLog Database Package
-------------------------
Persistence for the drinks ledger.

This package provides:
- The generation-2 SQLAlchemy models
- Entity managers for people, the drink catalog and entries
- Transactional sessions and Alembic migrations via DrinkLogDB
- The ``drinklog`` command-line interface
"""

from .manager import DrinkLogDB, seed_lookup_tables
from drinklog.core.exceptions import (
    DatabaseError,
    ValidationError,
    NotFoundError,
    DuplicateDrinkError,
)
from .managers.base_manager import HasId
from .decorators import (
    DatabaseOperation,
    log_database_operation,
    handle_db_errors,
    validate_metadata,
)

__all__ = [
    # Main manager
    "DrinkLogDB",
    "seed_lookup_tables",
    # Exceptions
    "DatabaseError",
    "ValidationError",
    "NotFoundError",
    "DuplicateDrinkError",
    # Decorators
    "DatabaseOperation",
    "log_database_operation",
    "handle_db_errors",
    "validate_metadata",
    # Protocols
    "HasId",
]
