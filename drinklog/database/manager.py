#!/usr/bin/env python3
"""
manager.py
--------------------
Database manager for the DrinkLog ledger.

Provides the DrinkLogDB class for interacting with the SQLite database.
Handles:
    - Initialization of the database engine and sessionmaker
    - Transactional session scopes exposing the entity managers
    - Schema creation with seeded lookup tables
    - Migration management via Alembic

Core Operations:
    Drink Catalog (db.drinks):
        - register / lookup / find / get_or_create / delete

    Entries (db.entries):
        - create / get / list_for_person / normalize

    People (db.people):
        - create / get / get_or_create / delete (cascades to entries)

Notes
==============
- The schema is the generation-2 layout; the Alembic history also holds
  the generation-1 layout and the data migration between them
- SQLite foreign keys are switched on for every connection, so drinks
  and lookup rows cannot be deleted while referenced
- All datetime fields are UTC-aware
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Union

# --- Third party ---
from sqlalchemy import Engine, create_engine, event, inspect
from sqlalchemy.orm import Session, sessionmaker

from alembic.config import Config
from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

# --- Local imports ---
from drinklog.core.exceptions import DatabaseError
from drinklog.core.paths import ALEMBIC_INI
from drinklog.core.logging_manager import DrinkLogLogger, safe_logger
from drinklog.ledger.schema_evolution import TIME_PERIOD_ROWS, VOLUME_UNIT_ROWS
from .models import Base, TimePeriodRecord, VolumeUnitRecord
from .decorators import handle_db_errors, log_database_operation
from .managers import DrinkManager, EntryManager, PersonManager


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def seed_lookup_tables(session: Session) -> int:
    """
    Insert any missing time_period and volume_unit rows.

    Args:
        session: Open session; the caller commits

    Returns:
        Number of rows inserted
    """
    inserted = 0
    for model, rows in (
        (TimePeriodRecord, TIME_PERIOD_ROWS),
        (VolumeUnitRecord, VOLUME_UNIT_ROWS),
    ):
        for row in rows:
            if session.get(model, row["id"]) is None:
                session.add(model(**row))
                inserted += 1
    session.flush()
    return inserted


# ----- Main Database Manager -----
class DrinkLogDB:
    """
    Main database manager for the DrinkLog ledger.

    Attributes:
        - db_path (Path): Filesystem path to the SQLite database file.
        - alembic_dir (Path): Filesystem path to the Alembic scripts.
        - engine (Engine): SQLAlchemy engine instance.
        - SessionLocal (sessionmaker): SQLAlchemy session factory.

    Usage:
        db = DrinkLogDB(DB_PATH, ALEMBIC_DIR, log_dir=LOG_DIR)
        with db.session_scope() as session:
            drink = db.drinks.register("Stout", min_abv=4.0, max_abv=6.0)
    """

    # ---- Initialization ----
    def __init__(
        self,
        db_path: Union[str, Path],
        alembic_dir: Union[str, Path],
        log_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        """
        Initialize database engine and session factory.

        Args:
            db_path (str | Path): Path to the SQLite file.
            alembic_dir (str | Path): Path to the Alembic scripts directory.
            log_dir (str | Path): Directory for log files (optional)
        """
        self.db_path = Path(db_path).expanduser().resolve()
        self.alembic_dir = Path(alembic_dir).expanduser().resolve()

        # --- Logging ---
        if log_dir:
            self.log_dir = Path(log_dir).expanduser().resolve() / "system"
            self.logger: Optional[DrinkLogLogger] = DrinkLogLogger(
                self.log_dir,
                component_name="database",
            )
        else:
            self.logger = None

        # Managers are bound to a session inside session_scope
        self._person_manager: Optional[PersonManager] = None
        self._drink_manager: Optional[DrinkManager] = None
        self._entry_manager: Optional[EntryManager] = None

        self._setup_engine()

    def _setup_engine(self) -> None:
        """Initialize database engine and session factory."""
        logger = safe_logger(self.logger)
        try:
            logger.log_operation(
                "database_init_start",
                {
                    "db_path": str(self.db_path),
                    "alembic_dir": str(self.alembic_dir),
                },
            )

            is_new = not self.db_path.exists()
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self.engine: Engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                future=True,
                pool_pre_ping=True,
            )
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

            self.SessionLocal: sessionmaker = sessionmaker(
                bind=self.engine,
                autoflush=True,
                expire_on_commit=False,
                future=True,
            )

            self.alembic_cfg: Config = self._setup_alembic()

            if is_new:
                self.initialize_schema()

            logger.log_operation("database_init_complete", {"success": True})

        except Exception as e:
            logger.log_error(e, {"operation": "database_init"})
            raise DatabaseError(f"Database initialization failed: {e}") from e

    # ---- Session Management ----
    @contextmanager
    def session_scope(self):
        """
        Provide a transactional scope around operations with logging.

        Managers are available via properties (db.people, db.drinks,
        db.entries) for the lifetime of the scope.

        Usage:
            with db.session_scope() as session:
                drink = db.drinks.get_or_create("Cider", 4.5, 5.5)
                db.entries.create({...})
        """
        session = self.SessionLocal()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        logger = safe_logger(self.logger)

        self._person_manager = PersonManager(session, self.logger)
        self._drink_manager = DrinkManager(session, self.logger)
        self._entry_manager = EntryManager(session, self.logger)

        logger.log_debug("session_start", {"session_id": session_id})

        try:
            yield session
            session.commit()
            logger.log_debug("session_commit", {"session_id": session_id})

        except Exception as e:
            session.rollback()
            logger.log_error(
                e, {"operation": "session_rollback", "session_id": session_id}
            )
            raise
        finally:
            self._person_manager = None
            self._drink_manager = None
            self._entry_manager = None

            session.close()
            logger.log_debug("session_close", {"session_id": session_id})

    def get_session(self) -> Session:
        """Create and return a new SQLAlchemy session."""
        return self.SessionLocal()

    # -------------------------------------------------------------------------
    # Entity Manager Properties
    # -------------------------------------------------------------------------

    @property
    def people(self) -> PersonManager:
        """
        Access PersonManager for person operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        if self._person_manager is None:
            raise DatabaseError(
                "PersonManager requires active session. Use within session_scope."
            )
        return self._person_manager

    @property
    def drinks(self) -> DrinkManager:
        """
        Access DrinkManager for catalog operations.

        Recommended usage:
            with db.session_scope() as session:
                stout = db.drinks.register("Stout", 4.0, 6.0)
                same = db.drinks.lookup(stout.id)

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        if self._drink_manager is None:
            raise DatabaseError(
                "DrinkManager requires active session. "
                "Use within session_scope: "
                "with db.session_scope() as session: db.drinks.register(...)"
            )
        return self._drink_manager

    @property
    def entries(self) -> EntryManager:
        """
        Access EntryManager for entry operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        if self._entry_manager is None:
            raise DatabaseError(
                "EntryManager requires active session. Use within session_scope."
            )
        return self._entry_manager

    # ---- Alembic setup ----
    def _setup_alembic(self) -> Config:
        """Setup Alembic configuration."""
        logger = safe_logger(self.logger)
        try:
            logger.log_debug("Setting up Alembic configuration...")

            alembic_cfg: Config = Config(str(ALEMBIC_INI))
            alembic_cfg.set_main_option("script_location", str(self.alembic_dir))
            alembic_cfg.set_main_option("sqlalchemy.url", f"sqlite:///{self.db_path}")

            logger.log_debug("Alembic configuration setup complete")
            return alembic_cfg
        except Exception as e:
            logger.log_error(e, {"operation": "setup_alembic"})
            raise DatabaseError(f"Alembic configuration failed: {e}") from e

    @handle_db_errors
    @log_database_operation("initialize_schema")
    def initialize_schema(self) -> None:
        """
        Initialize database - create tables if needed and run migrations.

        Actions:
            Checks if the database is fresh (no tables)
            If fresh,
                creates all tables from the ORM models
                seeds the lookup tables
                stamps the Alembic revision to head
            If not,
                runs pending migrations to update schema
        """
        logger = safe_logger(self.logger)
        try:
            table_names = inspect(self.engine).get_table_names()
            is_fresh_db: bool = len(table_names) == 0

            if is_fresh_db:
                Base.metadata.create_all(bind=self.engine)
                with self.session_scope() as session:
                    seeded = seed_lookup_tables(session)
                try:
                    command.stamp(self.alembic_cfg, "head")
                except Exception as e:
                    logger.log_error(e, {"operation": "stamp_database"})
                logger.log_operation(
                    "fresh_database_created",
                    {
                        "tables_created": len(Base.metadata.tables),
                        "lookup_rows_seeded": seeded,
                    },
                )
            else:
                self.upgrade_database()
                logger.log_operation(
                    "existing_database_migrated",
                    {"table_count": len(table_names)},
                )

        except DatabaseError:
            raise
        except Exception as e:
            raise DatabaseError(f"Could not initialize database: {e}") from e

    @handle_db_errors
    @log_database_operation("upgrade_database")
    def upgrade_database(self, revision: str = "head") -> None:
        """
        Upgrade the database schema to the specified Alembic revision.

        Args:
            revision (str, optional):
                The target revision to upgrade to.
                Defaults to 'head' (latest revision).
        """
        try:
            command.upgrade(self.alembic_cfg, revision)
        except Exception as e:
            raise DatabaseError(f"Database upgrade failed: {e}") from e

    @handle_db_errors
    @log_database_operation("downgrade_database")
    def downgrade_database(self, revision: str) -> None:
        """
        Downgrade the database schema to a specified Alembic revision.

        Args:
            revision (str): The target revision to downgrade to.
        """
        try:
            command.downgrade(self.alembic_cfg, revision)
        except Exception as e:
            raise DatabaseError(f"Database downgrade to {revision} failed: {e}") from e

    def get_migration_history(self) -> Dict[str, Optional[str]]:
        """
        Get the current migration status of the database.

        Returns:
            Dictionary with keys:
                - 'current_revision' (str | None):
                  Current Alembic revision of the database.
                - 'head_revision' (str | None):
                  Latest revision in the migration scripts.
                - 'status' (str):
                  'up_to_date' when the two match, 'needs_migration' otherwise.
                - 'error' (str, optional):
                  Present if an exception occurred.
        """
        try:
            head_rev = ScriptDirectory.from_config(self.alembic_cfg).get_current_head()
            with self.engine.connect() as conn:
                context = MigrationContext.configure(conn)
                current_rev = context.get_current_revision()

            return {
                "current_revision": current_rev,
                "head_revision": head_rev,
                "status": "up_to_date"
                if current_rev is not None and current_rev == head_rev
                else "needs_migration",
            }
        except Exception as e:
            safe_logger(self.logger).log_error(
                e, {"operation": "get_migration_history"}
            )
            return {"error": str(e)}
