"""
conftest.py
-----------
Shared pytest fixtures for DrinkLog tests.

Provides fixtures for:
- Temporary paths
- Database setup and teardown
- Entity managers bound to a test session
- Sample catalog data
"""
import pytest
from pathlib import Path
from datetime import date
from tempfile import TemporaryDirectory

from drinklog.core.paths import ALEMBIC_DIR


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ----- Test Database Fixtures -----

@pytest.fixture
def test_db_path(tmp_dir):
    """Create temporary test database path."""
    return tmp_dir / "test.db"


@pytest.fixture
def test_alembic_dir():
    """Path to Alembic directory."""
    return ALEMBIC_DIR


@pytest.fixture
def test_db(test_db_path, test_alembic_dir):
    """
    Create test database instance with schema.

    The path does not exist yet, so DrinkLogDB creates the tables and
    seeds the lookup rows itself.
    """
    from drinklog.database.manager import DrinkLogDB

    db = DrinkLogDB(db_path=test_db_path, alembic_dir=test_alembic_dir)

    yield db

    db.engine.dispose()


@pytest.fixture
def db_session(test_db):
    """
    Create a database session for tests.

    Provides a session with automatic rollback after test.
    """
    with test_db.session_scope() as session:
        yield session
        session.rollback()


@pytest.fixture
def person_manager(db_session):
    """Create PersonManager instance for testing."""
    from drinklog.database.managers.person_manager import PersonManager
    return PersonManager(db_session)


@pytest.fixture
def drink_manager(db_session):
    """Create DrinkManager instance for testing."""
    from drinklog.database.managers.drink_manager import DrinkManager
    return DrinkManager(db_session)


@pytest.fixture
def entry_manager(db_session):
    """Create EntryManager instance for testing."""
    from drinklog.database.managers.entry_manager import EntryManager
    return EntryManager(db_session)


# ----- Sample Data Fixtures -----

@pytest.fixture
def person(person_manager):
    """A persisted person with id 1."""
    return person_manager.create(1)


@pytest.fixture
def stout(drink_manager):
    """A persisted drink with an exact 4-6% ABV range."""
    return drink_manager.register("Stout", 4.0, 6.0)


@pytest.fixture
def sample_entry_metadata(person, stout):
    """Metadata for one 355 mL serving of stout."""
    return {
        "person_id": person.id,
        "drink_id": stout.id,
        "drank_on": date(2024, 10, 1),
        "time_period": "evening",
        "min_quantity": 1,
        "max_quantity": 1,
        "volume": 355,
        "volume_unit": "mL",
    }
