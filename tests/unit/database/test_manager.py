"""
Tests for DrinkLogDB: schema creation, seeding, sessions and models.
"""
import pytest
from datetime import date

from sqlalchemy import inspect, text

from drinklog.core.exceptions import DatabaseError, DuplicateDrinkError
from drinklog.database.manager import DrinkLogDB, seed_lookup_tables
from drinklog.database.models import (
    Drink,
    Entry,
    Person,
    TimePeriodRecord,
    VolumeUnitRecord,
)
from drinklog.ledger.approx import ApproximateValue
from drinklog.ledger.enums import TimePeriod


HEAD_REVISION = "7c4d9e1b2f86"


class TestFreshDatabase:
    """A database created from nothing is complete and stamped."""

    def test_tables_created(self, test_db):
        tables = set(inspect(test_db.engine).get_table_names())
        assert {"person", "drink", "entry", "time_period", "volume_unit"} <= tables

    def test_lookup_rows_seeded(self, test_db):
        with test_db.session_scope() as session:
            periods = session.query(TimePeriodRecord).order_by(TimePeriodRecord.id).all()
            units = session.query(VolumeUnitRecord).order_by(VolumeUnitRecord.id).all()

            assert [p.name for p in periods] == [
                "morning",
                "afternoon",
                "evening",
                "night",
            ]
            assert [(u.id, u.abbr) for u in units] == [
                (1, "fl oz"),
                (2, "ml"),
                (3, "cl"),
                (4, "l"),
            ]

    def test_seeding_is_idempotent(self, test_db):
        with test_db.session_scope() as session:
            assert seed_lookup_tables(session) == 0

    def test_stamped_at_head(self, test_db):
        history = test_db.get_migration_history()
        assert history["current_revision"] == HEAD_REVISION
        assert history["status"] == "up_to_date"

    def test_existing_database_is_reopened(self, test_db, test_db_path, test_alembic_dir):
        with test_db.session_scope():
            test_db.drinks.register("Cider", 4.5, 5.5)
        test_db.engine.dispose()

        reopened = DrinkLogDB(test_db_path, test_alembic_dir)
        try:
            reopened.initialize_schema()
            with reopened.session_scope():
                assert [d.name for d in reopened.drinks.get_all()] == ["Cider"]
        finally:
            reopened.engine.dispose()

    def test_log_dir_creates_logger(self, tmp_dir, test_alembic_dir):
        db = DrinkLogDB(tmp_dir / "logged.db", test_alembic_dir, log_dir=tmp_dir / "logs")
        try:
            assert db.logger is not None
            assert (tmp_dir / "logs" / "system").is_dir()
        finally:
            db.engine.dispose()


class TestSessionScope:
    """Managers exist only inside session_scope and errors roll back."""

    @pytest.mark.parametrize("name", ["people", "drinks", "entries"])
    def test_managers_require_session(self, test_db, name):
        with pytest.raises(DatabaseError):
            getattr(test_db, name)

    def test_managers_available_in_scope(self, test_db):
        with test_db.session_scope():
            assert test_db.people is not None
            assert test_db.drinks is not None
            assert test_db.entries is not None

    def test_managers_cleared_after_scope(self, test_db):
        with test_db.session_scope():
            pass
        with pytest.raises(DatabaseError):
            test_db.drinks

    def test_commit_on_success(self, test_db):
        with test_db.session_scope():
            test_db.drinks.register("Porter", 5.0, 6.5)
        with test_db.session_scope():
            assert test_db.drinks.find("porter", 5.0, 6.5) is not None

    def test_rollback_on_error(self, test_db):
        with pytest.raises(DuplicateDrinkError):
            with test_db.session_scope():
                test_db.drinks.register("Porter", 5.0, 6.5)
                test_db.drinks.register("PORTER", 5.0, 6.5)
        with test_db.session_scope():
            assert test_db.drinks.get_all() == []

    def test_foreign_keys_enforced(self, test_db):
        with test_db.session_scope() as session:
            assert session.execute(text("PRAGMA foreign_keys")).scalar() == 1


class TestModels:
    """Approximate-value properties and display helpers on the ORM models."""

    def test_drink_approx_properties(self, db_session):
        drink = Drink(
            name="Mead",
            min_abv=ApproximateValue(8, True),
            max_abv=ApproximateValue(12),
        )
        db_session.add(drink)
        db_session.flush()

        assert drink.min_abv_val == 8
        assert drink.min_abv_is_approximate is True
        assert drink.max_abv == ApproximateValue(12)
        assert str(drink) == "Mead (~8-12%)"

    def test_drink_without_abv(self, db_session):
        drink = Drink(name="Mystery punch", multiplier=1.0)
        db_session.add(drink)
        db_session.flush()

        assert drink.min_abv is None
        assert drink.max_abv is None
        assert drink.abv_display == "?"

    def test_entry_properties(self, db_session, sample_entry_metadata, entry_manager):
        entry = entry_manager.create(sample_entry_metadata)

        assert isinstance(entry, Entry)
        assert entry.time_period is TimePeriod.EVENING
        assert entry.volume_unit == "ml"
        assert entry.quantity_display == "1"
        assert entry.volume_display == "355 ml"

    def test_person_entry_count(self, db_session, sample_entry_metadata, entry_manager):
        entry_manager.create(sample_entry_metadata)
        person = db_session.get(Person, sample_entry_metadata["person_id"])
        db_session.refresh(person)
        assert person.entry_count == 1

    def test_entry_dates(self, db_session, sample_entry_metadata, entry_manager):
        entry = entry_manager.create(sample_entry_metadata)
        assert entry.drank_on == date(2024, 10, 1)
