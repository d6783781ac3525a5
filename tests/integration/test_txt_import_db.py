"""
Integration tests for importing a text log into a real database.
"""
import pytest
from datetime import date

from drinklog.core.exceptions import ImportParseError
from drinklog.ledger.enums import TimePeriod
from drinklog.pipeline.txt_import import import_file, setup_logger

LOG_TEXT = """\
# october
(1 oct, evening), 2, Guinness, 4.2%, 568 mL?
, 1, Guinness, 4.2%, 568 mL
(2 oct; brunch; hotel), ~2, Mimosa

(3 oct, morning, night), 1, Gin
(4 oct), two, Cider
(5 oct), 1, Double Gin, 40%, 25 mL
"""


@pytest.fixture
def log_file(tmp_dir):
    path = tmp_dir / "drinks.txt"
    path.write_text(LOG_TEXT, encoding="utf-8")
    return path


class TestImportFile:
    def test_counts(self, test_db, log_file):
        stats = import_file(log_file, test_db)

        assert stats.lines_read == 6
        assert stats.entries_created == 4
        assert stats.drinks_created == 3
        assert stats.errors == 2
        assert [number for number, _ in stats.failures] == [6, 7]

    def test_entries_stored(self, test_db, log_file):
        import_file(log_file, test_db, person_id=5)

        with test_db.session_scope():
            entries = test_db.entries.list_for_person(5)
            by_name = {}
            for entry in entries:
                by_name.setdefault(entry.drink.name, []).append(entry)

            assert sorted(by_name) == ["Double Gin", "Guinness", "Mimosa"]
            assert len(by_name["Guinness"]) == 2
            assert {e.drank_on for e in by_name["Guinness"]} == {date(2018, 10, 1)}

            mimosa = by_name["Mimosa"][0]
            assert mimosa.time_period is TimePeriod.AFTERNOON
            assert mimosa.min_quantity.is_approximate

            double = by_name["Double Gin"][0]
            assert double.drink.multiplier == 2.0
            assert double.time_period is TimePeriod.NIGHT

    def test_reimport_reuses_drinks(self, test_db, log_file):
        import_file(log_file, test_db)
        stats = import_file(log_file, test_db)

        assert stats.drinks_created == 0
        with test_db.session_scope():
            assert test_db.entries.count(1) == 8

    def test_dry_run_writes_nothing(self, test_db, log_file):
        stats = import_file(log_file, test_db, dry_run=True)

        assert stats.lines_read == 6
        assert stats.entries_created == 0
        with test_db.session_scope():
            assert test_db.entries.count() == 0
            assert test_db.drinks.get_all() == []

    def test_missing_file(self, test_db, tmp_dir):
        with pytest.raises(ImportParseError):
            import_file(tmp_dir / "absent.txt", test_db)

    def test_logs_to_operations_dir(self, test_db, log_file, tmp_dir):
        logger = setup_logger(tmp_dir / "logs")
        import_file(log_file, test_db, logger=logger)
        for handler in logger.main_logger.handlers:
            handler.flush()

        text = (tmp_dir / "logs" / "operations" / "txt_import.log").read_text(
            encoding="utf-8"
        )
        assert "import_start" in text
        assert "Skipping line 6" in text
        assert "import_complete" in text
