"""
test_txt_import.py
------------------
Unit tests for parsing hand-written log lines.
"""
import pytest
from datetime import date

from drinklog.core.exceptions import ImportParseError, ValidationError
from drinklog.ledger.approx import ApproximateValue
from drinklog.ledger.enums import TimePeriod, VolumeUnit
from drinklog.pipeline.txt_import import (
    DateContext,
    ImportStats,
    RawEntry,
    parse_line,
)


OCT_1_EVENING = DateContext(date(2018, 10, 1), TimePeriod.EVENING, ())


class TestRawEntry:
    def test_full_line(self):
        raw = RawEntry.from_line("(1 oct, evening), 2, Guinness, 4.2%, 568 mL?")
        assert raw == RawEntry("1 oct, evening", "2", "Guinness", "4.2%", "568 mL?")

    def test_leading_comma_without_date(self):
        raw = RawEntry.from_line(", 1, Laphroaig 10, 40%, 25 mL")
        assert raw == RawEntry(None, "1", "Laphroaig 10", "40%", "25 mL")

    def test_name_only(self):
        raw = RawEntry.from_line("(oct 2; brunch; hotel), ~2, Mimosa")
        assert raw == RawEntry("oct 2; brunch; hotel", "~2", "Mimosa")

    def test_no_separator(self):
        assert RawEntry.from_line("just some words") is None


class TestDateContext:
    def _resolve(self, date_field, previous=OCT_1_EVENING):
        return DateContext.from_entry(RawEntry(date_field, "1", "Gin"), previous)

    def test_initial(self):
        assert DateContext.initial() == DateContext(
            date(2018, 1, 1), TimePeriod.EVENING, ()
        )

    def test_missing_date_reuses_previous(self):
        assert self._resolve(None) is OCT_1_EVENING

    def test_day_and_time(self):
        when = self._resolve("3 oct, morning")
        assert when == DateContext(date(2018, 10, 3), TimePeriod.MORNING, ())

    def test_month_first(self):
        assert self._resolve("oct 3").drank_on == date(2018, 10, 3)

    def test_brunch_is_afternoon(self):
        when = self._resolve("oct 2; brunch; hotel")
        assert when.time is TimePeriod.AFTERNOON
        assert set(when.context) == {"brunch", "hotel"}

    def test_same_day_keeps_time(self):
        when = self._resolve("1 oct, pub")
        assert when.time is TimePeriod.EVENING
        assert when.context == ("pub",)

    def test_new_day_defaults_to_night(self):
        assert self._resolve("2 oct").time is TimePeriod.NIGHT

    def test_time_without_day(self):
        when = self._resolve("morning")
        assert when.drank_on == date(2018, 10, 1)
        assert when.time is TimePeriod.MORNING

    def test_two_time_words(self):
        with pytest.raises(ImportParseError):
            self._resolve("3 oct, morning, night")

    def test_new_year_rolls_forward(self):
        previous = DateContext(date(2018, 12, 31), TimePeriod.NIGHT, ())
        assert self._resolve("1 jan", previous).drank_on == date(2019, 1, 1)

    def test_other_days_keep_year(self):
        previous = DateContext(date(2019, 1, 1), TimePeriod.NIGHT, ())
        assert self._resolve("2 jan", previous).drank_on == date(2019, 1, 2)

    @pytest.mark.parametrize("text", ["31 feb", "1 foo"])
    def test_invalid_day(self, text):
        with pytest.raises(ImportParseError):
            DateContext.parse_day(text, date(2018, 1, 1))


class TestParseLine:
    def test_full_line(self):
        entry = parse_line("(1 oct, evening), 2, Guinness, 4.2%, 568 mL?", OCT_1_EVENING)

        assert entry.when == OCT_1_EVENING
        assert entry.name == "Guinness"
        assert entry.quantity == (ApproximateValue(2), ApproximateValue(2))
        assert entry.abv == (ApproximateValue(4.2), ApproximateValue(4.2))
        assert entry.volume == (ApproximateValue(568, True), VolumeUnit.ML)
        assert entry.multiplier == 1.0

    def test_minimal_line(self):
        entry = parse_line("1-2, Double Gin", OCT_1_EVENING)

        assert entry.when is OCT_1_EVENING
        assert entry.quantity == (ApproximateValue(1), ApproximateValue(2))
        assert entry.abv is None
        assert entry.volume is None
        assert entry.multiplier == 2.0

    def test_unreadable_layout(self):
        with pytest.raises(ImportParseError):
            parse_line("nothing to see", OCT_1_EVENING)

    def test_bad_quantity(self):
        with pytest.raises(ValidationError):
            parse_line("(2 oct), two, Cider", OCT_1_EVENING)


class TestImportStats:
    def test_summary(self):
        stats = ImportStats()
        stats.lines_read = 3
        stats.entries_created = 2
        stats.drinks_created = 1
        stats.record_failure(3, "bad")

        assert stats.failures == [(3, "bad")]
        assert stats.summary().startswith(
            "3 lines, 2 entries created, 1 drinks created, 1 errors in "
        )
