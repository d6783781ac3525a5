"""
Tests for EntryManager: creation rules, listing and normalization.
"""
import pytest
from datetime import date

from drinklog.core.exceptions import (
    IncompleteDataError,
    InvalidRangeError,
    NotFoundError,
    UnknownUnitError,
    ValidationError,
)
from drinklog.ledger.approx import ApproximateValue
from drinklog.ledger.enums import TimePeriod, VolumeUnit
from drinklog.ledger.normalizer import METHOD_ABV_VOLUME, METHOD_MULTIPLIER


class TestCreate:
    def test_create(self, entry_manager, sample_entry_metadata):
        entry = entry_manager.create(sample_entry_metadata)

        assert entry.id is not None
        assert entry.time_id == TimePeriod.EVENING.surrogate_id
        assert entry.volume_unit_id == VolumeUnit.ML.surrogate_id
        assert entry.min_quantity == ApproximateValue(1)
        assert entry.volume == ApproximateValue(355)

    def test_iso_date_and_enum_period(self, entry_manager, sample_entry_metadata):
        entry = entry_manager.create(
            {
                **sample_entry_metadata,
                "drank_on": "2024-02-29",
                "time_period": TimePeriod.MORNING,
            }
        )
        assert entry.drank_on == date(2024, 2, 29)
        assert entry.time_period is TimePeriod.MORNING

    def test_single_quantity_fills_other_bound(self, entry_manager, sample_entry_metadata):
        metadata = {**sample_entry_metadata, "min_quantity": None}
        metadata["max_quantity"] = {"val": 2, "is_approximate": True}

        entry = entry_manager.create(metadata)

        assert entry.min_quantity == ApproximateValue(2, True)
        assert entry.max_quantity == ApproximateValue(2, True)

    def test_without_volume(self, entry_manager, sample_entry_metadata):
        metadata = {**sample_entry_metadata, "volume": None, "volume_unit": None}
        entry = entry_manager.create(metadata)
        assert entry.volume is None
        assert entry.volume_unit is None

    def test_missing_required_field(self, entry_manager, sample_entry_metadata):
        metadata = dict(sample_entry_metadata)
        del metadata["time_period"]
        with pytest.raises(ValidationError):
            entry_manager.create(metadata)

    def test_no_quantity(self, entry_manager, sample_entry_metadata):
        metadata = {**sample_entry_metadata, "min_quantity": None, "max_quantity": None}
        with pytest.raises(IncompleteDataError):
            entry_manager.create(metadata)

    def test_inverted_quantity(self, entry_manager, sample_entry_metadata):
        metadata = {**sample_entry_metadata, "min_quantity": 3, "max_quantity": 1}
        with pytest.raises(InvalidRangeError):
            entry_manager.create(metadata)

    def test_negative_quantity(self, entry_manager, sample_entry_metadata):
        metadata = {**sample_entry_metadata, "min_quantity": -1}
        with pytest.raises(ValidationError):
            entry_manager.create(metadata)

    def test_volume_without_unit(self, entry_manager, sample_entry_metadata):
        metadata = {**sample_entry_metadata, "volume_unit": None}
        with pytest.raises(ValidationError):
            entry_manager.create(metadata)

    def test_unknown_unit(self, entry_manager, sample_entry_metadata):
        metadata = {**sample_entry_metadata, "volume_unit": "pint"}
        with pytest.raises(UnknownUnitError):
            entry_manager.create(metadata)

    def test_unknown_time_period(self, entry_manager, sample_entry_metadata):
        metadata = {**sample_entry_metadata, "time_period": "brunch"}
        with pytest.raises(ValidationError):
            entry_manager.create(metadata)

    def test_missing_drink(self, entry_manager, sample_entry_metadata):
        metadata = {**sample_entry_metadata, "drink_id": 999}
        with pytest.raises(NotFoundError):
            entry_manager.create(metadata)


class TestQueries:
    @pytest.fixture
    def week(self, entry_manager, sample_entry_metadata):
        rows = [
            ("2024-10-01", "night"),
            ("2024-10-03", "afternoon"),
            ("2024-10-01", "morning"),
            ("2024-10-07", "evening"),
        ]
        return [
            entry_manager.create(
                {**sample_entry_metadata, "drank_on": day, "time_period": period}
            )
            for day, period in rows
        ]

    def test_newest_day_first(self, entry_manager, week):
        entries = entry_manager.list_for_person(1)
        assert [(e.drank_on.isoformat(), e.time_period.value) for e in entries] == [
            ("2024-10-07", "evening"),
            ("2024-10-03", "afternoon"),
            ("2024-10-01", "morning"),
            ("2024-10-01", "night"),
        ]

    def test_date_range_inclusive(self, entry_manager, week):
        entries = entry_manager.list_for_person(1, "2024-10-01", "2024-10-03")
        assert len(entries) == 3

    def test_inverted_date_range(self, entry_manager, week):
        with pytest.raises(ValidationError):
            entry_manager.list_for_person(1, "2024-10-07", "2024-10-01")

    def test_other_person_sees_nothing(self, entry_manager, person_manager, week):
        person_manager.create(2)
        assert entry_manager.list_for_person(2) == []
        assert entry_manager.count(1) == 4
        assert entry_manager.count() == 4

    def test_get_scoped_to_person(self, entry_manager, week):
        entry = week[0]
        assert entry_manager.get(entry.id) is entry
        assert entry_manager.get(entry.id, person_id=1) is entry
        assert entry_manager.get(entry.id, person_id=2) is None

    def test_no_single_entry_deletion(self, entry_manager, person_manager, week):
        assert not hasattr(entry_manager, "delete")

        person_manager.delete(1)
        assert entry_manager.count(1) == 0


class TestNormalize:
    def test_abv_and_volume(self, entry_manager, sample_entry_metadata):
        entry = entry_manager.create(sample_entry_metadata)

        estimate = entry_manager.normalize(entry, density_constant=0.1)

        assert estimate.method == METHOD_ABV_VOLUME
        assert estimate.min_units.value == pytest.approx(1.775)
        assert estimate.max_units.value == pytest.approx(1.775)
        assert not estimate.is_approximate

    def test_fluid_ounces(self, entry_manager, sample_entry_metadata):
        entry = entry_manager.create(
            {**sample_entry_metadata, "volume": 12, "volume_unit": "fl oz"}
        )

        estimate = entry_manager.normalize(entry.id, density_constant=0.1)

        assert estimate.min_units.value == pytest.approx(12 * 29.5735 * 0.05 * 0.1, rel=1e-4)

    def test_multiplier_without_abv(
        self, entry_manager, drink_manager, sample_entry_metadata
    ):
        double = drink_manager.register("Double Gin", multiplier=2.0)
        entry = entry_manager.create(
            {
                **sample_entry_metadata,
                "drink_id": double.id,
                "min_quantity": 2,
                "max_quantity": ApproximateValue(4, True),
            }
        )

        estimate = entry_manager.normalize(entry, density_constant=0.1)

        assert estimate.method == METHOD_MULTIPLIER
        assert estimate.as_tuple() == (4.0, 8.0)
        assert estimate.max_units.is_approximate
        assert not estimate.min_units.is_approximate

    def test_missing_entry(self, entry_manager):
        with pytest.raises(NotFoundError):
            entry_manager.normalize(123, density_constant=0.1)
