"""
test_normalizer.py
------------------
Unit tests for standard-unit estimation.
"""
from datetime import date
from types import SimpleNamespace

import pytest

from drinklog.core.exceptions import (
    IncompleteDataError,
    InvalidRangeError,
    UnknownUnitError,
)
from drinklog.ledger.approx import ApproximateValue
from drinklog.ledger.catalog import Drink
from drinklog.ledger.enums import TimePeriod
from drinklog.ledger.normalizer import (
    METHOD_ABV_VOLUME,
    METHOD_MULTIPLIER,
    LedgerEntry,
    check_quantity_range,
    effective_abv,
    normalize_entry,
)
from drinklog.ledger.units import default_registry

UK = 0.1  # one unit per 10 mL of ethanol


def exact(value):
    return ApproximateValue(value)


def approx(value):
    return ApproximateValue(value, True)


def make_entry(low=1, high=1, volume=None, unit=None):
    return LedgerEntry(
        drink_id=1,
        drank_on=date(2024, 10, 1),
        time_period=TimePeriod.EVENING,
        min_quantity=low if isinstance(low, ApproximateValue) or low is None else exact(low),
        max_quantity=high if isinstance(high, ApproximateValue) or high is None else exact(high),
        volume=volume,
        volume_unit=unit,
    )


class TestEffectiveAbv:
    def test_midpoint_of_range(self):
        assert effective_abv(Drink(1, "Beer", exact(4), exact(6))) == exact(5)

    def test_single_bound(self):
        assert effective_abv(Drink(1, "Beer", None, approx(5))) == approx(5)
        assert effective_abv(Drink(1, "Beer", exact(4), None)) == exact(4)

    def test_no_abv(self):
        assert effective_abv(Drink(1, "Mystery")) is None


class TestAbvVolumeMethod:
    """Entries with both an ABV and a volume."""

    def test_can_of_beer(self):
        """355 mL at 4-6% gives 355 * 0.05 * density for one serving."""
        drink = Drink(1, "Beer", exact(4), exact(6), 1.0)
        estimate = normalize_entry(make_entry(1, 1, exact(355), "mL"), drink, UK)

        assert estimate.method == METHOD_ABV_VOLUME
        assert estimate.min_units == estimate.max_units
        assert estimate.min_units.value == pytest.approx(355 * 0.05 * UK)
        assert estimate.is_approximate is False

    def test_quantity_range_scales_both_ends(self):
        drink = Drink(1, "Beer", exact(5), exact(5))
        estimate = normalize_entry(make_entry(1, 2, exact(500), "mL"), drink, UK)
        assert estimate.as_tuple() == pytest.approx((2.5, 5.0))

    def test_units_are_converted(self):
        drink = Drink(1, "Beer", exact(5), exact(5))
        estimate = normalize_entry(make_entry(1, 1, exact(12), "fl oz"), drink, UK)
        assert estimate.min_units.value == pytest.approx(12 * 29.5735 * 0.05 * UK)

    def test_multiplier_does_not_apply(self):
        drink = Drink(1, "Double Gin", exact(40), exact(40), 2.0)
        estimate = normalize_entry(make_entry(1, 1, exact(50), "mL"), drink, UK)
        assert estimate.min_units.value == pytest.approx(2.0)

    @pytest.mark.parametrize(
        "drink_abv, quantity, volume",
        [
            (approx(5), exact(1), exact(355)),
            (exact(5), approx(1), exact(355)),
            (exact(5), exact(1), approx(355)),
        ],
    )
    def test_any_approximate_input_flags_the_result(self, drink_abv, quantity, volume):
        drink = Drink(1, "Beer", drink_abv, drink_abv)
        estimate = normalize_entry(make_entry(quantity, quantity, volume, "mL"), drink, UK)
        assert estimate.min_units.is_approximate is True
        assert estimate.max_units.is_approximate is True

    def test_volume_range_is_reported(self):
        drink = Drink(1, "Beer", exact(5), exact(5))
        estimate = normalize_entry(make_entry(1, 2, exact(33), "cL"), drink, UK)
        assert estimate.min_volume_ml.value == pytest.approx(330.0)
        assert estimate.max_volume_ml.value == pytest.approx(660.0)

    def test_unknown_unit(self):
        drink = Drink(1, "Beer", exact(5), exact(5))
        with pytest.raises(UnknownUnitError):
            normalize_entry(make_entry(1, 1, exact(1), "pint"), drink, UK)

    def test_custom_registry(self):
        registry = default_registry()
        registry.register("pint", 568.261)
        drink = Drink(1, "Beer", exact(4), exact(4))
        estimate = normalize_entry(make_entry(1, 1, exact(1), "pint"), drink, UK, registry)
        assert estimate.min_units.value == pytest.approx(568.261 * 0.04 * UK)


class TestMultiplierMethod:
    """Entries without an ABV or without a volume."""

    def test_double_without_abv(self):
        """No ABV, multiplier 2.0 and quantity (1, 2) gives (2.0, 4.0)."""
        drink = Drink(1, "Double", None, None, 2.0)
        estimate = normalize_entry(make_entry(1, 2), drink, UK)
        assert estimate.method == METHOD_MULTIPLIER
        assert estimate.as_tuple() == (2.0, 4.0)

    def test_volume_is_ignored_without_abv(self):
        drink = Drink(1, "Double", None, None, 2.0)
        estimate = normalize_entry(make_entry(1, 2, exact(999), "mL"), drink, UK)
        assert estimate.as_tuple() == (2.0, 4.0)

    def test_abv_without_volume_falls_back(self):
        drink = Drink(1, "Beer", exact(5), exact(5), 1.0)
        estimate = normalize_entry(make_entry(3, 3), drink, UK)
        assert estimate.method == METHOD_MULTIPLIER
        assert estimate.as_tuple() == (3.0, 3.0)
        assert estimate.min_volume_ml is None

    def test_missing_abv_does_not_flag_the_result(self):
        drink = Drink(1, "Mystery", None, None, 1.0)
        assert normalize_entry(make_entry(1, 1), drink, UK).is_approximate is False

    def test_single_quantity_bound_is_filled(self):
        drink = Drink(1, "Mystery")
        estimate = normalize_entry(make_entry(None, approx(2)), drink, UK)
        assert estimate.min_units == approx(2)
        assert estimate.max_units == approx(2)


class TestErrors:
    def test_no_quantity(self):
        with pytest.raises(IncompleteDataError):
            normalize_entry(make_entry(None, None), Drink(1, "Beer"), UK)

    def test_inverted_quantity_rejected_on_construction(self):
        with pytest.raises(InvalidRangeError):
            make_entry(3, 1)

    def test_inverted_quantity_rejected_by_normalize(self):
        entry = SimpleNamespace(
            min_quantity=exact(3), max_quantity=exact(1), volume=None, volume_unit=None
        )
        with pytest.raises(InvalidRangeError):
            normalize_entry(entry, Drink(1, "Mystery", multiplier=2.0), UK)

    @pytest.mark.parametrize("density", [0, -0.1])
    def test_non_positive_density(self, density):
        with pytest.raises(ValueError):
            normalize_entry(make_entry(), Drink(1, "Beer"), density)

    def test_check_quantity_range(self):
        assert check_quantity_range(exact(1), None) == (exact(1), exact(1))
        with pytest.raises(InvalidRangeError):
            check_quantity_range(exact(3), exact(2))
        with pytest.raises(IncompleteDataError):
            check_quantity_range(None, None)


class TestBounds:
    def test_bounds_spread_approximate_ends(self):
        drink = Drink(1, "Beer", None, None, 1.0)
        estimate = normalize_entry(make_entry(approx(2), approx(2)), drink, UK)
        assert estimate.bounds(0.1) == pytest.approx((1.8, 2.2))
