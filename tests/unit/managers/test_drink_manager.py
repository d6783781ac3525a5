"""
Tests for DrinkManager, the persisted drink catalog.
"""
import pytest

from drinklog.core.exceptions import (
    DatabaseError,
    DuplicateDrinkError,
    InvalidRangeError,
    NotFoundError,
    ValidationError,
)
from drinklog.ledger.approx import ApproximateValue


class TestRegister:
    def test_register_returns_flushed_drink(self, drink_manager):
        drink = drink_manager.register("Pale Ale", 4.5, 5.5)
        assert drink.id is not None
        assert drink.min_abv == ApproximateValue(4.5)
        assert drink.max_abv == ApproximateValue(5.5)
        assert drink.multiplier == 1.0

    def test_ids_are_distinct(self, drink_manager):
        a = drink_manager.register("Pale Ale", 4.5, 5.5)
        b = drink_manager.register("Pale Ale", 4.5, 6.0)
        assert a.id != b.id

    def test_duplicate_is_case_insensitive(self, drink_manager, stout):
        with pytest.raises(DuplicateDrinkError):
            drink_manager.register("  STOUT ", 4.0, 6.0)

    def test_approximate_flag_is_part_of_identity(self, drink_manager, stout):
        other = drink_manager.register("Stout", ApproximateValue(4.0, True), 6.0)
        assert other.id != stout.id

    def test_multiplier_is_part_of_identity(self, drink_manager, stout):
        double = drink_manager.register("Stout", 4.0, 6.0, multiplier=2.0)
        assert double.id != stout.id

    def test_single_abv_bound(self, drink_manager):
        drink = drink_manager.register("House red", max_abv=ApproximateValue(13, True))
        assert drink.min_abv is None
        assert str(drink) == "House red (~13%)"

    def test_inverted_abv(self, drink_manager):
        with pytest.raises(InvalidRangeError):
            drink_manager.register("Backwards", 6.0, 4.0)

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name(self, drink_manager, name):
        with pytest.raises(ValidationError):
            drink_manager.register(name, 4.0, 5.0)

    def test_non_positive_multiplier(self, drink_manager):
        with pytest.raises(ValidationError):
            drink_manager.register("Nothing", 4.0, 5.0, multiplier=0)


class TestLookup:
    def test_lookup(self, drink_manager, stout):
        assert drink_manager.lookup(stout.id) is stout

    def test_lookup_missing(self, drink_manager):
        with pytest.raises(NotFoundError):
            drink_manager.lookup(404)
        assert drink_manager.get(404) is None

    def test_find(self, drink_manager, stout):
        assert drink_manager.find("stout", 4.0, 6.0) is stout
        assert drink_manager.find("stout", 4.0, 7.0) is None

    def test_get_or_create(self, drink_manager, stout):
        assert drink_manager.get_or_create("Stout", 4.0, 6.0) is stout
        created = drink_manager.get_or_create("Cider", 4.5, 5.5)
        assert created.id != stout.id

    def test_search(self, drink_manager, stout):
        drink_manager.register("Imperial Stout", 9.0, 11.0)
        drink_manager.register("Cider", 4.5, 5.5)

        assert [d.name for d in drink_manager.search("STOUT")] == [
            "Imperial Stout",
            "Stout",
        ]
        assert len(drink_manager.search()) == 3


class TestDelete:
    def test_delete_unreferenced(self, drink_manager, stout):
        drink_id = stout.id
        drink_manager.delete(stout)
        assert drink_manager.get(drink_id) is None

    def test_delete_referenced_fails(
        self, drink_manager, entry_manager, stout, sample_entry_metadata
    ):
        entry_manager.create(sample_entry_metadata)

        with pytest.raises(DatabaseError) as exc_info:
            drink_manager.delete(stout.id)

        assert "referenced by 1 entry" in str(exc_info.value)
        assert drink_manager.reference_count(stout) == 1
        assert drink_manager.get(stout.id) is stout
