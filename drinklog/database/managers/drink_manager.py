#!/usr/bin/env python3
"""
drink_manager.py
--------------------
Manages the persisted drink catalog.

Offers the same contract as the in-memory ``drinklog.ledger.DrinkCatalog``:
drinks are registered once and looked up by id, there is no update, and a
drink's identity is its case-insensitive name plus ABV bounds and
multiplier. A drink referenced by any entry cannot be deleted.

Key Features:
    - Register with validation and duplicate detection
    - Lookup by id, identity or name fragment
    - Get-or-create for importers and the CLI
    - Deletion guarded against existing references

Usage:
    drink_mgr = DrinkManager(session, logger)

    stout = drink_mgr.register("Stout", min_abv=4.0, max_abv=6.0)
    same = drink_mgr.get_or_create("STOUT", min_abv=4.0, max_abv=6.0)
    assert same.id == stout.id
"""
from typing import Any, List, Optional, Union

from drinklog.core.exceptions import DatabaseError, DuplicateDrinkError, NotFoundError
from drinklog.core.validators import DataValidator
from drinklog.database.decorators import (
    DatabaseOperation,
    handle_db_errors,
    log_database_operation,
)
from drinklog.database.models import Drink, Entry
from drinklog.ledger.approx import ApproximateValue
from drinklog.ledger.catalog import drink_identity, validate_drink_fields
from .base_manager import BaseManager


def _match_approx(column_val, column_flag, value: Optional[ApproximateValue]):
    if value is None:
        return [column_val.is_(None)]
    return [column_val == value.value, column_flag == value.is_approximate]


class DrinkManager(BaseManager):
    """
    Manages Drink table operations.

    Name comparison happens in Python after narrowing by the numeric
    columns, so case folding is not limited to what SQLite's lower() knows.
    """

    def _candidates(
        self,
        min_abv: Optional[ApproximateValue],
        max_abv: Optional[ApproximateValue],
        multiplier: float,
    ) -> List[Drink]:
        filters = (
            _match_approx(Drink.min_abv_val, Drink.min_abv_is_approximate, min_abv)
            + _match_approx(Drink.max_abv_val, Drink.max_abv_is_approximate, max_abv)
            + [Drink.multiplier == multiplier]
        )
        return self.session.query(Drink).filter(*filters).order_by(Drink.id).all()

    def _find_identity(
        self,
        name: str,
        min_abv: Optional[ApproximateValue],
        max_abv: Optional[ApproximateValue],
        multiplier: float,
    ) -> Optional[Drink]:
        wanted = drink_identity(name, min_abv, max_abv, multiplier)
        for drink in self._candidates(min_abv, max_abv, multiplier):
            if drink.identity == wanted:
                return drink
        return None

    # =========================================================================
    # QUERIES
    # =========================================================================

    @handle_db_errors
    @log_database_operation("get_drink")
    def get(self, drink_id: int) -> Optional[Drink]:
        return self._get_by_id(Drink, drink_id)

    @handle_db_errors
    @log_database_operation("lookup_drink")
    def lookup(self, drink_id: int) -> Drink:
        """
        Retrieve a drink by id.

        Raises:
            NotFoundError: If no drink has this id
        """
        drink = self._get_by_id(Drink, drink_id)
        if drink is None:
            raise NotFoundError(f"No drink found with id: {drink_id}")
        return drink

    @handle_db_errors
    @log_database_operation("find_drink")
    def find(
        self,
        name: str,
        min_abv: Any = None,
        max_abv: Any = None,
        multiplier: Any = 1.0,
    ) -> Optional[Drink]:
        """Drink with exactly this identity, or None."""
        name, low, high, factor = validate_drink_fields(
            name, min_abv, max_abv, multiplier
        )
        return self._find_identity(name, low, high, factor)

    @handle_db_errors
    @log_database_operation("search_drinks")
    def search(self, fragment: Optional[str] = None) -> List[Drink]:
        """
        Drinks whose name contains ``fragment`` (case-insensitive).

        Returns:
            All drinks ordered by name when ``fragment`` is empty
        """
        drinks = self.session.query(Drink).order_by(Drink.name, Drink.id).all()
        key = DataValidator.normalize_name_key(fragment)
        if not key:
            return drinks
        return [d for d in drinks if key in (DataValidator.normalize_name_key(d.name) or "")]

    @handle_db_errors
    @log_database_operation("get_all_drinks")
    def get_all(self) -> List[Drink]:
        return self._get_all(Drink, order_by="name")

    @handle_db_errors
    @log_database_operation("count_drink_references")
    def reference_count(self, drink: Union[Drink, int]) -> int:
        drink = self._resolve_object(drink, Drink)
        return self._count(Entry, drink_id=drink.id)

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    @handle_db_errors
    @log_database_operation("register_drink")
    def register(
        self,
        name: str,
        min_abv: Any = None,
        max_abv: Any = None,
        multiplier: Any = 1.0,
    ) -> Drink:
        """
        Add a drink to the catalog.

        Args:
            name: Display name
            min_abv: Lower ABV bound in percent (number, ApproximateValue or None)
            max_abv: Upper ABV bound in percent
            multiplier: Standard servings one serving counts as

        Returns:
            The flushed Drink

        Raises:
            DuplicateDrinkError: If a drink with the same identity exists
            InvalidRangeError: If min_abv > max_abv
            ValidationError: For an empty name or invalid numbers
        """
        name, low, high, factor = validate_drink_fields(
            name, min_abv, max_abv, multiplier
        )
        existing = self._find_identity(name, low, high, factor)
        if existing is not None:
            raise DuplicateDrinkError(
                f"Drink already registered: {name!r} (id={existing.id})"
            )

        drink = Drink(name=name, min_abv=low, max_abv=high, multiplier=factor)

        def _do_register() -> Drink:
            self.session.add(drink)
            self.session.flush()
            return drink

        with DatabaseOperation(self.logger, "insert_drink"):
            return self._execute_with_retry(_do_register)

    @handle_db_errors
    @log_database_operation("get_or_create_drink")
    def get_or_create(
        self,
        name: str,
        min_abv: Any = None,
        max_abv: Any = None,
        multiplier: Any = 1.0,
    ) -> Drink:
        """
        Return the drink with this identity, registering it if needed.

        Raises:
            InvalidRangeError: If min_abv > max_abv
            ValidationError: For an empty name or invalid numbers
        """
        name, low, high, factor = validate_drink_fields(
            name, min_abv, max_abv, multiplier
        )
        existing = self._find_identity(name, low, high, factor)
        if existing is not None:
            return existing
        return self.register(name, low, high, factor)

    # =========================================================================
    # DELETION
    # =========================================================================

    @handle_db_errors
    @log_database_operation("delete_drink")
    def delete(self, drink: Union[Drink, int]) -> None:
        """
        Delete an unreferenced drink.

        Raises:
            NotFoundError: If the drink does not exist
            DatabaseError: If any entry references the drink
        """
        drink = self._resolve_object(drink, Drink)
        references = self._count(Entry, drink_id=drink.id)
        if references:
            raise DatabaseError(
                f"Drink {drink.id} is referenced by {references} "
                f"entr{'y' if references == 1 else 'ies'}"
            )
        self.session.delete(drink)
        self.session.flush()
