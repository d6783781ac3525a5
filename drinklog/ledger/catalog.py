"""
Drink Catalog
-------------

Drinks identified by name, ABV range and multiplier.

Two drinks are the same catalog row when their case-insensitive names,
ABV bounds (value and exactness) and multipliers all match. Registration
is the only mutation: there is no update, so correcting a drink means
registering a new one and pointing future entries at it.

``DrinkCatalog`` is the in-memory repository; the database layer's
``DrinkManager`` offers the same register/lookup contract over SQLite and
shares the validation and identity helpers defined here.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple

from drinklog.core.exceptions import (
    DuplicateDrinkError,
    InvalidRangeError,
    NotFoundError,
    ValidationError,
)
from drinklog.core.validators import DataValidator

from .approx import ApproximateValue

DrinkIdentity = Tuple[str, Optional[ApproximateValue], Optional[ApproximateValue], float]


@dataclass(frozen=True)
class Drink:
    """
    A catalog row.

    Attributes:
        id: Catalog id
        name: Display name as registered
        min_abv: Lower ABV bound in percent, if known
        max_abv: Upper ABV bound in percent, if known
        multiplier: Standard servings one serving counts as (e.g. 2.0 for a double)
    """

    id: int
    name: str
    min_abv: Optional[ApproximateValue] = None
    max_abv: Optional[ApproximateValue] = None
    multiplier: float = 1.0

    @property
    def identity(self) -> DrinkIdentity:
        return drink_identity(self.name, self.min_abv, self.max_abv, self.multiplier)


def validate_drink_fields(
    name: Any,
    min_abv: Any = None,
    max_abv: Any = None,
    multiplier: Any = 1.0,
) -> Tuple[str, Optional[ApproximateValue], Optional[ApproximateValue], float]:
    """
    Normalize and check the fields of a new drink.

    Returns:
        (name, min_abv, max_abv, multiplier) with whitespace collapsed and
        ABV bounds coerced to ApproximateValue

    Raises:
        ValidationError: Empty name, ABV outside 0-100, non-positive multiplier
        InvalidRangeError: min_abv greater than max_abv
    """
    clean_name = DataValidator.normalize_string(name)
    if not clean_name:
        raise ValidationError("Drink name can not be empty")

    low = ApproximateValue.coerce(min_abv)
    high = ApproximateValue.coerce(max_abv)
    for label, abv in (("min_abv", low), ("max_abv", high)):
        if abv is not None and not 0 <= abv.value <= 100:
            raise ValidationError(f"{label} must be a percentage, got {abv.value}")

    if low is not None and high is not None and low.value > high.value:
        raise InvalidRangeError(
            f"min_abv {low.value} is greater than max_abv {high.value}"
        )

    factor = DataValidator.normalize_float(multiplier)
    if factor is None:
        factor = 1.0
    DataValidator.validate_positive(factor, "multiplier")

    return clean_name, low, high, factor


def drink_identity(
    name: str,
    min_abv: Optional[ApproximateValue],
    max_abv: Optional[ApproximateValue],
    multiplier: float = 1.0,
) -> DrinkIdentity:
    """Key under which two drinks are indistinguishable."""
    return (
        DataValidator.normalize_name_key(name) or "",
        min_abv,
        max_abv,
        float(multiplier),
    )


class DrinkCatalog:
    """In-memory, append-only drink repository."""

    def __init__(self) -> None:
        self._drinks: Dict[int, Drink] = {}
        self._by_identity: Dict[DrinkIdentity, int] = {}
        self._next_id = 1

    def register(
        self,
        name: str,
        min_abv: Any = None,
        max_abv: Any = None,
        multiplier: float = 1.0,
    ) -> int:
        """
        Add a drink and return its id.

        Raises:
            DuplicateDrinkError: If a drink with the same identity exists
            InvalidRangeError: If min_abv > max_abv
            ValidationError: For an empty name or invalid numbers
        """
        name, low, high, factor = validate_drink_fields(
            name, min_abv, max_abv, multiplier
        )
        identity = drink_identity(name, low, high, factor)
        existing = self._by_identity.get(identity)
        if existing is not None:
            raise DuplicateDrinkError(
                f"Drink already registered: {name!r} (id={existing})"
            )

        drink = Drink(self._next_id, name, low, high, factor)
        self._drinks[drink.id] = drink
        self._by_identity[identity] = drink.id
        self._next_id += 1
        return drink.id

    def lookup(self, drink_id: int) -> Drink:
        """
        Raises:
            NotFoundError: If no drink has this id
        """
        drink = self._drinks.get(drink_id)
        if drink is None:
            raise NotFoundError(f"No drink found with id: {drink_id}")
        return drink

    def find(
        self,
        name: str,
        min_abv: Any = None,
        max_abv: Any = None,
        multiplier: float = 1.0,
    ) -> Optional[Drink]:
        """Drink with this identity, or None."""
        factor = DataValidator.normalize_float(multiplier)
        identity = drink_identity(
            name,
            ApproximateValue.coerce(min_abv),
            ApproximateValue.coerce(max_abv),
            1.0 if factor is None else factor,
        )
        drink_id = self._by_identity.get(identity)
        return self._drinks[drink_id] if drink_id is not None else None

    def get_or_register(
        self,
        name: str,
        min_abv: Any = None,
        max_abv: Any = None,
        multiplier: float = 1.0,
    ) -> int:
        existing = self.find(name, min_abv, max_abv, multiplier)
        if existing is not None:
            return existing.id
        return self.register(name, min_abv, max_abv, multiplier)

    def __len__(self) -> int:
        return len(self._drinks)

    def __iter__(self) -> Iterator[Drink]:
        return iter(list(self._drinks.values()))
