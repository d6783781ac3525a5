"""
Entry Normalizer
----------------

Estimate how many standard alcohol units a logged entry amounts to.

Policy, applied separately to the entry's minimum and maximum quantity:

    * Effective ABV is the midpoint of the drink's ABV bounds, or the one
      bound that is present, or undefined.
    * With an ABV and a volume in a known unit:
          units = volume_mL * ABV/100 * density_constant * quantity
    * Otherwise each serving counts as ``multiplier`` units, whatever the
      volume.

The result is approximate whenever any input that contributed to it was
flagged approximate. Whether the ABV was present does not affect the flag,
and unit conversion factors are exact.

``density_constant`` (standard units per mL of pure ethanol) depends on the
jurisdiction and is always supplied by the caller; see
``drinklog.core.config.StandardUnit``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Protocol, Tuple

from drinklog.core.exceptions import IncompleteDataError, InvalidRangeError

from .approx import DEFAULT_APPROX_MODIFIER, ApproximateValue, _check_finite, midpoint
from .enums import TimePeriod
from .units import VolumeUnitRegistry, default_registry

METHOD_ABV_VOLUME = "abv_volume"
METHOD_MULTIPLIER = "multiplier"


class DrinkLike(Protocol):
    min_abv: Optional[ApproximateValue]
    max_abv: Optional[ApproximateValue]
    multiplier: float


class EntryLike(Protocol):
    min_quantity: Optional[ApproximateValue]
    max_quantity: Optional[ApproximateValue]
    volume: Optional[ApproximateValue]
    volume_unit: Any


@dataclass(frozen=True)
class LedgerEntry:
    """
    An entry held in memory, outside any database.

    ORM entries expose the same attributes, so both can be normalized.
    """

    drink_id: int
    drank_on: date
    time_period: TimePeriod
    min_quantity: Optional[ApproximateValue]
    max_quantity: Optional[ApproximateValue]
    volume: Optional[ApproximateValue] = None
    volume_unit: Optional[str] = None
    person_id: int = 1
    context: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # A missing quantity is reported by normalize_entry
        if self.min_quantity is not None and self.max_quantity is not None:
            check_quantity_range(self.min_quantity, self.max_quantity)


@dataclass(frozen=True)
class UnitEstimate:
    """
    Standard-unit range for one entry.

    Attributes:
        min_units: Units for the entry's minimum quantity
        max_units: Units for the entry's maximum quantity
        method: METHOD_ABV_VOLUME or METHOD_MULTIPLIER
        min_volume_ml: Total volume poured at the minimum quantity, if known
        max_volume_ml: Total volume poured at the maximum quantity, if known
    """

    min_units: ApproximateValue
    max_units: ApproximateValue
    method: str
    min_volume_ml: Optional[ApproximateValue] = None
    max_volume_ml: Optional[ApproximateValue] = None

    @property
    def is_approximate(self) -> bool:
        return self.min_units.is_approximate or self.max_units.is_approximate

    def as_tuple(self) -> Tuple[float, float]:
        return (self.min_units.value, self.max_units.value)

    def bounds(self, modifier: float = DEFAULT_APPROX_MODIFIER) -> Tuple[float, float]:
        """Widest plausible range once approximate values are spread out."""
        return (self.min_units.lower(modifier), self.max_units.upper(modifier))


def effective_abv(drink: DrinkLike) -> Optional[ApproximateValue]:
    """ABV in percent used for estimates, or None when the drink has none."""
    low, high = drink.min_abv, drink.max_abv
    if low is not None and high is not None:
        return midpoint(low, high)
    return low if low is not None else high


def check_quantity_range(
    min_quantity: Optional[ApproximateValue], max_quantity: Optional[ApproximateValue]
) -> Tuple[ApproximateValue, ApproximateValue]:
    """
    Validate an entry's quantity range.

    A single missing bound is filled from the other one.

    Raises:
        IncompleteDataError: If both bounds are missing
        InvalidRangeError: If min_quantity > max_quantity
    """
    if min_quantity is None and max_quantity is None:
        raise IncompleteDataError("Entry has no quantity")
    low = min_quantity if min_quantity is not None else max_quantity
    high = max_quantity if max_quantity is not None else min_quantity
    if low.value > high.value:
        raise InvalidRangeError(
            f"min_quantity {low.value} is greater than max_quantity {high.value}"
        )
    return low, high


def normalize_entry(
    entry: EntryLike,
    drink: DrinkLike,
    density_constant: float,
    registry: Optional[VolumeUnitRegistry] = None,
) -> UnitEstimate:
    """
    Compute the standard-unit range of an entry.

    Args:
        entry: Entry with quantity range and optional volume/unit
        drink: The drink the entry references
        density_constant: Standard units per mL of pure ethanol
        registry: Unit registry; a default one is built when omitted

    Returns:
        UnitEstimate

    Raises:
        IncompleteDataError: If the entry has no quantity at all
        InvalidRangeError: If min_quantity > max_quantity
        UnknownUnitError: If the entry's volume unit is not registered
        ValueError: If density_constant is not a positive finite number
    """
    density = _check_finite(density_constant, "density_constant")
    if density <= 0:
        raise ValueError(f"density_constant must be positive, got {density_constant}")

    low_qty, high_qty = check_quantity_range(entry.min_quantity, entry.max_quantity)

    registry = registry or default_registry()
    multiplier = float(drink.multiplier if drink.multiplier is not None else 1.0)

    volume_ml: Optional[ApproximateValue] = None
    if entry.volume is not None and entry.volume_unit is not None:
        volume_ml = registry.to_ml(entry.volume, entry.volume_unit)

    abv = effective_abv(drink)
    if abv is not None and volume_ml is not None:
        per_serving = volume_ml.multiply(abv).scale_by(density / 100.0)
        method = METHOD_ABV_VOLUME
        min_units = per_serving.multiply(low_qty)
        max_units = per_serving.multiply(high_qty)
    else:
        method = METHOD_MULTIPLIER
        min_units = low_qty.scale_by(multiplier)
        max_units = high_qty.scale_by(multiplier)

    min_volume = max_volume = None
    if volume_ml is not None:
        min_volume = volume_ml.multiply(low_qty).scale_by(multiplier)
        max_volume = volume_ml.multiply(high_qty).scale_by(multiplier)

    return UnitEstimate(min_units, max_units, method, min_volume, max_volume)
