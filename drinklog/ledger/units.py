"""
Volume Unit Registry
--------------------

Conversion factors from liquid-volume units to millilitres.

The registry is append-only: units can be added at runtime, but a factor
is never changed once registered, so historical estimates stay
reproducible. Registries are plain objects passed to whatever needs them;
``default_registry()`` builds one seeded with the four standard units.

Usage:
    >>> registry = default_registry()
    >>> registry.convert(ApproximateValue(12), "fl oz", VolumeUnit.ML).value
    354.882
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple, Union

from drinklog.core.exceptions import UnknownUnitError, ValidationError

from .approx import ApproximateValue, _check_finite
from .enums import VolumeUnit

BASE_UNIT = VolumeUnit.ML.value

# Millilitres per unit.
STANDARD_FACTORS: Dict[VolumeUnit, float] = {
    VolumeUnit.FL_OZ: 29.5735,
    VolumeUnit.ML: 1.0,
    VolumeUnit.CL: 10.0,
    VolumeUnit.L: 1000.0,
}

_LEGACY_ALIASES: Dict[VolumeUnit, Tuple[str, ...]] = {
    VolumeUnit.FL_OZ: ("oz", "floz", "fl. oz", "fl. oz."),
}


@dataclass(frozen=True)
class UnitDefinition:
    """
    One registered unit.

    Attributes:
        name: Canonical spelling ("fl oz", "mL", ...)
        ml_factor: Millilitres in one of this unit
        aliases: Extra spellings accepted on lookup
    """

    name: str
    ml_factor: float
    aliases: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def abbr(self) -> str:
        return self.name.lower()


UnitRef = Union[str, VolumeUnit, UnitDefinition]


def _key(text: str) -> str:
    return " ".join(text.strip().lower().split())


class VolumeUnitRegistry:
    """Append-only mapping from unit names to millilitre factors."""

    def __init__(self) -> None:
        self._units: Dict[str, UnitDefinition] = {}
        self._lookup: Dict[str, str] = {}

    def register(
        self, name: str, ml_factor: float, aliases: Tuple[str, ...] = ()
    ) -> UnitDefinition:
        """
        Add a unit.

        Re-registering an identical definition is a no-op.

        Raises:
            ValidationError: If the factor is not positive, or if the name or
                an alias is already bound to a different factor or unit
        """
        factor = _check_finite(ml_factor, "ml_factor")
        if factor <= 0:
            raise ValidationError(f"ml_factor must be positive, got {ml_factor}")

        name = name.strip()
        existing = self._units.get(_key(name))
        if existing is not None:
            if existing.ml_factor != factor:
                raise ValidationError(
                    f"Unit {name!r} is already registered with factor "
                    f"{existing.ml_factor}; factors cannot change"
                )
            return existing

        spellings = [_key(name)] + [_key(a) for a in aliases]
        for spelling in spellings:
            owner = self._lookup.get(spelling)
            if owner is not None and owner != _key(name):
                raise ValidationError(
                    f"Spelling {spelling!r} already refers to unit {owner!r}"
                )

        definition = UnitDefinition(name, factor, tuple(aliases))
        self._units[_key(name)] = definition
        for spelling in spellings:
            self._lookup[spelling] = _key(name)
        return definition

    def resolve(self, unit: UnitRef) -> UnitDefinition:
        """
        Find a registered unit by enum member, definition or spelling.

        Raises:
            UnknownUnitError: If the unit is not registered
        """
        if isinstance(unit, UnitDefinition):
            text = unit.name
        elif isinstance(unit, VolumeUnit):
            text = unit.value
        elif isinstance(unit, str):
            text = unit
        else:
            raise UnknownUnitError(f"Unknown volume unit: {unit!r}")

        name = self._lookup.get(_key(text))
        if name is None:
            raise UnknownUnitError(f"Unknown volume unit: {text!r}")
        return self._units[name]

    def factor(self, unit: UnitRef) -> float:
        """Millilitres in one of ``unit``."""
        return self.resolve(unit).ml_factor

    def convert(
        self, value: ApproximateValue, from_unit: UnitRef, to_unit: UnitRef
    ) -> ApproximateValue:
        """
        Convert a volume between units.

        Factors are exact, so the result keeps the input's flag.

        Raises:
            UnknownUnitError: If either unit is not registered
        """
        source = self.resolve(from_unit)
        target = self.resolve(to_unit)
        if source is target:
            return value
        return value.scale_by(source.ml_factor / target.ml_factor)

    def to_ml(self, value: ApproximateValue, unit: UnitRef) -> ApproximateValue:
        return self.convert(value, unit, BASE_UNIT)

    def __contains__(self, unit: object) -> bool:
        try:
            self.resolve(unit)  # type: ignore[arg-type]
        except UnknownUnitError:
            return False
        return True

    def __iter__(self) -> Iterator[UnitDefinition]:
        return iter(list(self._units.values()))

    def __len__(self) -> int:
        return len(self._units)

    def names(self) -> List[str]:
        return [unit.name for unit in self._units.values()]


def default_registry() -> VolumeUnitRegistry:
    """New registry holding fl oz, mL, cL and L."""
    registry = VolumeUnitRegistry()
    for unit, factor in STANDARD_FACTORS.items():
        registry.register(unit.value, factor, _LEGACY_ALIASES.get(unit, ()))
    return registry
