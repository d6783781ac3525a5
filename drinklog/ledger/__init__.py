#!/usr/bin/env python3
"""
DrinkLog Ledger Package
-----------------------
Pure measurement and normalization model for the drinks ledger.

Nothing in this package touches a database, a file or a logger; the
database and pipeline layers wrap it.

Modules:
    - approx: ApproximateValue and its arithmetic
    - enums: TimePeriod and VolumeUnit reference sets
    - units: Append-only volume unit registry
    - catalog: Drink identity, validation and the in-memory catalog
    - normalizer: Standard-unit estimates for entries
    - parsers: Parsing of typed quantities, ABVs and volumes
    - schema_evolution: Generation-1 to generation-2 row adapter
"""
from __future__ import annotations

from typing import Any, Optional

from .approx import ApproximateValue, midpoint
from .catalog import Drink, DrinkCatalog, drink_identity, validate_drink_fields
from .enums import TimePeriod, VolumeUnit
from .normalizer import (
    LedgerEntry,
    UnitEstimate,
    check_quantity_range,
    effective_abv,
    normalize_entry,
)
from .schema_evolution import migrate_row_v1_to_v2
from .units import UnitRef, VolumeUnitRegistry, default_registry


def register_drink(
    catalog: DrinkCatalog,
    name: str,
    min_abv: Any = None,
    max_abv: Any = None,
    multiplier: float = 1.0,
) -> int:
    """Register a drink in ``catalog`` and return its id."""
    return catalog.register(name, min_abv, max_abv, multiplier)


def lookup_drink(catalog: DrinkCatalog, drink_id: int) -> Drink:
    return catalog.lookup(drink_id)


def convert_volume(
    value: ApproximateValue,
    from_unit: UnitRef,
    to_unit: UnitRef,
    registry: Optional[VolumeUnitRegistry] = None,
) -> ApproximateValue:
    """Convert ``value`` between units using ``registry`` (default units if omitted)."""
    return (registry or default_registry()).convert(value, from_unit, to_unit)


__all__ = [
    # Values
    "ApproximateValue",
    "midpoint",
    # Reference sets
    "TimePeriod",
    "VolumeUnit",
    # Units
    "VolumeUnitRegistry",
    "default_registry",
    "convert_volume",
    # Catalog
    "Drink",
    "DrinkCatalog",
    "drink_identity",
    "validate_drink_fields",
    "register_drink",
    "lookup_drink",
    # Normalizer
    "LedgerEntry",
    "UnitEstimate",
    "check_quantity_range",
    "effective_abv",
    "normalize_entry",
    # Schema evolution
    "migrate_row_v1_to_v2",
]
