"""
Schema Evolution Adapter
------------------------

Map rows of the first schema generation onto the second.

Generation 1 stored time periods and volume units as inline enums, volumes
as a ``(REALAPPROX, VOLUMEUNIT)`` composite (plus a redundant ``volume_ml``
copy), and free-text ``context`` as a string array. Generation 2 moves the
enums into lookup tables with fixed surrogate ids, stores the volume amount
and a ``volume_unit_id`` side by side, and drops ``context``.

``migrate_row_v1_to_v2`` works on one row at a time with no shared state,
so batches can be split across workers in any order. It is idempotent:
a generation-2 row comes back unchanged.

Composite values may arrive as ApproximateValue, ``{"val", "is_approximate"}``
mappings or ``(val, is_approximate)`` pairs; they always leave as
ApproximateValue.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from drinklog.core.exceptions import UnmappableValueError

from .approx import ApproximateValue
from .enums import TimePeriod, VolumeUnit

Row = Dict[str, Any]

# Seed rows for the generation-2 lookup tables.
TIME_PERIOD_ROWS: List[Row] = [
    {"id": period.surrogate_id, "name": period.value} for period in TimePeriod
]
VOLUME_UNIT_ROWS: List[Row] = [
    {"id": unit.surrogate_id, "abbr": unit.abbr} for unit in VolumeUnit
]

_TIME_PERIOD_IDS: Dict[str, int] = {p.value: p.surrogate_id for p in TimePeriod}

# Generation-1 enum labels, plus the lower-cased generation-2 abbreviations.
_VOLUME_UNIT_IDS: Dict[str, int] = {u.value: u.surrogate_id for u in VolumeUnit}
_VOLUME_UNIT_IDS.update({u.abbr: u.surrogate_id for u in VolumeUnit})

_TIMESTAMPS = ("created_at", "updated_at")


def map_time_period(value: Any) -> int:
    """
    Surrogate id for a generation-1 TIMEPERIOD label.

    Ids that are already valid pass through.

    Raises:
        UnmappableValueError: If the value has no generation-2 counterpart
    """
    if isinstance(value, TimePeriod):
        return value.surrogate_id
    if isinstance(value, int) and not isinstance(value, bool):
        if TimePeriod.from_id(value) is not None:
            return value
    elif isinstance(value, str) and value in _TIME_PERIOD_IDS:
        return _TIME_PERIOD_IDS[value]
    raise UnmappableValueError(f"Unknown time period: {value!r}")


def map_volume_unit(value: Any) -> int:
    """
    Surrogate id for a generation-1 VOLUMEUNIT label.

    Raises:
        UnmappableValueError: If the value has no generation-2 counterpart
    """
    if isinstance(value, VolumeUnit):
        return value.surrogate_id
    if isinstance(value, int) and not isinstance(value, bool):
        if VolumeUnit.from_id(value) is not None:
            return value
    elif isinstance(value, str) and value in _VOLUME_UNIT_IDS:
        return _VOLUME_UNIT_IDS[value]
    raise UnmappableValueError(f"Unknown volume unit: {value!r}")


def _approx(value: Any, column: str) -> Optional[ApproximateValue]:
    try:
        return ApproximateValue.coerce(value)
    except ValueError as e:
        raise UnmappableValueError(f"Invalid {column} value: {value!r}") from e


def _split_volume(composite: Any) -> Tuple[Optional[ApproximateValue], Any]:
    """Unpack a generation-1 VOLUME composite into (amount, unit label)."""
    if composite is None:
        return None, None
    if isinstance(composite, Mapping):
        amount = composite.get("volume", composite.get("amount"))
        return _approx(amount, "volume"), composite.get("unit")
    if isinstance(composite, (tuple, list)) and len(composite) == 2:
        return _approx(composite[0], "volume"), composite[1]
    raise UnmappableValueError(f"Invalid volume composite: {composite!r}")


def _copy_timestamps(row: Mapping[str, Any], out: Row) -> None:
    for key in _TIMESTAMPS:
        if key in row:
            out[key] = row[key]


def _migrate_person(row: Mapping[str, Any]) -> Row:
    out: Row = {"id": row["id"]}
    _copy_timestamps(row, out)
    return out


def _migrate_drink(row: Mapping[str, Any]) -> Row:
    multiplier = row.get("multiplier")
    out: Row = {
        "id": row["id"],
        "name": row["name"],
        "min_abv": _approx(row.get("min_abv"), "min_abv"),
        "max_abv": _approx(row.get("max_abv"), "max_abv"),
        "multiplier": 1.0 if multiplier is None else float(multiplier),
    }
    _copy_timestamps(row, out)
    return out


def _migrate_entry(row: Mapping[str, Any]) -> Row:
    if "time_period" in row:
        time_id = map_time_period(row["time_period"])
    elif "time_id" in row:
        time_id = map_time_period(row["time_id"])
    else:
        raise UnmappableValueError("Entry row has no time period")

    if "volume_unit_id" in row:
        volume = _approx(row.get("volume"), "volume")
        unit_id = row["volume_unit_id"]
        volume_unit_id = map_volume_unit(unit_id) if unit_id is not None else None
    else:
        volume, unit = _split_volume(row.get("volume"))
        if volume is None:
            # Generation 1 kept a millilitre copy that may outlive the original.
            volume, unit = _split_volume(row.get("volume_ml"))
        volume_unit_id = map_volume_unit(unit) if volume is not None else None

    out: Row = {
        "id": row.get("id"),
        "person_id": row["person_id"],
        "drank_on": row["drank_on"],
        "time_id": time_id,
        "drink_id": row["drink_id"],
        "min_quantity": _approx(row["min_quantity"], "min_quantity"),
        "max_quantity": _approx(row["max_quantity"], "max_quantity"),
        "volume": volume,
        "volume_unit_id": volume_unit_id,
    }
    if out["id"] is None:
        del out["id"]
    _copy_timestamps(row, out)
    return out


_MIGRATIONS: Dict[str, Callable[[Mapping[str, Any]], Row]] = {
    "person": _migrate_person,
    "drink": _migrate_drink,
    "entry": _migrate_entry,
}


def migrate_row_v1_to_v2(table: str, row: Mapping[str, Any]) -> Row:
    """
    Rewrite one generation-1 row in generation-2 shape.

    Args:
        table: Source table name ("person", "drink" or "entry")
        row: Column mapping for one row

    Returns:
        New dict for the generation-2 table; the input is not modified

    Raises:
        UnmappableValueError: For an unknown table, an enum value with no
            generation-2 counterpart, or a malformed composite
        KeyError: If a mandatory column is missing from the row
    """
    migrate = _MIGRATIONS.get(table)
    if migrate is None:
        raise UnmappableValueError(f"No generation-2 mapping for table: {table!r}")
    return migrate(row)
