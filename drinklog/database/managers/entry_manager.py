#!/usr/bin/env python3
"""
entry_manager.py
--------------------
Manages logged Entry rows and their standard-unit estimates.

Entries are never deleted one by one; they go when their person is
deleted (see PersonManager.delete).

Key Features:
    - Create entries with quantity range, time period and volume validation
    - Per-person listing, newest first, with an optional date range
    - Lookup by (person, id)
    - Standard-unit normalization through drinklog.ledger.normalizer

Usage:
    entry_mgr = EntryManager(session, logger)

    entry = entry_mgr.create({
        "person_id": 1,
        "drink_id": stout.id,
        "drank_on": "2024-10-01",
        "time_period": "evening",
        "min_quantity": 1,
        "max_quantity": 2,
        "volume": 355,
        "volume_unit": "mL",
    })
    estimate = entry_mgr.normalize(entry, density_constant=0.1)
"""
from typing import Any, Dict, List, Optional, Union

from drinklog.core.exceptions import UnknownUnitError, ValidationError
from drinklog.core.validators import DataValidator
from drinklog.database.decorators import (
    handle_db_errors,
    log_database_operation,
    validate_metadata,
)
from drinklog.database.models import Drink, Entry, Person, VolumeUnitRecord
from drinklog.ledger.approx import ApproximateValue
from drinklog.ledger.enums import TimePeriod, VolumeUnit
from drinklog.ledger.normalizer import UnitEstimate, check_quantity_range, normalize_entry
from drinklog.ledger.parsers import parse_time_period
from drinklog.ledger.units import VolumeUnitRegistry
from .base_manager import BaseManager


class EntryManager(BaseManager):
    """Manages Entry table operations."""

    # -------------------------------------------------------------------------
    # Field resolution
    # -------------------------------------------------------------------------

    @staticmethod
    def _time_id(value: Any) -> int:
        if isinstance(value, TimePeriod):
            return value.surrogate_id
        return parse_time_period(value).surrogate_id

    def _volume_unit_id(self, value: Any) -> int:
        """
        Raises:
            UnknownUnitError: If no volume_unit row matches
        """
        if isinstance(value, VolumeUnit):
            return value.surrogate_id
        unit = VolumeUnit.from_str(value) if isinstance(value, str) else None
        if unit is not None:
            return unit.surrogate_id
        record = (
            self.session.query(VolumeUnitRecord)
            .filter_by(abbr=str(value).strip().lower())
            .first()
        )
        if record is None:
            raise UnknownUnitError(f"Unknown volume unit: {value!r}")
        return record.id

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("get_entry")
    def get(self, entry_id: int, person_id: Optional[int] = None) -> Optional[Entry]:
        """
        Retrieve an entry by id, optionally scoped to one person.

        Returns:
            Entry if found (and owned by ``person_id`` when given), None otherwise
        """
        entry = self._get_by_id(Entry, entry_id)
        if entry is None:
            return None
        if person_id is not None and entry.person_id != person_id:
            return None
        return entry

    @handle_db_errors
    @log_database_operation("list_entries")
    def list_for_person(
        self,
        person_id: int,
        start: Optional[Any] = None,
        end: Optional[Any] = None,
    ) -> List[Entry]:
        """
        A person's entries, newest day first and by time of day within a day.

        Args:
            person_id: Owner of the entries
            start: Earliest ``drank_on`` to include (inclusive)
            end: Latest ``drank_on`` to include (inclusive)

        Raises:
            ValidationError: If a bound is not a date or if start > end
        """
        start_date = DataValidator.normalize_date(start)
        end_date = DataValidator.normalize_date(end)
        if start_date and end_date and start_date > end_date:
            raise ValidationError(f"Start date {start_date} is after end date {end_date}")

        query = self.session.query(Entry).filter(Entry.person_id == person_id)
        if start_date is not None:
            query = query.filter(Entry.drank_on >= start_date)
        if end_date is not None:
            query = query.filter(Entry.drank_on <= end_date)
        return query.order_by(Entry.drank_on.desc(), Entry.time_id.asc(), Entry.id).all()

    @handle_db_errors
    @log_database_operation("count_entries")
    def count(self, person_id: Optional[int] = None) -> int:
        if person_id is None:
            return self._count(Entry)
        return self._count(Entry, person_id=person_id)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("create_entry")
    @validate_metadata(["person_id", "drink_id", "drank_on", "time_period"])
    def create(self, metadata: Dict[str, Any]) -> Entry:
        """
        Create a new entry.

        Args:
            metadata: Dictionary with required keys:
                - person_id: Person id (or Person)
                - drink_id: Drink id (or Drink)
                - drank_on: date or ISO date string
                - time_period: TimePeriod or its name
                Optional keys:
                - min_quantity / max_quantity: At least one of them; numbers,
                  ApproximateValue or {"val", "is_approximate"} mappings
                - volume: Volume of one serving
                - volume_unit: Unit of ``volume`` (required with volume)

        Returns:
            The flushed Entry

        Raises:
            IncompleteDataError: If both quantities are missing
            InvalidRangeError: If min_quantity > max_quantity
            ValidationError: For an invalid date, period or volume
            NotFoundError: If the person or drink does not exist
            UnknownUnitError: If the volume unit has no lookup row
        """
        person = self._resolve_object(metadata["person_id"], Person)
        drink = self._resolve_object(metadata["drink_id"], Drink)

        drank_on = DataValidator.normalize_date(metadata["drank_on"])
        low, high = check_quantity_range(
            ApproximateValue.coerce(metadata.get("min_quantity")),
            ApproximateValue.coerce(metadata.get("max_quantity")),
        )
        if low.value < 0:
            raise ValidationError(f"Quantity can not be negative: {low.value}")

        volume = ApproximateValue.coerce(metadata.get("volume"))
        unit = metadata.get("volume_unit")
        if volume is not None:
            DataValidator.validate_positive(volume.value, "volume")
            if unit is None:
                raise ValidationError("A volume needs a volume_unit")
            volume_unit_id: Optional[int] = self._volume_unit_id(unit)
        else:
            volume_unit_id = None

        entry = Entry(
            person_id=person.id,
            drink_id=drink.id,
            drank_on=drank_on,
            time_id=self._time_id(metadata["time_period"]),
            min_quantity=low,
            max_quantity=high,
            volume=volume,
            volume_unit_id=volume_unit_id,
        )
        self.session.add(entry)
        self.session.flush()
        return entry

    # -------------------------------------------------------------------------
    # Normalization
    # -------------------------------------------------------------------------

    @log_database_operation("normalize_entry")
    def normalize(
        self,
        entry: Union[Entry, int],
        density_constant: float,
        registry: Optional[VolumeUnitRegistry] = None,
    ) -> UnitEstimate:
        """
        Standard-unit range of a stored entry.

        Raises:
            NotFoundError: If the entry id does not exist
        """
        entry = self._resolve_object(entry, Entry)
        return normalize_entry(entry, entry.drink, density_constant, registry)

