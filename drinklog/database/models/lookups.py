"""
Lookup Models
--------------

Fixed reference tables for the generation-2 schema.

Models:
    - TimePeriodRecord: One row per TimePeriod (ids 1..4)
    - VolumeUnitRecord: One row per VolumeUnit, keyed by lower-cased abbreviation

Rows are seeded when the schema is created and never change afterwards;
entries reference them by surrogate id.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import TYPE_CHECKING, List

# --- Third party imports ---
from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

# --- Local imports ---
from drinklog.ledger.enums import TimePeriod, VolumeUnit

from .base import Base

if TYPE_CHECKING:
    from .core import Entry


class TimePeriodRecord(Base):
    """
    Lookup row for a time of day.

    Attributes:
        id: Surrogate id (morning=1, afternoon=2, evening=3, night=4)
        name: Lower-case period name
    """

    __tablename__ = "time_period"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)

    entries: Mapped[List["Entry"]] = relationship("Entry", back_populates="time")

    @property
    def period(self) -> TimePeriod:
        return TimePeriod(self.name)

    def __repr__(self) -> str:
        return f"<TimePeriodRecord(id={self.id}, name={self.name})>"


class VolumeUnitRecord(Base):
    """
    Lookup row for a volume unit.

    Attributes:
        id: Surrogate id (fl oz=1, ml=2, cl=3, l=4)
        abbr: Lower-cased abbreviation
    """

    __tablename__ = "volume_unit"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    abbr: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)

    entries: Mapped[List["Entry"]] = relationship("Entry", back_populates="unit")

    @property
    def volume_unit(self) -> VolumeUnit:
        unit = VolumeUnit.from_str(self.abbr)
        if unit is None:
            raise ValueError(f"Unknown volume unit abbreviation: {self.abbr}")
        return unit

    def __repr__(self) -> str:
        return f"<VolumeUnitRecord(id={self.id}, abbr={self.abbr})>"
