"""
Core Models
------------

Central models for the DrinkLog database.

Models:
    - Person: Someone whose drinking is logged
    - Drink: Catalog row identified by name, ABV range and multiplier
    - Entry: One logged drinking occasion

Approximate values are stored as a ``<name>_val`` / ``<name>_is_approximate``
column pair and read back through ApproximateValue properties.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import date
from typing import TYPE_CHECKING, List, Optional

# --- Third party imports ---
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

# --- Local imports ---
from drinklog.ledger.catalog import drink_identity
from drinklog.ledger.enums import TimePeriod, VolumeUnit

from .base import Base, TimestampMixin, approx_property

if TYPE_CHECKING:
    from .lookups import TimePeriodRecord, VolumeUnitRecord


# ----- Person -----
class Person(Base, TimestampMixin):
    """
    Someone whose drinking is logged.

    Deleting a person deletes all of their entries.

    Attributes:
        id: Primary key

    Relationships:
        entries: One-to-many with Entry
    """

    __tablename__ = "person"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    entries: Mapped[List["Entry"]] = relationship(
        "Entry",
        back_populates="person",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def entry_count(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"<Person(id={self.id})>"


# ----- Drink -----
class Drink(Base, TimestampMixin):
    """
    A catalog row.

    Drinks are never updated once registered; a corrected drink is a new row.

    Attributes:
        id: Primary key
        name: Display name as registered
        min_abv: Lower ABV bound in percent (ApproximateValue), optional
        max_abv: Upper ABV bound in percent (ApproximateValue), optional
        multiplier: Standard servings one serving counts as

    Relationships:
        entries: One-to-many with Entry
    """

    __tablename__ = "drink"
    __table_args__ = (
        UniqueConstraint(
            "name",
            "min_abv_val",
            "min_abv_is_approximate",
            "max_abv_val",
            "max_abv_is_approximate",
            "multiplier",
            name="uq_drink_identity",
        ),
        CheckConstraint("name != ''", name="ck_drink_non_empty_name"),
        CheckConstraint("multiplier > 0", name="ck_drink_positive_multiplier"),
        CheckConstraint(
            "min_abv_val IS NULL OR max_abv_val IS NULL OR min_abv_val <= max_abv_val",
            name="ck_drink_abv_range",
        ),
    )

    # ---- Primary fields ----
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    min_abv_val: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    min_abv_is_approximate: Mapped[Optional[bool]] = mapped_column(
        Boolean, nullable=True
    )
    max_abv_val: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    max_abv_is_approximate: Mapped[Optional[bool]] = mapped_column(
        Boolean, nullable=True
    )
    multiplier: Mapped[float] = mapped_column(Float, default=1.0, nullable=False)

    # ---- Relationships ----
    entries: Mapped[List["Entry"]] = relationship("Entry", back_populates="drink")

    # ---- Composites ----
    min_abv = approx_property("min_abv", "Lower ABV bound in percent")
    max_abv = approx_property("max_abv", "Upper ABV bound in percent")

    @property
    def identity(self):
        return drink_identity(self.name, self.min_abv, self.max_abv, self.multiplier)

    @property
    def abv_display(self) -> str:
        low, high = self.min_abv, self.max_abv
        if low is None and high is None:
            return "?"
        if low is None or high is None or low == high:
            return f"{low or high}%"
        return f"{low}-{high}%"

    def __repr__(self) -> str:
        return f"<Drink(id={self.id}, name={self.name})>"

    def __str__(self) -> str:
        return f"{self.name} ({self.abv_display})"


Index("ix_drink_name_lower", func.lower(Drink.name))


# ----- Entry -----
class Entry(Base, TimestampMixin):
    """
    One logged drinking occasion.

    Attributes:
        id: Primary key
        person_id: Who drank
        drank_on: Calendar date
        time_id: Surrogate id of the TimePeriod
        drink_id: What was drunk
        min_quantity: Lower bound of servings (ApproximateValue)
        max_quantity: Upper bound of servings (ApproximateValue)
        volume: Volume of one serving (ApproximateValue), optional
        volume_unit_id: Unit of ``volume``, optional

    Relationships:
        person: Many-to-one with Person
        drink: Many-to-one with Drink
        time: Many-to-one with TimePeriodRecord
        unit: Many-to-one with VolumeUnitRecord
    """

    __tablename__ = "entry"
    __table_args__ = (
        CheckConstraint(
            "min_quantity_val <= max_quantity_val", name="ck_entry_quantity_range"
        ),
        CheckConstraint("min_quantity_val >= 0", name="ck_entry_positive_quantity"),
        Index("ix_entry_person_drank_on", "person_id", "drank_on"),
    )

    # ---- Primary fields ----
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    person_id: Mapped[int] = mapped_column(
        ForeignKey("person.id", ondelete="CASCADE"), nullable=False
    )
    drank_on: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    time_id: Mapped[int] = mapped_column(
        ForeignKey("time_period.id", ondelete="RESTRICT"), nullable=False
    )
    drink_id: Mapped[int] = mapped_column(
        ForeignKey("drink.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    min_quantity_val: Mapped[float] = mapped_column(Float, nullable=False)
    min_quantity_is_approximate: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    max_quantity_val: Mapped[float] = mapped_column(Float, nullable=False)
    max_quantity_is_approximate: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    volume_val: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    volume_is_approximate: Mapped[Optional[bool]] = mapped_column(
        Boolean, nullable=True
    )
    volume_unit_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("volume_unit.id", ondelete="RESTRICT"), nullable=True
    )

    # ---- Relationships ----
    person: Mapped["Person"] = relationship("Person", back_populates="entries")
    drink: Mapped["Drink"] = relationship("Drink", back_populates="entries")
    time: Mapped["TimePeriodRecord"] = relationship(
        "TimePeriodRecord", back_populates="entries"
    )
    unit: Mapped[Optional["VolumeUnitRecord"]] = relationship(
        "VolumeUnitRecord", back_populates="entries"
    )

    # ---- Composites ----
    min_quantity = approx_property("min_quantity", "Lower bound of servings")
    max_quantity = approx_property("max_quantity", "Upper bound of servings")
    volume = approx_property("volume", "Volume of one serving")

    # ---- Computed properties ----
    @property
    def time_period(self) -> TimePeriod:
        period = TimePeriod.from_id(self.time_id)
        if period is None:
            raise ValueError(f"Unknown time period id: {self.time_id}")
        return period

    @property
    def volume_unit(self) -> Optional[str]:
        """Unit abbreviation for ``volume``, as the unit registry spells it."""
        if self.unit is not None:
            return self.unit.abbr
        if self.volume_unit_id is None:
            return None
        unit = VolumeUnit.from_id(self.volume_unit_id)
        return unit.abbr if unit is not None else None

    @property
    def quantity_display(self) -> str:
        low, high = self.min_quantity, self.max_quantity
        if low == high:
            return str(low)
        return f"{low}-{high}"

    @property
    def volume_display(self) -> str:
        if self.volume is None:
            return ""
        return f"{self.volume} {self.volume_unit or ''}".strip()

    def __repr__(self) -> str:
        return (
            f"<Entry(id={self.id}, person_id={self.person_id}, "
            f"drank_on={self.drank_on}, drink_id={self.drink_id})>"
        )
