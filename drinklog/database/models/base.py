"""
Base Classes and Mixins
------------------------

Foundational ORM classes for the DrinkLog database.

Classes:
    - Base: Declarative base for all SQLAlchemy models
    - TimestampMixin: created_at / updated_at columns

Functions:
    - approx_property: Expose a ``<name>_val`` / ``<name>_is_approximate``
      column pair as one ApproximateValue attribute
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime, timezone
from typing import Any, Optional

# --- Third party imports ---
from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# --- Local imports ---
from drinklog.ledger.approx import ApproximateValue


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# --- Base ORM class ---
class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Serves as the declarative base for SQLAlchemy models and provides
    access to the metadata object for table creation and migrations.
    """

    pass


# --- Timestamps ---
class TimestampMixin:
    """
    Mixin adding record creation and update timestamps.

    Attributes:
        created_at: When this database record was created
        updated_at: When this database record was last updated
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )


# --- Approximate composites ---
def approx_property(prefix: str, doc: Optional[str] = None) -> property:
    """
    Build a property reading and writing an approximate column pair.

    The model must define ``<prefix>_val`` (Float) and
    ``<prefix>_is_approximate`` (Boolean) columns. Assigning None clears both;
    assigning a number, mapping or pair goes through ApproximateValue.coerce.

    Args:
        prefix: Column name prefix, e.g. "min_abv"
        doc: Property docstring

    Returns:
        property usable as a class attribute and as a constructor keyword
    """
    val_attr = f"{prefix}_val"
    flag_attr = f"{prefix}_is_approximate"

    def getter(self: Any) -> Optional[ApproximateValue]:
        value = getattr(self, val_attr)
        if value is None:
            return None
        return ApproximateValue(value, bool(getattr(self, flag_attr)))

    def setter(self: Any, raw: Any) -> None:
        approx = ApproximateValue.coerce(raw)
        setattr(self, val_attr, approx.value if approx is not None else None)
        setattr(self, flag_attr, approx.is_approximate if approx is not None else None)

    return property(getter, setter, doc=doc)
