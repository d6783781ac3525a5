"""
Database Models Package
------------------------

SQLAlchemy ORM models for the generation-2 DrinkLog schema.

This package provides:
- base: Base class, timestamp mixin and approximate column pairs
- core: Person, Drink and Entry
- lookups: TimePeriodRecord and VolumeUnitRecord reference tables

Usage:
    from drinklog.database.models import Drink, Entry, Person
"""
# Base classes
from .base import Base, TimestampMixin, approx_property

# Core models
from .core import Drink, Entry, Person

# Lookup tables
from .lookups import TimePeriodRecord, VolumeUnitRecord

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "approx_property",
    # Core
    "Person",
    "Drink",
    "Entry",
    # Lookups
    "TimePeriodRecord",
    "VolumeUnitRecord",
]
