"""
Enumerated Reference Sets
-------------------------

Closed categorical sets used by ledger entries.

Enums:
    - TimePeriod: Vague quarter of the day an entry was drunk in
    - VolumeUnit: Recognized units of liquid volume

Each member has a stable surrogate id. The first schema generation stored
these as inline database enums; the second stores them in lookup tables
keyed by these ids, so the ids must never be renumbered.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from enum import Enum
from typing import Dict, List, Optional


class TimePeriod(str, Enum):
    """
    The day split into vague quarters, in chronological order.
    """

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available time period choices."""
        return [period.value for period in cls]

    @classmethod
    def from_str(cls, text: Optional[str]) -> Optional["TimePeriod"]:
        """Case-insensitive lookup; None if not a time period word."""
        if not text:
            return None
        try:
            return cls(text.strip().lower())
        except ValueError:
            return None

    @classmethod
    def from_id(cls, surrogate_id: int) -> Optional["TimePeriod"]:
        for period in cls:
            if period.surrogate_id == surrogate_id:
                return period
        return None

    @property
    def surrogate_id(self) -> int:
        """Stable lookup-table id (morning=1 … night=4)."""
        return _TIME_PERIOD_IDS[self]

    @property
    def display_name(self) -> str:
        return self.value.title()


class VolumeUnit(str, Enum):
    """
    Recognized units of liquid volume.

    Values are the generation-1 spellings; ``abbr`` is the lower-cased
    form used by the generation-2 lookup table.
    """

    FL_OZ = "fl oz"
    ML = "mL"
    CL = "cL"
    L = "L"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available unit spellings."""
        return [unit.value for unit in cls]

    @classmethod
    def from_str(cls, text: Optional[str]) -> Optional["VolumeUnit"]:
        """
        Case-insensitive lookup accepting legacy aliases ("oz", "floz").

        Returns:
            The unit, or None if the text names no known unit
        """
        if not text:
            return None
        key = " ".join(text.strip().lower().split())
        return _UNIT_ALIASES.get(key)

    @classmethod
    def from_id(cls, surrogate_id: int) -> Optional["VolumeUnit"]:
        for unit in cls:
            if unit.surrogate_id == surrogate_id:
                return unit
        return None

    @property
    def abbr(self) -> str:
        """Lower-cased abbreviation stored in the lookup table."""
        return self.value.lower()

    @property
    def surrogate_id(self) -> int:
        """Stable lookup-table id (fl oz=1 … L=4)."""
        return _VOLUME_UNIT_IDS[self]

    @property
    def display_name(self) -> str:
        display_map = {
            self.FL_OZ: "Fluid ounce",
            self.ML: "Millilitre",
            self.CL: "Centilitre",
            self.L: "Litre",
        }
        return display_map.get(self, self.value)


_TIME_PERIOD_IDS: Dict[TimePeriod, int] = {
    TimePeriod.MORNING: 1,
    TimePeriod.AFTERNOON: 2,
    TimePeriod.EVENING: 3,
    TimePeriod.NIGHT: 4,
}

_VOLUME_UNIT_IDS: Dict[VolumeUnit, int] = {
    VolumeUnit.FL_OZ: 1,
    VolumeUnit.ML: 2,
    VolumeUnit.CL: 3,
    VolumeUnit.L: 4,
}

_UNIT_ALIASES: Dict[str, VolumeUnit] = {
    "fl oz": VolumeUnit.FL_OZ,
    "floz": VolumeUnit.FL_OZ,
    "fl. oz": VolumeUnit.FL_OZ,
    "fl. oz.": VolumeUnit.FL_OZ,
    "oz": VolumeUnit.FL_OZ,
    "ml": VolumeUnit.ML,
    "cl": VolumeUnit.CL,
    "l": VolumeUnit.L,
}
