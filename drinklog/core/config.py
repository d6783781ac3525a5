#!/usr/bin/env python3
"""
config.py
-------------------
Ledger configuration loaded from YAML.

The amount of pure ethanol that makes up one "standard unit" differs by
jurisdiction, so it is configuration rather than a constant. A config
file picks a preset by name or gives the millilitres directly:

    # data/drinklog.yaml
    standard_unit: uk            # or: {ml_per_unit: 12.5}
    approx_modifier: 0.1
    default_person_id: 1

A missing file yields the defaults.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

# --- Third party imports ---
import yaml

# --- Local imports ---
from .exceptions import ConfigError

# Density of ethanol, g/mL; used for presets defined by mass.
ETHANOL_DENSITY = 0.789


@dataclass(frozen=True)
class StandardUnit:
    """
    Definition of one standard alcohol unit.

    Attributes:
        name: Preset name or "custom"
        ml_per_unit: Millilitres of pure ethanol in one unit
    """

    name: str
    ml_per_unit: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.ml_per_unit) or self.ml_per_unit <= 0:
            raise ConfigError(
                f"ml_per_unit must be a positive number, got {self.ml_per_unit!r}"
            )

    @property
    def density_constant(self) -> float:
        """Standard units per millilitre of pure ethanol."""
        return 1.0 / self.ml_per_unit

    @classmethod
    def from_grams(cls, name: str, grams: float) -> "StandardUnit":
        """Build a unit defined by grams of ethanol."""
        return cls(name, grams / ETHANOL_DENSITY)


STANDARD_UNITS: Dict[str, StandardUnit] = {
    "uk": StandardUnit("uk", 10.0),
    "au": StandardUnit.from_grams("au", 10.0),
    "us": StandardUnit.from_grams("us", 14.0),
    "legacy": StandardUnit("legacy", 18.0),
}

DEFAULT_STANDARD_UNIT = "uk"


@dataclass
class LedgerConfig:
    """
    Runtime configuration for normalization and imports.

    Attributes:
        standard_unit: Standard-unit definition used for estimates
        approx_modifier: Relative spread applied to approximate values
            when computing lower/upper bounds
        default_person_id: Person that imported and CLI-logged entries belong to
    """

    standard_unit: StandardUnit = field(
        default_factory=lambda: STANDARD_UNITS[DEFAULT_STANDARD_UNIT]
    )
    approx_modifier: float = 0.1
    default_person_id: int = 1

    @property
    def density_constant(self) -> float:
        """Standard units per millilitre of pure ethanol."""
        return self.standard_unit.density_constant

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LedgerConfig":
        """
        Build a config from a parsed mapping.

        Raises:
            ConfigError: If a value is missing, unknown, or of the wrong type
        """
        config = cls()

        unit = data.get("standard_unit")
        if unit is not None:
            config.standard_unit = _parse_standard_unit(unit)

        if "approx_modifier" in data:
            modifier = data["approx_modifier"]
            if (
                isinstance(modifier, bool)
                or not isinstance(modifier, (int, float))
                or not 0 <= modifier < 1
            ):
                raise ConfigError(
                    f"approx_modifier must be a number in [0, 1), got {modifier!r}"
                )
            config.approx_modifier = float(modifier)

        if "default_person_id" in data:
            person_id = data["default_person_id"]
            if isinstance(person_id, bool) or not isinstance(person_id, int):
                raise ConfigError(
                    f"default_person_id must be an integer, got {person_id!r}"
                )
            config.default_person_id = person_id

        return config


def _parse_standard_unit(value: Any) -> StandardUnit:
    """Resolve a preset name or an explicit ``{ml_per_unit: N}`` mapping."""
    if isinstance(value, str):
        preset = STANDARD_UNITS.get(value.strip().lower())
        if preset is None:
            raise ConfigError(
                f"Unknown standard unit preset: {value!r} "
                f"(choices: {', '.join(sorted(STANDARD_UNITS))})"
            )
        return preset

    if isinstance(value, dict):
        try:
            if "ml_per_unit" in value:
                return StandardUnit("custom", float(value["ml_per_unit"]))
            if "grams_per_unit" in value:
                return StandardUnit.from_grams(
                    "custom", float(value["grams_per_unit"])
                )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid standard_unit setting: {value!r}") from e

    raise ConfigError(f"Invalid standard_unit setting: {value!r}")


def load_config(path: Optional[Union[str, Path]] = None) -> LedgerConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: Config file; defaults apply when None or the file does not exist

    Returns:
        LedgerConfig instance

    Raises:
        ConfigError: If the file is not valid YAML or holds invalid values
    """
    if path is None:
        return LedgerConfig()

    path = Path(path).expanduser()
    if not path.exists():
        return LedgerConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse config file {path}: {e}") from e

    if data is None:
        return LedgerConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    return LedgerConfig.from_dict(data)
