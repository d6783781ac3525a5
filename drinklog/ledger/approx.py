"""
Approximate Values
------------------

A number tagged with whether it is known exactly.

Ledger measurements are often guesses ("about two pints", "~5%"). An
ApproximateValue carries the number together with an ``is_approximate``
flag, and every arithmetic operation ORs the flags of its operands:
uncertainty is never cancelled out by combining values. Plain numbers
used as operands (conversion factors, constants) count as exact.

Usage:
    >>> pints = ApproximateValue(2, is_approximate=True)
    >>> pints.scale_by(568.261)
    ApproximateValue(value=1136.522, is_approximate=True)
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Mapping, Optional, Tuple, Union

Number = Union[int, float]
Operand = Union["ApproximateValue", Number]

# Relative spread applied to approximate values by lower()/upper().
DEFAULT_APPROX_MODIFIER = 0.1


def _check_finite(value: Any, what: str = "value") -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValueError(f"{what} must be a real number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{what} must be finite, got {value!r}")
    return number


@dataclass(frozen=True)
class ApproximateValue:
    """
    Immutable number with an exactness flag.

    Attributes:
        value: The (finite) number
        is_approximate: True if the number may be imprecise

    Raises:
        ValueError: On construction with NaN, infinity or a non-number
    """

    value: float
    is_approximate: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _check_finite(self.value))
        object.__setattr__(self, "is_approximate", bool(self.is_approximate))

    # ---- Constructors ----
    @classmethod
    def exact(cls, value: Number) -> "ApproximateValue":
        return cls(value, False)

    @classmethod
    def approximate(cls, value: Number) -> "ApproximateValue":
        return cls(value, True)

    @classmethod
    def coerce(cls, raw: Any) -> Optional["ApproximateValue"]:
        """
        Build an ApproximateValue from the shapes rows carry it in.

        Accepts an ApproximateValue, a mapping with ``val``/``value`` and
        ``is_approximate`` keys, a ``(value, is_approximate)`` pair, or a bare
        number (taken as exact). None passes through.

        Raises:
            ValueError: If the shape is not recognized or the number is invalid
        """
        if raw is None or isinstance(raw, ApproximateValue):
            return raw
        if isinstance(raw, Mapping):
            for key in ("val", "value", "num"):
                if key in raw:
                    if raw[key] is None:
                        return None
                    return cls(raw[key], bool(raw.get("is_approximate", False)))
            raise ValueError(f"Mapping has no value key: {dict(raw)!r}")
        if isinstance(raw, (tuple, list)) and len(raw) == 2:
            if raw[0] is None:
                return None
            return cls(raw[0], bool(raw[1]))
        return cls(raw, False)

    # ---- Arithmetic ----
    def add(self, other: Operand) -> "ApproximateValue":
        other = _as_value(other)
        return ApproximateValue(
            self.value + other.value, self.is_approximate or other.is_approximate
        )

    def multiply(self, other: Operand) -> "ApproximateValue":
        other = _as_value(other)
        return ApproximateValue(
            self.value * other.value, self.is_approximate or other.is_approximate
        )

    def scale_by(self, factor: Number) -> "ApproximateValue":
        """Multiply by an exact factor; the flag is kept as is."""
        return ApproximateValue(
            self.value * _check_finite(factor, "factor"), self.is_approximate
        )

    def __add__(self, other: Operand) -> "ApproximateValue":
        return self.add(other)

    __radd__ = __add__

    def __mul__(self, other: Operand) -> "ApproximateValue":
        return self.multiply(other)

    __rmul__ = __mul__

    # ---- Bounds ----
    def lower(self, modifier: float = DEFAULT_APPROX_MODIFIER) -> float:
        """Smallest plausible value: shrunk by ``modifier`` if approximate."""
        if not self.is_approximate:
            return self.value
        return self.value * (1.0 - modifier)

    def upper(self, modifier: float = DEFAULT_APPROX_MODIFIER) -> float:
        """Largest plausible value: grown by ``modifier`` if approximate."""
        if not self.is_approximate:
            return self.value
        return self.value * (1.0 + modifier)

    def bounds(self, modifier: float = DEFAULT_APPROX_MODIFIER) -> Tuple[float, float]:
        return (self.lower(modifier), self.upper(modifier))

    # ---- Serialization ----
    def to_dict(self) -> dict:
        return {"val": self.value, "is_approximate": self.is_approximate}

    def __str__(self) -> str:
        text = f"{self.value:g}"
        return f"~{text}" if self.is_approximate else text


def _as_value(operand: Operand) -> ApproximateValue:
    if isinstance(operand, ApproximateValue):
        return operand
    return ApproximateValue(operand, False)


def midpoint(a: ApproximateValue, b: ApproximateValue) -> ApproximateValue:
    """Halfway between two values, approximate if either is."""
    return a.add(b).scale_by(0.5)
