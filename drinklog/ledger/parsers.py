"""
Input Parsers
-------------

Turn the short strings people type when logging a drink into ledger values.

    quantity   "2", "1-2", "~3", "2?", "~1-2"
    abv        "5%", "4.5-5.5%", "~40%", "12"
    volume     "355mL", "~12 fl oz", "33 cl", "1L", "12oz"

A leading ``~`` or a trailing ``?`` marks a number as approximate. On a
range, a ``~`` in front of the whole range applies to both ends.

Every parser raises ValidationError on malformed input and returns None for
blank optional input.
"""
from __future__ import annotations

import re
from typing import Optional, Tuple

from drinklog.core.exceptions import InvalidRangeError, ValidationError

from .approx import ApproximateValue
from .enums import TimePeriod, VolumeUnit

ApproxRange = Tuple[ApproximateValue, ApproximateValue]

_NUMBER = r"\d+(?:\.\d+)?|\.\d+"

_BOUND = re.compile(rf"^\s*(?P<tilde>~)?\s*(?P<num>{_NUMBER})\s*(?P<question>\?)?\s*$")
_VOLUME = re.compile(
    rf"^\s*(?P<tilde>~)?\s*(?P<num>{_NUMBER})\s*(?P<question>\?)?\s*(?P<unit>[A-Za-z][A-Za-z. ]*?)\s*(?P<question2>\?)?\s*$"
)
_RANGE_SPLIT = re.compile(r"\s*(?:-|–|to)\s*")


def _parse_bound(text: str, what: str, approximate: bool = False) -> ApproximateValue:
    match = _BOUND.match(text)
    if match is None:
        raise ValidationError(f"Invalid {what}: {text!r}")
    flagged = approximate or bool(match.group("tilde") or match.group("question"))
    return ApproximateValue(float(match.group("num")), flagged)


def _parse_range(text: str, what: str) -> ApproxRange:
    stripped = text.strip()
    whole_approx = False
    parts = _RANGE_SPLIT.split(stripped.lstrip("~"), maxsplit=1)
    if len(parts) == 2 and stripped.startswith("~"):
        whole_approx = True
    elif len(parts) == 1:
        parts = [stripped]

    low = _parse_bound(parts[0], what, whole_approx)
    high = _parse_bound(parts[1], what, whole_approx) if len(parts) == 2 else low
    if low.value > high.value:
        raise InvalidRangeError(f"Invalid {what} range: {text!r}")
    return low, high


def parse_quantity(text: Optional[str]) -> ApproxRange:
    """
    Parse a serving count or range.

    Raises:
        ValidationError: If blank or malformed
    """
    if text is None or not text.strip():
        raise ValidationError("Quantity can not be empty")
    return _parse_range(text, "quantity")


def parse_abv(text: Optional[str]) -> Optional[ApproxRange]:
    """
    Parse an ABV percentage or range; the ``%`` sign is optional.

    Returns:
        (min_abv, max_abv), or None for blank input

    Raises:
        ValidationError: If malformed or outside 0-100
    """
    if text is None or not text.strip():
        return None
    low, high = _parse_range(text.replace("%", ""), "ABV")
    if high.value > 100:
        raise ValidationError(f"ABV must be a percentage: {text!r}")
    return low, high


def parse_volume(text: Optional[str]) -> Optional[Tuple[ApproximateValue, VolumeUnit]]:
    """
    Parse a volume with its unit.

    Returns:
        (amount, unit), or None for blank input

    Raises:
        ValidationError: If malformed or the unit is not recognized
    """
    if text is None or not text.strip():
        return None
    match = _VOLUME.match(text)
    if match is None:
        raise ValidationError(f"Invalid volume: {text!r}")
    unit = VolumeUnit.from_str(match.group("unit"))
    if unit is None:
        raise ValidationError(f"Unknown volume unit in {text!r}")
    flagged = bool(
        match.group("tilde") or match.group("question") or match.group("question2")
    )
    return ApproximateValue(float(match.group("num")), flagged), unit


def parse_time_period(text: Optional[str]) -> TimePeriod:
    """
    Raises:
        ValidationError: If the text is not a time period
    """
    period = TimePeriod.from_str(text)
    if period is None:
        raise ValidationError(
            f"Invalid time period: {text!r} (choices: {', '.join(TimePeriod.choices())})"
        )
    return period


def multiplier_for_name(name: str) -> float:
    """A "double" of anything counts as two servings."""
    return 2.0 if "double" in name.lower() else 1.0
