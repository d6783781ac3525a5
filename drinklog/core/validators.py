#!/usr/bin/env python3
"""
validators.py
--------------------
Data validation and normalization utilities.

Type-safe conversion and normalization used by the ledger model,
the database managers, and the log importer.
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .exceptions import ValidationError

_WHITESPACE = re.compile(r"\s+")


class DataValidator:
    """Centralized data validation."""

    @staticmethod
    def validate_required_fields(
        data: Dict[str, Any], required_fields: List[str]
    ) -> None:
        """
        Validate that required fields are present and not None or blank.

        Args:
            data: Data dictionary to validate
            required_fields: List of required field names

        Raises:
            ValidationError: If validation fails
        """
        for field in required_fields:
            value = data.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(f"Required field '{field}' missing or empty")

    @staticmethod
    def normalize_string(value: Any) -> Optional[str]:
        """
        Strip and collapse internal whitespace.

        Returns:
            Normalized string, or None for empty input
        """
        if value is None:
            return None
        text = _WHITESPACE.sub(" ", str(value)).strip()
        return text or None

    @staticmethod
    def normalize_name_key(value: Any) -> Optional[str]:
        """Case-insensitive comparison key for names."""
        text = DataValidator.normalize_string(value)
        return text.casefold() if text else None

    @staticmethod
    def normalize_float(value: Any) -> Optional[float]:
        """
        Convert a value to a finite float.

        Returns:
            Float value, or None for None/blank input

        Raises:
            ValidationError: If the value is not numeric or not finite
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        if isinstance(value, bool):
            raise ValidationError(f"Expected a number, got boolean {value!r}")
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Cannot convert {value!r} to a number") from e
        if not math.isfinite(number):
            raise ValidationError(f"Number must be finite, got {value!r}")
        return number

    @staticmethod
    def normalize_date(value: Any) -> Optional[date]:
        """
        Normalize date, datetime, or ISO string input to a date.

        Raises:
            ValidationError: If a string is not an ISO date
        """
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return date.fromisoformat(value.strip())
            except ValueError as e:
                raise ValidationError(f"Invalid date format: {value}") from e
        raise ValidationError(f"Invalid date type: {type(value)}")

    @staticmethod
    def validate_positive(value: float, field_name: str) -> float:
        """
        Ensure a number is strictly positive.

        Raises:
            ValidationError: If value <= 0
        """
        if value <= 0:
            raise ValidationError(f"{field_name} must be positive, got {value}")
        return value
