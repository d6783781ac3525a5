#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the drinklog project.

This module defines a hierarchy of exceptions used throughout the project
to handle specific error conditions in different subsystems.

Exception Hierarchy:
    Exception (built-in)
    └── DrinkLogError - Base for every project error
        ├── DatabaseError - Persistence failures
        ├── ValidationError (also ValueError) - Invalid input data
        │   ├── InvalidRangeError - Lower bound above upper bound
        │   └── IncompleteDataError - Mandatory field absent
        ├── UnknownUnitError - Unregistered volume unit
        ├── DuplicateDrinkError - Drink identity already registered
        ├── NotFoundError - Lookup miss
        ├── UnmappableValueError - Schema migration value with no counterpart
        ├── ImportParseError - Legacy text log could not be parsed
        └── ConfigError - Invalid configuration file

None of these are transient: they indicate malformed data or caller misuse,
so retrying the same call will fail the same way.

Usage:
    from drinklog.core.exceptions import DuplicateDrinkError, NotFoundError

    try:
        drink_id = catalog.register("Stout", abv_min, abv_max)
    except DuplicateDrinkError as e:
        logger.log_warning(f"Skipping drink: {e}")
"""


class DrinkLogError(Exception):
    """
    Base exception for all drinklog errors.

    Catch this to handle any error raised by the project, or catch
    specific subclasses for more granular error handling.
    """

    pass


class DatabaseError(DrinkLogError):
    """
    Exception for database-related errors.

    Raised when database operations fail due to connection issues,
    query errors, integrity violations, or migration problems.

    Examples:
        >>> raise DatabaseError("Connection to database failed")
        >>> raise DatabaseError("Drink 3 is referenced by 12 entries")
    """

    pass


class ValidationError(DrinkLogError, ValueError):
    """
    Exception for data validation failures.

    Also a ValueError, so callers that only know about the builtin
    numeric errors still catch it.

    Examples:
        >>> raise ValidationError("Multiplier must be positive: -1.0")
        >>> raise ValidationError("Invalid quantity: 'a few'")
    """

    pass


class InvalidRangeError(ValidationError):
    """
    Exception for inverted ranges.

    Raised when a lower bound is greater than its upper bound, such as a
    drink registered with min_abv above max_abv or an entry whose
    min_quantity exceeds max_quantity.

    Examples:
        >>> raise InvalidRangeError("min_abv 6.0 is greater than max_abv 4.0")
    """

    pass


class IncompleteDataError(ValidationError):
    """
    Exception for a mandatory field that is entirely absent.

    Examples:
        >>> raise IncompleteDataError("Entry has no quantity")
    """

    pass


class UnknownUnitError(DrinkLogError):
    """
    Exception for volume units that are not registered.

    Examples:
        >>> raise UnknownUnitError("Unknown volume unit: 'pint'")
    """

    pass


class DuplicateDrinkError(DrinkLogError):
    """
    Exception for registering a drink whose identity already exists.

    Identity is the case-insensitive name plus the ABV bounds and the
    multiplier.

    Examples:
        >>> raise DuplicateDrinkError("Drink already registered: 'Beer' (id=4)")
    """

    pass


class NotFoundError(DrinkLogError):
    """
    Exception for lookups that match nothing.

    Examples:
        >>> raise NotFoundError("No drink found with id: 42")
    """

    pass


class UnmappableValueError(DrinkLogError):
    """
    Exception for generation-1 values with no generation-2 counterpart.

    Raised by the schema evolution adapter. Should not occur for rows
    written under the fixed generation-1 enumerations.

    Examples:
        >>> raise UnmappableValueError("Unknown time period: 'dawn'")
    """

    pass


class ImportParseError(DrinkLogError):
    """
    Exception for legacy text-log lines that cannot be interpreted.

    Examples:
        >>> raise ImportParseError("Found two time strings: 'morning' and 'night'")
    """

    pass


class ConfigError(DrinkLogError):
    """
    Exception for unreadable or invalid configuration files.

    Examples:
        >>> raise ConfigError("Unknown standard unit preset: 'mars'")
    """

    pass
