#!/usr/bin/env python3
"""
decorators.py
--------------------
Shared decorators and context managers for database operations.
"""
from functools import wraps
from typing import Callable, List, Optional
from datetime import datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from drinklog.core.exceptions import DatabaseError
from drinklog.core.logging_manager import DrinkLogLogger, safe_logger
from drinklog.core.validators import DataValidator


def log_database_operation(operation_name: str):
    """
    Decorator to log database operations with timing and context.

    Args:
        operation_name: Name of the operation being logged

    Returns:
        Decorator function
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            start_time = datetime.now()
            operation_id = f"{operation_name}_{start_time.strftime('%Y%m%d_%H%M%S_%f')}"
            logger = safe_logger(getattr(self, "logger", None))

            logger.log_debug(
                f"Starting {operation_name}",
                {
                    "operation_id": operation_id,
                    "args_count": len(args),
                    "kwargs_keys": list(kwargs.keys()),
                },
            )

            try:
                result = function(self, *args, **kwargs)
            except Exception as e:
                duration = (datetime.now() - start_time).total_seconds()
                logger.log_error(
                    e,
                    {
                        "operation": operation_name,
                        "operation_id": operation_id,
                        "duration_seconds": duration,
                    },
                )
                raise

            duration = (datetime.now() - start_time).total_seconds()
            logger.log_operation(
                f"{operation_name}_completed",
                {
                    "operation_id": operation_id,
                    "duration_seconds": duration,
                    "success": True,
                },
            )
            return result

        return wrapper

    return decorator


def validate_metadata(required_fields: List[str]):
    """
    Decorator to validate metadata dictionaries before processing.

    The metadata is the last positional argument or the ``metadata`` keyword.

    Args:
        required_fields: List of required field names

    Returns:
        Decorator function
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            metadata = args[-1] if args else kwargs.get("metadata", {})

            DataValidator.validate_required_fields(metadata, required_fields)

            return function(self, *args, **kwargs)

        return wrapper

    return decorator


def handle_db_errors(function: Callable) -> Callable:
    """
    Decorator to handle common database errors.

    Args:
        function: Function to wrap

    Returns:
        Wrapped function with error handling
    """

    @wraps(function)
    def wrapper(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except IntegrityError as e:
            raise DatabaseError(f"Data integrity violation: {e}") from e
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database operation failed: {e}") from e

    return wrapper


class DatabaseOperation:
    """
    Context manager combining operation logging and database error handling.

    On success logs ``<name>_completed`` with the duration. On failure logs
    the error, converts SQLAlchemy errors to DatabaseError and lets every
    other exception through unchanged.

    Usage:
        with DatabaseOperation(self.logger, "create_drink"):
            self.session.add(drink)
            self.session.flush()
    """

    def __init__(
        self,
        logger: Optional[DrinkLogLogger],
        operation_name: str,
        log_start: bool = False,
    ):
        self.logger = safe_logger(logger)
        self.operation_name = operation_name
        self.log_start = log_start
        self.start_time: Optional[datetime] = None

    def __enter__(self) -> "DatabaseOperation":
        self.start_time = datetime.now()
        if self.log_start:
            self.logger.log_debug(f"Starting {self.operation_name}")
        return self

    def _duration(self) -> float:
        if self.start_time is None:
            return 0.0
        return (datetime.now() - self.start_time).total_seconds()

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        duration = self._duration()

        if exc_value is None:
            self.logger.log_operation(
                f"{self.operation_name}_completed",
                {"duration_seconds": duration, "success": True},
            )
            return False

        self.logger.log_error(
            exc_value,
            {"operation": self.operation_name, "duration_seconds": duration},
        )
        if isinstance(exc_value, IntegrityError):
            raise DatabaseError(
                f"Data integrity violation: {exc_value}"
            ) from exc_value
        if isinstance(exc_value, SQLAlchemyError):
            raise DatabaseError(
                f"Database operation failed: {exc_value}"
            ) from exc_value
        return False
