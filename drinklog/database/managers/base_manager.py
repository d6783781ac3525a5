#!/usr/bin/env python3
"""
base_manager.py
--------------------
Base manager providing common lookup and persistence utilities.
All entity managers inherit from this class.

Key Features:
    - Retry logic for database lock handling
    - Generic get-or-create for reference rows
    - Object resolution helpers (instance or id)
    - Consistent error handling and logging via DatabaseOperation

Usage:
    class PersonManager(BaseManager):
        def create(self) -> Person:
            with DatabaseOperation(self.logger, "create_person"):
                ...
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from abc import ABC
from typing import Any, Callable, Dict, List, Optional, Protocol, Type, TypeVar, Union

# --- Third party imports ---
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Mapped, Session

# --- Local imports ---
from drinklog.core.exceptions import DatabaseError, NotFoundError
from drinklog.core.logging_manager import DrinkLogLogger, safe_logger


class HasId(Protocol):
    """Protocol for objects that have an id attribute."""

    id: Mapped[int]


T = TypeVar("T", bound=HasId)


class BaseManager(ABC):
    """
    Abstract base manager providing common operations and utilities.

    Attributes:
        session: SQLAlchemy session for database operations
        logger: Optional logger for operation tracking
    """

    def __init__(self, session: Session, logger: Optional[DrinkLogLogger] = None):
        """
        Initialize the base manager.

        Args:
            session: SQLAlchemy session
            logger: Optional logger for operation tracking
        """
        self.session = session
        self.logger = logger

    # -------------------------------------------------------------------------
    # Core Helper Methods
    # -------------------------------------------------------------------------

    def _execute_with_retry(
        self,
        operation: Callable,
        max_retries: int = 3,
        retry_delay: float = 0.1,
    ) -> Any:
        """
        Execute database operation with retry on lock.

        Args:
            operation: Callable that performs the operation
            max_retries: Maximum number of retry attempts
            retry_delay: Base delay between retries (exponential backoff)

        Returns:
            Result of the operation

        Raises:
            OperationalError: If the error is not a lock or retries are exhausted
        """
        for attempt in range(max_retries):
            try:
                return operation()
            except OperationalError as e:
                error_msg = str(e).lower()

                if (
                    "locked" in error_msg or "busy" in error_msg
                ) and attempt < max_retries - 1:
                    wait_time = retry_delay * (2**attempt)

                    safe_logger(self.logger).log_debug(
                        f"Database locked, retrying in {wait_time}s",
                        {"attempt": attempt + 1, "max_retries": max_retries},
                    )

                    time.sleep(wait_time)
                    continue

                raise

        raise DatabaseError("Retry loop completed without success")

    def _get_or_create(
        self,
        model_class: Type[T],
        lookup_fields: Dict[str, Any],
        extra_fields: Optional[Dict[str, Any]] = None,
    ) -> T:
        """
        Get an existing row or create it if it doesn't exist.

        Args:
            model_class: ORM model class to query or create
            lookup_fields: Dictionary of field_name: value to filter/create
            extra_fields: Additional fields for new object creation only

        Returns:
            ORM instance of the model class

        Raises:
            DatabaseError: If creation fails
        """
        obj = self.session.query(model_class).filter_by(**lookup_fields).first()
        if obj:
            return obj

        fields = lookup_fields.copy()
        if extra_fields:
            fields.update(extra_fields)

        try:
            obj = model_class(**fields)
            self.session.add(obj)
            self.session.flush()
            return obj
        except IntegrityError as e:
            raise DatabaseError(
                f"Failed to create {model_class.__name__}: {e}"
            ) from e

    def _resolve_object(self, item: Union[T, int], model_class: Type[T]) -> T:
        """
        Resolve an item to an ORM object.

        Args:
            item: Object instance or ID
            model_class: Target model class

        Returns:
            Resolved ORM object

        Raises:
            NotFoundError: If no row has the id
            ValueError: If an instance is not persisted
            TypeError: If item type is invalid
        """
        if isinstance(item, model_class):
            if item.id is None:
                raise ValueError(f"{model_class.__name__} instance must be persisted")
            return item
        elif isinstance(item, int) and not isinstance(item, bool):
            obj = self.session.get(model_class, item)
            if obj is None:
                raise NotFoundError(f"No {model_class.__name__} found with id: {item}")
            return obj
        else:
            raise TypeError(
                f"Expected {model_class.__name__} instance or int, got {type(item)}"
            )

    # -------------------------------------------------------------------------
    # Generic Query Helpers
    # -------------------------------------------------------------------------

    def _get_by_id(self, model_class: Type[T], entity_id: int) -> Optional[T]:
        return self.session.get(model_class, entity_id)

    def _get_all(
        self,
        model_class: Type[T],
        order_by: Optional[str] = None,
        **filters: Any,
    ) -> List[T]:
        """
        Get all entities of a type with optional filtering and ordering.

        Args:
            model_class: ORM model class
            order_by: Column name to order by (optional)
            **filters: Additional filter conditions

        Returns:
            List of entities
        """
        query = self.session.query(model_class)

        if filters:
            query = query.filter_by(**filters)

        if order_by and hasattr(model_class, order_by):
            attr = getattr(model_class, order_by)
            # Only columns can be ordered on, not Python properties
            if hasattr(attr, "__clause_element__"):
                query = query.order_by(attr)

        return query.all()

    def _count(self, model_class: Type[T], **filters: Any) -> int:
        query = self.session.query(model_class)
        if filters:
            query = query.filter_by(**filters)
        return query.count()
