#!/usr/bin/env python3
"""
person_manager.py
--------------------
Manages Person rows.

A person carries no data beyond its id and timestamps; every entry belongs
to exactly one person. Deleting a person deletes their entries.

Usage:
    person_mgr = PersonManager(session, logger)

    person = person_mgr.create()
    same = person_mgr.get_or_create(person.id)
    person_mgr.delete(person)
"""
from typing import List, Optional, Union

from drinklog.database.decorators import handle_db_errors, log_database_operation
from drinklog.database.models import Entry, Person
from .base_manager import BaseManager


class PersonManager(BaseManager):
    """Manages Person table operations."""

    @handle_db_errors
    @log_database_operation("person_exists")
    def exists(self, person_id: int) -> bool:
        return self._get_by_id(Person, person_id) is not None

    @handle_db_errors
    @log_database_operation("get_person")
    def get(self, person_id: int) -> Optional[Person]:
        """
        Retrieve a person by ID.

        Returns:
            Person object if found, None otherwise
        """
        return self._get_by_id(Person, person_id)

    @handle_db_errors
    @log_database_operation("get_all_persons")
    def get_all(self) -> List[Person]:
        return self._get_all(Person, order_by="id")

    @handle_db_errors
    @log_database_operation("create_person")
    def create(self, person_id: Optional[int] = None) -> Person:
        """
        Create a new person.

        Args:
            person_id: Explicit id; autoincremented when omitted

        Returns:
            The flushed Person
        """
        person = Person(id=person_id) if person_id is not None else Person()
        self.session.add(person)
        self.session.flush()
        return person

    @handle_db_errors
    @log_database_operation("get_or_create_person")
    def get_or_create(self, person_id: int) -> Person:
        """Return the person with this id, creating them if needed."""
        return self._get_or_create(Person, {"id": person_id})

    @handle_db_errors
    @log_database_operation("count_person_entries")
    def entry_count(self, person: Union[Person, int]) -> int:
        person = self._resolve_object(person, Person)
        return self._count(Entry, person_id=person.id)

    @handle_db_errors
    @log_database_operation("delete_person")
    def delete(self, person: Union[Person, int]) -> None:
        """
        Delete a person and, through the cascade, all of their entries.

        Raises:
            NotFoundError: If the person does not exist
        """
        person = self._resolve_object(person, Person)
        self.session.delete(person)
        self.session.flush()
