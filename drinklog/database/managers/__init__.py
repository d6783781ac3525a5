#!/usr/bin/env python3
"""
managers package
--------------------
Entity managers for the DrinkLog database.

Each manager handles the operations for one entity type and inherits
from BaseManager.

Available Managers:
    BaseManager: Abstract base class with common utilities
    PersonManager: Manages Person rows
    DrinkManager: Manages the drink catalog
    EntryManager: Manages logged entries and their unit estimates

Usage:
    from drinklog.database.managers import DrinkManager

    drink_mgr = DrinkManager(session, logger)
"""
from .base_manager import BaseManager
from .person_manager import PersonManager
from .drink_manager import DrinkManager
from .entry_manager import EntryManager

__all__ = [
    "BaseManager",
    "PersonManager",
    "DrinkManager",
    "EntryManager",
]
