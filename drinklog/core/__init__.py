"""
Core utilities for drinklog: exceptions, logging, paths, configuration
and validation.
"""
