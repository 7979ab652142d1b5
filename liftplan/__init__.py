"""Workout plan model, migration and load-progression toolkit."""

__version__ = "0.1.0"
