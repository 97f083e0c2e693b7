"""Medication knowledge and safety evaluation engine."""

__version__ = "0.1.0"
