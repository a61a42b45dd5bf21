"""
Exceptions raised by the scoring model.
"""


class ScoringError(Exception):
    """Base exception for scoring-related errors."""


class InvalidInputError(ScoringError, ValueError):
    """A profile or head-to-head field is outside its declared range."""
