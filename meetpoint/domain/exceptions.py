"""
Domain-specific exception hierarchy for the meetpoint engine.
"""

from typing import Any


class MeetpointError(Exception):
    """Base class for all application-level errors."""


class ValidationError(MeetpointError, ValueError):
    """Raised when an input value is malformed or out of range."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}: {value!r} ({reason})")


class CatalogError(MeetpointError):
    """Raised when the candidate location catalog cannot be loaded."""


class MeetingNotFoundError(MeetpointError):
    """Raised when a data source has no meeting with the requested id."""
