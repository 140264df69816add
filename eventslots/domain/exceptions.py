"""
Domain-specific exception hierarchy for the scheduling engine.
"""

from typing import Iterable


class SchedulingError(Exception):
    """Base class for all engine errors."""


class InvalidFormat(SchedulingError, ValueError):
    """Raised when a time, date or range string fails structural validation."""


class InvalidInput(SchedulingError, ValueError):
    """Raised for semantically empty or impossible input."""


class InvalidDate(InvalidFormat, InvalidInput):
    """Raised when a calendar date is empty or cannot be parsed."""


class UnknownService(InvalidInput):
    """Raised in strict mode when requested services are not in the catalog."""

    def __init__(self, services: Iterable[str]):
        self.services = tuple(services)
        super().__init__(f"Unknown service(s): {', '.join(self.services)}")
