"""
Buffer, setup and breakdown padding rules.

These are lookup/branch rules, not a cost model. Changing a constant is a
product decision and belongs here or in the ``padding`` config section.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

BETWEEN_BOOKINGS = "between-bookings"

BUFFER_TIME_MINUTES = 30
SETUP_TIME_MINUTES = 60
COMPLEX_SETUP_EXTRA_MINUTES = 30
COMPLEX_SERVICE_THRESHOLD = 3
BREAKDOWN_TIME_MINUTES = 30


def _default_buffers() -> Mapping[str, int]:
    return MappingProxyType({BETWEEN_BOOKINGS: BUFFER_TIME_MINUTES})


@dataclass(frozen=True)
class PaddingPolicy:
    """
    Derives padding durations from a booking's service composition.

    Attributes:
        buffers: Buffer minutes per buffer category. Unknown categories
            fall back to the between-bookings buffer.
        setup_minutes: Crew arrival time before an event.
        complex_setup_extra_minutes: Added to setup once a booking has
            ``complex_service_threshold`` or more distinct services.
        breakdown_minutes: Teardown time after an event.
    """
    buffers: Mapping[str, int] = field(default_factory=_default_buffers)
    setup_minutes: int = SETUP_TIME_MINUTES
    complex_setup_extra_minutes: int = COMPLEX_SETUP_EXTRA_MINUTES
    complex_service_threshold: int = COMPLEX_SERVICE_THRESHOLD
    breakdown_minutes: int = BREAKDOWN_TIME_MINUTES

    def __post_init__(self):
        object.__setattr__(self, "buffers", MappingProxyType(dict(self.buffers)))

    def buffer_for(self, kind: str = BETWEEN_BOOKINGS) -> int:
        """Buffer minutes for ``kind``; currently every kind resolves to the standard buffer."""
        if kind in self.buffers:
            return self.buffers[kind]
        return self.buffers.get(BETWEEN_BOOKINGS, BUFFER_TIME_MINUTES)

    def setup_for(self, services: Iterable[str]) -> int:
        """Setup minutes; bookings with many distinct services need longer."""
        if len(set(services)) >= self.complex_service_threshold:
            return self.setup_minutes + self.complex_setup_extra_minutes
        return self.setup_minutes

    def breakdown_for(self, services: Iterable[str]) -> int:
        # services unused for now
        return self.breakdown_minutes


DEFAULT_PADDING = PaddingPolicy()


def buffer_minutes(kind: str = BETWEEN_BOOKINGS) -> int:
    return DEFAULT_PADDING.buffer_for(kind)


def setup_minutes(services: Iterable[str]) -> int:
    return DEFAULT_PADDING.setup_for(services)


def breakdown_minutes(services: Iterable[str]) -> int:
    return DEFAULT_PADDING.breakdown_for(services)
