"""
Domain layer - Pure scheduling logic without external dependencies.
"""

from .catalog import DEFAULT_CATALOG, ServiceCatalog, resolve_duration
from .conflict_checker import ConflictChecker, is_available
from .exceptions import (
    InvalidDate,
    InvalidFormat,
    InvalidInput,
    SchedulingError,
    UnknownService,
)
from .intervals import find_conflicts, merge_slots
from .models import (
    AlternativeSlot,
    AvailabilityQuery,
    AvailabilityReport,
    Booking,
    BookingStatus,
    Conflict,
    ConflictType,
    Interval,
    LabeledInterval,
    ServiceKind,
    TimeSlot,
)
from .padding import (
    DEFAULT_PADDING,
    PaddingPolicy,
    breakdown_minutes,
    buffer_minutes,
    setup_minutes,
)
from .slot_generator import SlotGenerator, generate_slots
from .time_format import TimeStyle, format_time, parse_time, validate_range

__all__ = [
    "AlternativeSlot",
    "AvailabilityQuery",
    "AvailabilityReport",
    "Booking",
    "BookingStatus",
    "Conflict",
    "ConflictChecker",
    "ConflictType",
    "DEFAULT_CATALOG",
    "DEFAULT_PADDING",
    "Interval",
    "InvalidDate",
    "InvalidFormat",
    "InvalidInput",
    "LabeledInterval",
    "PaddingPolicy",
    "SchedulingError",
    "ServiceCatalog",
    "ServiceKind",
    "SlotGenerator",
    "TimeSlot",
    "TimeStyle",
    "UnknownService",
    "breakdown_minutes",
    "buffer_minutes",
    "find_conflicts",
    "format_time",
    "generate_slots",
    "is_available",
    "merge_slots",
    "parse_time",
    "resolve_duration",
    "setup_minutes",
    "validate_range",
]
