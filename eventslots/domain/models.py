"""
Domain models for slots, bookings and availability decisions.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple, Union

from .exceptions import InvalidInput
from .time_format import MINUTES_PER_DAY, minutes_to_time, to_minutes

BookingId = Union[int, str]


@dataclass(frozen=True)
class Interval:
    """
    A half-open range ``[start, end)`` in minutes since midnight.

    Effective booking intervals may reach before midnight or past the end
    of the day once padding is applied, so the bounds are not clamped.
    """
    start: int
    end: int

    def __post_init__(self):
        if self.start > self.end:
            raise InvalidInput(f"Interval start {self.start} is after end {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return self.end - self.start

    def overlaps(self, other: "Interval") -> bool:
        """Half-open overlap; touching endpoints do not overlap."""
        return self.start < other.end and self.end > other.start

    def expand(self, before: int = 0, after: int = 0) -> "Interval":
        """Return a copy widened by ``before`` minutes at the start and ``after`` at the end."""
        return Interval(start=self.start - before, end=self.end + after)

    def __str__(self) -> str:
        start = minutes_to_time(min(max(self.start, 0), MINUTES_PER_DAY))
        end = minutes_to_time(min(max(self.end, 0), MINUTES_PER_DAY))
        return f"{start} - {end}"


@dataclass(frozen=True)
class TimeSlot:
    """
    A grid slot for one calendar day.

    Invariant: start must be before end.
    """
    start: int
    end: int
    available: bool = True
    index: Optional[int] = None

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidInput(
                f"Slot start {minutes_to_time(self.start)} must be before end {minutes_to_time(self.end)}"
            )

    @property
    def start_time(self) -> str:
        return minutes_to_time(self.start)

    @property
    def end_time(self) -> str:
        return minutes_to_time(self.end)

    @property
    def interval(self) -> Interval:
        return Interval(start=self.start, end=self.end)

    def with_availability(self, available: bool) -> "TimeSlot":
        return replace(self, available=available)

    def __str__(self) -> str:
        return f"{self.start_time} - {self.end_time}"


@dataclass(frozen=True)
class LabeledInterval:
    """An ``HH:MM`` range optionally tagged with the booking it belongs to."""
    start: str
    end: str
    booking_id: Optional[BookingId] = None

    def as_interval(self) -> Interval:
        return Interval(start=to_minutes(self.start), end=to_minutes(self.end))


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, value: Union[str, "BookingStatus"]) -> "BookingStatus":
        """Accept status names in any case ("confirmed", "CONFIRMED")."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise InvalidInput(f"Unknown booking status: {value!r}") from None


@dataclass(frozen=True)
class Booking:
    """
    An existing booking as handed to the engine by the storage layer.

    Times are kept as the ``HH:MM`` strings the storage layer provides and
    are only validated when the booking is used in interval math.
    """
    id: BookingId
    date: str
    start_time: str
    end_time: str
    services: Tuple[str, ...] = ()
    status: BookingStatus = BookingStatus.CONFIRMED

    def __post_init__(self):
        # services may arrive as a list
        object.__setattr__(self, "services", tuple(self.services))
        object.__setattr__(self, "status", BookingStatus.parse(self.status))

    @property
    def is_active(self) -> bool:
        return self.status is not BookingStatus.CANCELLED

    def interval(self) -> Interval:
        """
        Stated booking time in minutes, without any padding.

        An end of ``00:00`` at or before the start means the booking runs
        until midnight.
        """
        start = to_minutes(self.start_time)
        end = to_minutes(self.end_time)
        if end == 0 and start >= end:
            end = MINUTES_PER_DAY
        return Interval(start=start, end=end)


@dataclass(frozen=True)
class ServiceKind:
    """A catalog entry describing how long a service normally runs."""
    name: str
    default_hours: float
    min_hours: float
    max_hours: float

    @property
    def default_minutes(self) -> int:
        return int(round(self.default_hours * 60))

    def allows(self, minutes: int) -> bool:
        """Check whether ``minutes`` lies within the service's min/max hours."""
        return self.min_hours * 60 <= minutes <= self.max_hours * 60


@dataclass(frozen=True)
class AvailabilityQuery:
    """A single candidate booking window to check against existing bookings."""
    date: str
    candidate_start: str
    candidate_end: str
    include_setup: bool = False
    include_breakdown: bool = False

    def candidate(self) -> Interval:
        start = to_minutes(self.candidate_start)
        end = to_minutes(self.candidate_end)
        if start > end:
            raise InvalidInput(
                f"Candidate start {self.candidate_start} is after end {self.candidate_end}"
            )
        return Interval(start=start, end=end)


class ConflictType(str, Enum):
    DIRECT_OVERLAP = "direct-overlap"
    SETUP_CONFLICT = "setup-conflict"
    BUFFER_VIOLATION = "buffer-violation"


@dataclass(frozen=True)
class Conflict:
    """Why an existing booking blocks a candidate."""
    booking_id: BookingId
    type: ConflictType
    booking: Interval
    effective: Interval


@dataclass
class AvailabilityReport:
    """
    Outcome of a full availability check.

    ``conflicts`` holds direct overlaps and setup/breakdown conflicts;
    buffer-only violations are reported separately.
    """
    available: bool
    conflicts: List[Conflict] = field(default_factory=list)
    buffer_violations: List[Conflict] = field(default_factory=list)


@dataclass(frozen=True)
class AlternativeSlot:
    """A suggested replacement window for a rejected candidate."""
    start: str
    end: str
    score: float
