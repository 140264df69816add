"""
Buffer-aware conflict detection between a candidate window and existing bookings.

This is the booking-acceptance decision. Every existing booking is widened
to its effective occupied interval before the overlap test:

    stated time  ->  minus setup / plus breakdown (when requested)
                 ->  minus / plus the between-bookings buffer (always)

Overlap is half-open: ``[a0, a1)`` and ``[b0, b1)`` conflict iff
``a0 < b1 and a1 > b0``, so touching intervals never conflict.
"""

from typing import Iterable, List, Optional, Sequence

import pendulum
from pendulum import DateTime

from .models import (
    AlternativeSlot,
    AvailabilityQuery,
    AvailabilityReport,
    Booking,
    Conflict,
    ConflictType,
    Interval,
)
from .padding import BETWEEN_BOOKINGS, DEFAULT_PADDING, PaddingPolicy
from .slot_generator import (
    BUSINESS_END_HOUR,
    BUSINESS_START_HOUR,
    DEFAULT_TIMEZONE,
    SLOT_DURATION_MINUTES,
    parse_date,
)
from .time_format import minutes_to_time


class ConflictChecker:
    """
    Decides whether a candidate interval can be booked on a given date.

    Bookings are only compared against candidates for the same date, using
    plain string equality on the date.
    """

    def __init__(self, padding: PaddingPolicy = DEFAULT_PADDING):
        self.padding = padding

    def padded_interval(
        self,
        booking: Booking,
        *,
        include_setup: bool = False,
        include_breakdown: bool = False,
    ) -> Interval:
        """Stated booking time plus setup and breakdown, without the buffer."""
        before = self.padding.setup_for(booking.services) if include_setup else 0
        after = self.padding.breakdown_for(booking.services) if include_breakdown else 0
        return booking.interval().expand(before=before, after=after)

    def effective_interval(
        self,
        booking: Booking,
        *,
        include_setup: bool = False,
        include_breakdown: bool = False,
    ) -> Interval:
        """The interval a booking actually occupies for conflict testing."""
        buffer = self.padding.buffer_for(BETWEEN_BOOKINGS)
        padded = self.padded_interval(
            booking,
            include_setup=include_setup,
            include_breakdown=include_breakdown,
        )
        return padded.expand(before=buffer, after=buffer)

    def is_available(
        self,
        date: str,
        start: str,
        end: str,
        bookings: Iterable[Booking],
        *,
        include_setup: bool = False,
        include_breakdown: bool = False,
    ) -> bool:
        """
        Check a candidate ``[start, end)`` against the bookings for ``date``.

        A single conflict is enough to reject the candidate.

        Raises:
            InvalidFormat: If any time string is malformed
            InvalidInput: If the candidate start is after its end
        """
        candidate = AvailabilityQuery(date=date, candidate_start=start, candidate_end=end).candidate()

        for booking in self._same_date(bookings, date):
            effective = self.effective_interval(
                booking,
                include_setup=include_setup,
                include_breakdown=include_breakdown,
            )
            if candidate.overlaps(effective):
                return False

        return True

    def detect_conflicts(self, query: AvailabilityQuery, bookings: Iterable[Booking]) -> List[Conflict]:
        """
        List every booking that blocks the query, classified by the
        innermost layer the candidate reaches: the booking itself, its
        setup/breakdown padding, or only the buffer.
        """
        candidate = query.candidate()
        conflicts: List[Conflict] = []

        for booking in self._same_date(bookings, query.date):
            stated = booking.interval()
            padded = self.padded_interval(
                booking,
                include_setup=query.include_setup,
                include_breakdown=query.include_breakdown,
            )
            effective = self.effective_interval(
                booking,
                include_setup=query.include_setup,
                include_breakdown=query.include_breakdown,
            )

            if not candidate.overlaps(effective):
                continue

            if candidate.overlaps(stated):
                conflict_type = ConflictType.DIRECT_OVERLAP
            elif candidate.overlaps(padded):
                conflict_type = ConflictType.SETUP_CONFLICT
            else:
                conflict_type = ConflictType.BUFFER_VIOLATION

            conflicts.append(
                Conflict(
                    booking_id=booking.id,
                    type=conflict_type,
                    booking=stated,
                    effective=effective,
                )
            )

        return conflicts

    def check(self, query: AvailabilityQuery, bookings: Iterable[Booking]) -> AvailabilityReport:
        """Full availability report for a query."""
        conflicts = self.detect_conflicts(query, bookings)

        return AvailabilityReport(
            available=not conflicts,
            conflicts=[c for c in conflicts if c.type is not ConflictType.BUFFER_VIOLATION],
            buffer_violations=[c for c in conflicts if c.type is ConflictType.BUFFER_VIOLATION],
        )

    def suggest_alternatives(
        self,
        query: AvailabilityQuery,
        bookings: Sequence[Booking],
        start_hour: int = BUSINESS_START_HOUR,
        end_hour: int = BUSINESS_END_HOUR,
        limit: int = 3,
        step_minutes: int = SLOT_DURATION_MINUTES,
        now: Optional[DateTime] = None,
        timezone: str = DEFAULT_TIMEZONE,
    ) -> List[AlternativeSlot]:
        """
        Suggest grid-aligned windows of the same length that are available.

        Candidates must fit entirely inside the business window and are
        ranked by distance from the requested start, earlier first on ties.
        When the query date is today in ``timezone``, windows starting
        before ``now`` are skipped.

        Raises:
            InvalidDate: If the query date cannot be parsed
        """
        requested = query.candidate()
        duration = requested.duration_minutes()
        window_start = start_hour * 60
        window_end = end_hour * 60
        window_length = window_end - window_start

        if duration <= 0 or window_length <= 0 or limit <= 0:
            return []

        day = parse_date(query.date, timezone)
        now = (now or pendulum.now(timezone)).in_timezone(timezone)
        is_today = day.date() == now.date()

        same_date = list(self._same_date(bookings, query.date))
        effective = [
            self.effective_interval(
                booking,
                include_setup=query.include_setup,
                include_breakdown=query.include_breakdown,
            )
            for booking in same_date
        ]

        candidates = []
        for start in range(window_start, window_end - duration + 1, step_minutes):
            if start == requested.start:
                continue
            if is_today and day.set(hour=start // 60, minute=start % 60) < now:
                continue
            candidate = Interval(start=start, end=start + duration)
            if any(candidate.overlaps(occupied) for occupied in effective):
                continue
            candidates.append((abs(start - requested.start), start))

        candidates.sort()

        return [
            AlternativeSlot(
                start=minutes_to_time(start),
                end=minutes_to_time(start + duration),
                score=round(1 - distance / window_length, 2),
            )
            for distance, start in candidates[:limit]
        ]

    @staticmethod
    def _same_date(bookings: Iterable[Booking], date: str) -> Iterable[Booking]:
        return (booking for booking in bookings if booking.date == date)


DEFAULT_CONFLICT_CHECKER = ConflictChecker()


def is_available(
    date: str,
    start: str,
    end: str,
    bookings: Iterable[Booking],
    *,
    include_setup: bool = False,
    include_breakdown: bool = False,
    checker: Optional[ConflictChecker] = None,
) -> bool:
    """Module-level shortcut for ``ConflictChecker.is_available``."""
    return (checker or DEFAULT_CONFLICT_CHECKER).is_available(
        date,
        start,
        end,
        bookings,
        include_setup=include_setup,
        include_breakdown=include_breakdown,
    )
