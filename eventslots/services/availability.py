"""
Application service for answering availability questions about a date.

The service pulls the bookings for a date through a booking source adapter
and delegates every decision to the domain engine. Storage, locking and
double-booking prevention under concurrent writers stay with the booking
source; the service only answers for the bookings it was shown.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

from pendulum import DateTime

from ..domain.catalog import ServiceCatalog
from ..domain.conflict_checker import ConflictChecker
from ..domain.intervals import merge_slots
from ..domain.models import (
    AlternativeSlot,
    AvailabilityQuery,
    AvailabilityReport,
    Booking,
    Interval,
    TimeSlot,
)
from ..domain.slot_generator import SlotGenerator

logger = logging.getLogger(__name__)


class BookingSourceProtocol(Protocol):
    """Protocol describing the booking lookup needed by the service."""

    async def get_bookings(self, date: str) -> List[Booking]:
        """Return the bookings stored for ``date``."""


class AvailabilityService:
    """
    Orchestrates booking retrieval, duration resolution and conflict checks.

    Dependency inversion toward a protocol makes it easy to plug in a real
    storage adapter or the file-backed source in tests.
    """

    def __init__(
        self,
        booking_source: BookingSourceProtocol,
        catalog: ServiceCatalog,
        slot_generator: SlotGenerator,
        conflict_checker: ConflictChecker,
    ) -> None:
        self._booking_source = booking_source
        self._catalog = catalog
        self._slot_generator = slot_generator
        self._conflict_checker = conflict_checker

    async def fetch_bookings(self, date: str) -> List[Booking]:
        """Fetch the bookings for ``date`` that still occupy the calendar."""
        bookings = await self._booking_source.get_bookings(date)
        active = self._active_bookings(bookings)

        logger.debug(
            "Fetched %d booking(s) for %s, %d active",
            len(bookings),
            date,
            len(active),
        )

        return active

    async def check(self, query: AvailabilityQuery) -> AvailabilityReport:
        """Fetch bookings and produce a full availability report."""
        bookings = await self.fetch_bookings(query.date)
        return self.calculate_report(query=query, bookings=bookings)

    async def suggest_alternatives(
        self,
        query: AvailabilityQuery,
        limit: int = 3,
        now: Optional[DateTime] = None,
    ) -> List[AlternativeSlot]:
        """Fetch bookings and suggest nearby windows of the same length."""
        bookings = await self.fetch_bookings(query.date)
        return self.calculate_alternatives(query=query, bookings=bookings, limit=limit, now=now)

    async def available_slots(
        self,
        *,
        date: str,
        services: Sequence[str],
        override_minutes: Optional[int] = None,
        include_setup: bool = False,
        include_breakdown: bool = False,
        merged: bool = False,
        now: Optional[DateTime] = None,
    ) -> List[TimeSlot]:
        """Fetch bookings and mark which grid slots can start the engagement."""
        bookings = await self.fetch_bookings(date)

        return self.calculate_slots(
            date=date,
            services=services,
            bookings=bookings,
            override_minutes=override_minutes,
            include_setup=include_setup,
            include_breakdown=include_breakdown,
            merged=merged,
            now=now,
        )

    def calculate_slots(
        self,
        *,
        date: str,
        services: Sequence[str],
        bookings: Sequence[Booking],
        override_minutes: Optional[int] = None,
        include_setup: bool = False,
        include_breakdown: bool = False,
        merged: bool = False,
        now: Optional[DateTime] = None,
    ) -> List[TimeSlot]:
        """
        Amend the generated grid with conflict checks.

        A slot stays available only if the full engagement starting at that
        slot fits inside the business window and conflicts with no booking.
        Slots already in the past keep their unavailable flag.
        """
        duration = self._catalog.resolve_duration(services, override_minutes)
        slots = self._slot_generator.generate(date, now=now)
        window_end = self._slot_generator.end_hour * 60

        effective = [
            self._conflict_checker.effective_interval(
                booking,
                include_setup=include_setup,
                include_breakdown=include_breakdown,
            )
            for booking in bookings
            if booking.date == date
        ]

        amended: List[TimeSlot] = []
        for slot in slots:
            engagement = Interval(start=slot.start, end=slot.start + duration)
            fits = engagement.end <= window_end
            free = not any(engagement.overlaps(occupied) for occupied in effective)
            amended.append(slot.with_availability(slot.available and fits and free))

        return merge_slots(amended) if merged else amended

    def calculate_report(
        self,
        *,
        query: AvailabilityQuery,
        bookings: Sequence[Booking],
    ) -> AvailabilityReport:
        return self._conflict_checker.check(query, bookings)

    def calculate_alternatives(
        self,
        *,
        query: AvailabilityQuery,
        bookings: Sequence[Booking],
        limit: int = 3,
        now: Optional[DateTime] = None,
    ) -> List[AlternativeSlot]:
        """Suggest windows inside the business hours, skipping ones already past today."""
        return self._conflict_checker.suggest_alternatives(
            query,
            bookings,
            start_hour=self._slot_generator.start_hour,
            end_hour=self._slot_generator.end_hour,
            limit=limit,
            step_minutes=self._slot_generator.slot_minutes,
            now=now,
            timezone=self._slot_generator.timezone,
        )

    @staticmethod
    def _active_bookings(bookings: Sequence[Booking]) -> List[Booking]:
        """Drop cancelled bookings; they no longer occupy the calendar."""
        return [booking for booking in bookings if booking.is_active]
