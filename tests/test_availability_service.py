"""
Tests for the AvailabilityService orchestration layer.
"""

import asyncio
from typing import List

import pendulum

from eventslots.config import AppConfig
from eventslots.domain.models import AvailabilityQuery, Booking, ConflictType
from eventslots.services.availability import AvailabilityService

DATE = "2025-09-15"
TZ = "America/Chicago"


class StubBookingSource:
    """Minimal stub matching BookingSourceProtocol."""

    def __init__(self, bookings: List[Booking]):
        self._bookings = bookings
        self.calls: List[str] = []

    async def get_bookings(self, date):
        self.calls.append(date)
        return [booking for booking in self._bookings if booking.date == date]


def _build_service(bookings: List[Booking]) -> AvailabilityService:
    config = AppConfig()
    return AvailabilityService(
        booking_source=StubBookingSource(bookings),
        catalog=config.build_catalog(),
        slot_generator=config.build_slot_generator(),
        conflict_checker=config.build_conflict_checker(),
    )


def _evening_dj(status="CONFIRMED") -> Booking:
    return Booking(id=1, date=DATE, start_time="18:00", end_time="23:00", services=("DJ",), status=status)


def _yesterday():
    return pendulum.datetime(2025, 9, 14, 9, 0, tz=TZ)


def test_fetch_bookings_drops_cancelled():
    """Cancelled bookings no longer occupy the calendar."""
    cancelled = Booking(id=2, date=DATE, start_time="09:00", end_time="10:00", status="cancelled")
    service = _build_service([_evening_dj(), cancelled])

    bookings = asyncio.run(service.fetch_bookings(DATE))

    assert [booking.id for booking in bookings] == [1]


def test_check_reports_conflicts():
    """A candidate in front of the evening booking is rejected once setup is included."""
    service = _build_service([_evening_dj()])
    query = AvailabilityQuery(DATE, "17:00", "17:45", include_setup=True)

    report = asyncio.run(service.check(query))

    assert not report.available
    assert report.conflicts[0].type is ConflictType.SETUP_CONFLICT


def test_report_and_alternatives_share_one_fetch():
    """Fetched bookings can feed both the report and the suggestions."""
    service = _build_service([_evening_dj()])
    query = AvailabilityQuery(DATE, "17:00", "17:45", include_setup=True)

    bookings = asyncio.run(service.fetch_bookings(DATE))
    report = service.calculate_report(query=query, bookings=bookings)
    alternatives = service.calculate_alternatives(query=query, bookings=bookings, limit=1)

    assert not report.available
    assert [a.start for a in alternatives] == ["15:45"]
    assert service._booking_source.calls == [DATE]


def test_check_ignores_cancelled_bookings():
    """A cancelled booking does not block the same window."""
    service = _build_service([_evening_dj(status="CANCELLED")])

    report = asyncio.run(service.check(AvailabilityQuery(DATE, "18:00", "23:00")))

    assert report.available


def test_available_slots_amends_grid_with_conflicts():
    """Slots are available only if the whole engagement fits and is conflict free."""
    service = _build_service([_evening_dj()])

    slots = asyncio.run(service.available_slots(date=DATE, services=["Karaoke"], now=_yesterday()))

    # Karaoke runs 3 hours; the DJ booking occupies 17:30-23:30 once buffered.
    available = [slot.start_time for slot in slots if slot.available]
    assert len(slots) == 60
    assert available[0] == "08:00"
    assert available[-1] == "14:30"
    assert len(available) == 27


def test_available_slots_merged():
    """Merged output collapses the free and blocked runs."""
    service = _build_service([_evening_dj()])

    slots = asyncio.run(
        service.available_slots(date=DATE, services=["Karaoke"], merged=True, now=_yesterday())
    )

    assert [(str(slot), slot.available) for slot in slots] == [
        ("08:00 - 14:45", True),
        ("14:45 - 23:00", False),
    ]


def test_available_slots_keeps_past_slots_unavailable():
    """Slots already in the past today stay unavailable."""
    service = _build_service([])
    now = pendulum.datetime(2025, 9, 15, 10, 0, tz=TZ)

    slots = asyncio.run(service.available_slots(date=DATE, services=["Karaoke"], now=now))

    available = [slot.start_time for slot in slots if slot.available]
    assert available[0] == "10:00"
    assert available[-1] == "20:00"


def test_available_slots_with_override_and_padding():
    """An explicit duration and padding flags flow through to the check."""
    service = _build_service([_evening_dj()])

    slots = service.calculate_slots(
        date=DATE,
        services=["DJ"],
        bookings=[_evening_dj()],
        override_minutes=60,
        include_setup=True,
        now=_yesterday(),
    )

    available = [slot.start_time for slot in slots if slot.available]
    # One-hour engagement must end by 16:30
    assert available[-1] == "15:30"


def test_suggest_alternatives_uses_business_window():
    """Suggestions come from the configured window and booking source."""
    service = _build_service([_evening_dj()])
    query = AvailabilityQuery(DATE, "17:00", "17:45", include_setup=True)

    alternatives = asyncio.run(service.suggest_alternatives(query, limit=2))

    assert [(a.start, a.end) for a in alternatives] == [("15:45", "16:30"), ("15:30", "16:15")]


def test_suggest_alternatives_skips_past_windows_today():
    """Suggestions for today start no earlier than the current time."""
    morning = Booking(id=3, date=DATE, start_time="09:00", end_time="10:00", services=("Karaoke",))
    service = _build_service([morning])
    query = AvailabilityQuery(DATE, "09:30", "10:30")
    now = pendulum.datetime(2025, 9, 15, 20, 0, tz=TZ)

    alternatives = asyncio.run(service.suggest_alternatives(query, now=now))

    assert [a.start for a in alternatives] == ["20:00", "20:15", "20:30"]
