"""
Generation of the fixed 15-minute slot grid for a calendar day.
"""

from typing import List, Optional

import pendulum
from pendulum import DateTime

from .exceptions import InvalidDate
from .models import TimeSlot

SLOT_DURATION_MINUTES = 15
BUSINESS_START_HOUR = 8
BUSINESS_END_HOUR = 23
DEFAULT_TIMEZONE = "America/Chicago"


def parse_date(date: str, timezone: str = DEFAULT_TIMEZONE) -> DateTime:
    """
    Parse a ``YYYY-MM-DD`` string to the start of that day in ``timezone``.

    Raises:
        InvalidDate: If the date is empty or cannot be parsed.
    """
    if not date or not str(date).strip():
        raise InvalidDate("Invalid date: date is empty")

    try:
        return pendulum.from_format(str(date).strip(), "YYYY-MM-DD", tz=timezone).start_of("day")
    except (ValueError, TypeError) as exc:
        raise InvalidDate(f"Invalid date: {date!r}") from exc


class SlotGenerator:
    """
    Builds the ordered slot grid for one business day.

    The window is not validated: an inverted window simply yields no slots.
    """

    def __init__(
        self,
        start_hour: int = BUSINESS_START_HOUR,
        end_hour: int = BUSINESS_END_HOUR,
        timezone: str = DEFAULT_TIMEZONE,
        slot_minutes: int = SLOT_DURATION_MINUTES,
    ):
        self.start_hour = start_hour
        self.end_hour = end_hour
        self.timezone = timezone
        self.slot_minutes = slot_minutes

    def generate(
        self,
        date: str,
        start_hour: Optional[int] = None,
        end_hour: Optional[int] = None,
        now: Optional[DateTime] = None,
    ) -> List[TimeSlot]:
        """
        Generate slots for ``date`` between ``start_hour`` and ``end_hour``.

        Args:
            date: Calendar date as ``YYYY-MM-DD``
            start_hour: Window start, defaults to the generator's start hour
            end_hour: Window end, defaults to the generator's end hour
            now: Current time; read once from the clock when omitted

        Returns:
            Slots in ascending order with ``index`` set. When ``date`` is
            today in the business time zone, slots starting strictly before
            ``now`` are unavailable.
        """
        day = parse_date(date, self.timezone)
        start_hour = self.start_hour if start_hour is None else start_hour
        end_hour = self.end_hour if end_hour is None else end_hour

        now = (now or pendulum.now(self.timezone)).in_timezone(self.timezone)
        is_today = day.date() == now.date()

        slots_per_hour = 60 // self.slot_minutes
        total_slots = max(0, (end_hour - start_hour) * slots_per_hour)

        slots: List[TimeSlot] = []

        for index in range(total_slots):
            slot_start = start_hour * 60 + index * self.slot_minutes
            slot_end = slot_start + self.slot_minutes

            available = True
            if is_today:
                slot_dt = day.set(hour=slot_start // 60, minute=slot_start % 60)
                available = slot_dt >= now

            slots.append(
                TimeSlot(start=slot_start, end=slot_end, available=available, index=index)
            )

        return slots


def generate_slots(
    date: str,
    start_hour: int = BUSINESS_START_HOUR,
    end_hour: int = BUSINESS_END_HOUR,
    now: Optional[DateTime] = None,
    timezone: str = DEFAULT_TIMEZONE,
) -> List[TimeSlot]:
    """Generate the slot grid for ``date`` with the default slot width."""
    return SlotGenerator(start_hour=start_hour, end_hour=end_hour, timezone=timezone).generate(date, now=now)
