"""
Booking source backed by a YAML or JSON file.

Stands in for the storage layer when running the CLI or tests. The file
holds either a list of booking records or a mapping with a ``bookings``
key. Record keys may use snake_case or the camelCase the web API emits.
"""

import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

import yaml

from ..domain.exceptions import SchedulingError
from ..domain.models import Booking, BookingStatus
from ..domain.time_format import minutes_to_time

logger = logging.getLogger(__name__)


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in record:
            return record[key]
    raise KeyError(keys[0])


def _time_value(value: Any) -> str:
    # YAML 1.1 reads unquoted 18:00 as the sexagesimal int 1080.
    if isinstance(value, int) and not isinstance(value, bool):
        return minutes_to_time(value)
    return value


def _services_value(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def booking_from_record(record: Mapping[str, Any]) -> Booking:
    """
    Build a ``Booking`` from a stored record.

    Raises:
        KeyError: If a required field is missing
        SchedulingError: If a time or status is malformed, or the booking ends before it starts
    """
    booking = Booking(
        id=_first(record, "id"),
        date=str(_first(record, "date", "eventDate")),
        start_time=_time_value(_first(record, "start_time", "startTime", "eventStartTime")),
        end_time=_time_value(_first(record, "end_time", "endTime", "eventEndTime")),
        services=_services_value(record.get("services")),
        status=record.get("status", BookingStatus.CONFIRMED),
    )

    # Validate times eagerly so bad rows are reported at load time.
    booking.interval()

    return booking


class FileBookingSource:
    """
    Loads bookings from a file once and serves them per date.

    Without a path the source is empty.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = path
        self.bookings: List[Booking] = self._load_bookings()

    def _load_bookings(self) -> List[Booking]:
        if self.path is None:
            return []

        if not self.path.exists():
            raise FileNotFoundError(f"Bookings file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or []
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid bookings file {self.path}: {exc}") from exc

        if isinstance(data, dict):
            data = data.get("bookings") or []

        if not isinstance(data, list):
            raise ValueError("Bookings file must contain a list of bookings.")

        bookings: List[Booking] = []

        for position, record in enumerate(data):
            if not isinstance(record, dict):
                logger.warning("Skipping booking #%d in %s: not a mapping", position, self.path)
                continue

            try:
                bookings.append(booking_from_record(record))
            except (KeyError, SchedulingError) as exc:
                logger.warning("Skipping booking #%d in %s: %s", position, self.path, exc)

        logger.debug("Loaded %d booking(s) from %s", len(bookings), self.path)
        return bookings

    async def get_bookings(self, date: str) -> List[Booking]:
        """Return the bookings stored for ``date``."""
        return [booking for booking in self.bookings if booking.date == date]
