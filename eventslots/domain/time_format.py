"""
Conversion between time-of-day strings and minutes since midnight.

All interval math in the engine runs on integer minutes. Strings enter and
leave through this module only, so a malformed value is rejected here
instead of producing a silently wrong comparison further down.
"""

import re
from enum import Enum

from .exceptions import InvalidFormat

MINUTES_PER_DAY = 24 * 60

TIME_24H_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):([0-5][0-9])$")
TIME_12H_PATTERN = re.compile(r"^(1[0-2]|0?[1-9]):([0-5][0-9])\s*([AaPp][Mm])$")


class TimeStyle(str, Enum):
    """Display style accepted by ``format_time``."""
    H24 = "24h"
    H12 = "12h"


def is_valid_time(value: str) -> bool:
    """Return True if ``value`` is a canonical 24-hour ``HH:MM`` string."""
    return isinstance(value, str) and TIME_24H_PATTERN.match(value) is not None


def to_minutes(value: str) -> int:
    """
    Convert a canonical ``HH:MM`` string to minutes since midnight.

    Raises:
        InvalidFormat: If the string is not two digits, colon, two digits
            with hour 0-23 and minute 0-59.
    """
    if not isinstance(value, str):
        raise InvalidFormat(f"Invalid time format: {value!r}")

    match = TIME_24H_PATTERN.match(value)
    if match is None:
        raise InvalidFormat(f"Invalid time format: {value!r} (expected HH:MM)")

    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_to_time(minutes: int) -> str:
    """
    Convert minutes since midnight to ``HH:MM``.

    ``1440`` renders as ``24:00`` so that a slot ending at midnight can
    still be displayed.
    """
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise InvalidFormat(f"Minutes out of range for a single day: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_time(value: str) -> str:
    """
    Parse a 24-hour ``HH:MM`` or 12-hour ``H:MM AM/PM`` string.

    Returns:
        The canonical 24-hour ``HH:MM`` representation.

    Raises:
        InvalidFormat: If the string matches neither form.
    """
    if not isinstance(value, str):
        raise InvalidFormat(f"Invalid time format: {value!r}")

    text = value.strip()

    if TIME_24H_PATTERN.match(text):
        return text

    match = TIME_12H_PATTERN.match(text)
    if match is None:
        raise InvalidFormat(f"Invalid time format: {value!r}")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3).upper()

    if period == "PM" and hours != 12:
        hours += 12
    elif period == "AM" and hours == 12:
        hours = 0

    return f"{hours:02d}:{minutes:02d}"


def format_time(value: str, style: "TimeStyle | str") -> str:
    """
    Format a canonical ``HH:MM`` string in the requested style.

    Examples:
        format_time("00:05", "12h") -> "12:05 AM"
        format_time("13:30", "12h") -> "1:30 PM"
        format_time("13:30", "24h") -> "13:30"
    """
    try:
        style = TimeStyle(style)
    except ValueError:
        raise InvalidFormat(f"Unknown time style: {style!r}") from None

    minutes = to_minutes(value)
    hours, mins = divmod(minutes, 60)

    if style is TimeStyle.H24:
        return f"{hours:02d}:{mins:02d}"

    period = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{mins:02d} {period}"


def validate_range(start: str, end: str) -> bool:
    """
    Check that ``start`` comes strictly before ``end``.

    Zero-length ranges return False rather than raising.

    Raises:
        InvalidFormat: If either value is not a valid ``HH:MM`` string.
    """
    return to_minutes(start) < to_minutes(end)
