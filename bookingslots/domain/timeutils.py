"""
Parsing helpers for wall-clock times, calendar dates and instants.

All helpers raise ``ScheduleParseError`` on bad input; callers in the engine
decide whether a failure skips a single record or closes a whole day.
"""

from datetime import date, datetime
from typing import Union

import pendulum
from pendulum import Date, DateTime

from .exceptions import ScheduleParseError

MINUTES_PER_DAY = 24 * 60

DateValue = Union[str, date, datetime]


def parse_time_of_day(value: str) -> int:
    """
    Convert a local ``HH:MM`` (or ``HH:MM:SS``) string to minutes since midnight.

    ``24:00`` is accepted as the end of the day.

    Raises:
        ScheduleParseError: If the value is not a valid time of day
    """
    if not isinstance(value, str):
        raise ScheduleParseError(f"Time of day must be a string, got {value!r}")

    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(part.isdigit() for part in parts):
        raise ScheduleParseError(f"Invalid time of day: {value!r}")

    hour, minute = int(parts[0]), int(parts[1])
    if hour == 24 and minute == 0:
        return MINUTES_PER_DAY
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ScheduleParseError(f"Time of day out of range: {value!r}")

    return hour * 60 + minute


def format_minutes(minutes: int) -> str:
    """Format minutes since midnight as a zero-padded ``HH:MM`` string."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def is_date_only(value: DateValue) -> bool:
    """True for values that carry a calendar date but no time of day."""
    if isinstance(value, datetime):
        return False
    if isinstance(value, date):
        return True
    return isinstance(value, str) and len(value.strip()) == 10


def parse_calendar_date(value: DateValue) -> Date:
    """
    Parse a ``YYYY-MM-DD`` string or date object into a pendulum Date.

    Raises:
        ScheduleParseError: If the value is not a calendar date
    """
    if isinstance(value, datetime):
        raise ScheduleParseError(f"Expected a calendar date, got datetime {value!r}")
    if isinstance(value, date):
        return pendulum.date(value.year, value.month, value.day)

    try:
        parsed = pendulum.from_format(str(value).strip(), "YYYY-MM-DD")
    except ValueError as exc:
        raise ScheduleParseError(f"Invalid calendar date: {value!r}") from exc

    return parsed.date()


def parse_instant(value: DateValue, timezone) -> DateTime:
    """
    Parse an absolute timestamp and express it in ``timezone``.

    Values without an offset (naive datetimes, ISO strings without ``Z`` or
    ``+HH:MM``, bare dates) are read as wall-clock time in ``timezone``.

    Raises:
        ScheduleParseError: If the value cannot be read as a timestamp
    """
    if isinstance(value, datetime):
        return pendulum.instance(value, tz=timezone).in_timezone(timezone)

    if isinstance(value, date):
        return pendulum.datetime(value.year, value.month, value.day, tz=timezone)

    if not isinstance(value, str) or not value.strip():
        raise ScheduleParseError(f"Invalid timestamp: {value!r}")

    try:
        parsed = pendulum.parse(value.strip(), tz=timezone)
    except ValueError as exc:
        raise ScheduleParseError(f"Invalid timestamp: {value!r}") from exc

    if not isinstance(parsed, DateTime):
        raise ScheduleParseError(f"Not a timestamp: {value!r}")

    return parsed.in_timezone(timezone)


def local_midnight(day: Date, timezone) -> DateTime:
    """Start of ``day`` in ``timezone``."""
    return pendulum.datetime(day.year, day.month, day.day, tz=timezone)


def local_wall_clock(day: Date, minutes: int, timezone) -> DateTime:
    """
    Absolute instant of a wall-clock time on ``day`` in ``timezone``.

    Built from hour and minute rather than by adding minutes to midnight, so
    DST transitions earlier in the day do not shift the result.
    """
    days, remainder = divmod(minutes, MINUTES_PER_DAY)
    target = day.add(days=days) if days else day
    return pendulum.datetime(
        target.year,
        target.month,
        target.day,
        remainder // 60,
        remainder % 60,
        tz=timezone,
    )
