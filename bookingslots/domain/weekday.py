"""
Weekday resolution in a business's own time zone.

A business viewed from a browser in another zone must still use its own day
boundaries, so every lookup goes through the business's IANA zone.
"""

from __future__ import annotations

import logging
from datetime import datetime

import pendulum
from pendulum import Date

from .models import WEEKDAY_NAMES
from .timeutils import DateValue, is_date_only, parse_calendar_date, parse_instant

logger = logging.getLogger(__name__)

UTC_ZONE = "UTC"


def resolve_timezone(name: str | None, log: logging.Logger | None = None):
    """
    Return the pendulum timezone for ``name``.

    Missing or unknown identifiers fall back to UTC with a warning; this
    never raises.
    """
    log = log or logger

    if not name or not isinstance(name, str):
        log.warning("Missing time zone identifier, falling back to UTC")
        return pendulum.timezone(UTC_ZONE)

    try:
        return pendulum.timezone(name.strip())
    except (ValueError, KeyError, OSError) as exc:
        log.warning("Invalid time zone %r, falling back to UTC: %s", name, exc)
        return pendulum.timezone(UTC_ZONE)


def resolve_local_date(value: DateValue, time_zone: str | None, log: logging.Logger | None = None) -> Date:
    """
    Resolve the business-local calendar date for a date or an instant.

    A calendar date is taken as-is (it already names the business's day).
    An instant (aware datetime or ISO timestamp) is converted into the
    business zone first, so 23:30 UTC can be "tomorrow" for the business.

    Raises:
        ScheduleParseError: If the value is neither a date nor a timestamp
    """
    return _local_date(value, resolve_timezone(time_zone, log))


def _local_date(value: DateValue, tz) -> Date:
    if is_date_only(value):
        return parse_calendar_date(value)

    if isinstance(value, datetime) and value.tzinfo is None:
        # naive datetimes already carry business wall-clock time
        return pendulum.date(value.year, value.month, value.day)

    return parse_instant(value, tz).date()


def resolve_day(value: DateValue, time_zone: str | None, log: logging.Logger | None = None) -> str:
    """
    Return the lowercase weekday name (``monday``..``sunday``) of a date as
    observed in ``time_zone``.

    The date is anchored at local noon so DST changes and UTC offset rounding
    can never push it across midnight.
    """
    tz = resolve_timezone(time_zone, log)
    day = _local_date(value, tz)
    noon = pendulum.datetime(day.year, day.month, day.day, 12, tz=tz)
    return WEEKDAY_NAMES[noon.weekday()]
