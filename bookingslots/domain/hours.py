"""
Operating-hours lookup for a business on a given date.

Absence of schedule data always means "closed": guessing a default would let
customers book at times the business never agreed to.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Sequence, Tuple, Union

from .closures import covers_window
from .exceptions import ScheduleParseError
from .models import BreakPeriod, Business, Closure, MinuteRange
from .timeutils import DateValue, parse_time_of_day
from .weekday import resolve_day, resolve_local_date

logger = logging.getLogger(__name__)

DEFAULT_DAYS_AHEAD = 14


@dataclass(frozen=True)
class Closed:
    """The business does not take bookings on this day."""
    day_name: str
    is_open: ClassVar[bool] = False


@dataclass(frozen=True)
class Open:
    """The business is open on this day between open_time and close_time."""
    day_name: str
    open_time: str
    close_time: str
    breaks: Tuple[BreakPeriod, ...] = ()
    is_open: ClassVar[bool] = True

    @property
    def window(self) -> MinuteRange:
        return MinuteRange(
            start=parse_time_of_day(self.open_time),
            end=parse_time_of_day(self.close_time),
        )


OperatingHours = Union[Closed, Open]


def resolve_operating_hours(
    business: Business | None,
    date: DateValue,
    log: logging.Logger | None = None,
) -> OperatingHours:
    """
    Resolve a business's opening hours for a date.

    Returns ``Closed`` when there is no business, no weekly schedule, no
    entry for the weekday, the day is marked closed, or its opening window
    is unusable. Otherwise returns ``Open`` with the day's breaks.

    Raises:
        ScheduleParseError: If the date itself cannot be parsed
    """
    log = log or logger
    time_zone = business.time_zone if business is not None else None
    day_name = resolve_day(date, time_zone, log)

    if business is None:
        log.warning("No business data available, treating %s as closed", date)
        return Closed(day_name=day_name)

    if not business.weekly_schedule:
        log.warning("No business hours data available for business %s", business.id)
        return Closed(day_name=day_name)

    schedule = business.schedule_for(day_name)
    if schedule is None:
        log.warning("No hours found for %s at business %s", day_name, business.id)
        return Closed(day_name=day_name)

    if not schedule.is_open:
        return Closed(day_name=day_name)

    hours = Open(
        day_name=day_name,
        open_time=schedule.open_time or "",
        close_time=schedule.close_time or "",
        breaks=tuple(schedule.breaks or ()),
    )

    try:
        window = hours.window
    except ScheduleParseError as exc:
        log.warning("Unusable opening hours on %s at business %s: %s", day_name, business.id, exc)
        return Closed(day_name=day_name)

    if window.end <= window.start:
        log.warning(
            "Closing time %s is not after opening time %s on %s",
            hours.close_time,
            hours.open_time,
            day_name,
        )
        return Closed(day_name=day_name)

    return hours


def hours_for_date(
    business: Business | None,
    date: DateValue,
    log: logging.Logger | None = None,
) -> Dict[str, Any]:
    """
    Return the day's hours in the wire shape used by the booking UI.

    Closed days omit open/close times and breaks. An unparseable date is
    reported as closed with an empty day name.
    """
    log = log or logger

    try:
        hours = resolve_operating_hours(business, date, log)
    except ScheduleParseError as exc:
        log.warning("Cannot resolve hours for %r: %s", date, exc)
        return {"isOpen": False, "breaks": [], "dayName": ""}

    if isinstance(hours, Closed):
        return {"isOpen": False, "breaks": [], "dayName": hours.day_name}

    return {
        "isOpen": True,
        "openTime": hours.open_time,
        "closeTime": hours.close_time,
        "breaks": [
            {
                "startTime": period.start_time,
                "endTime": period.end_time,
                "description": period.description,
            }
            for period in hours.breaks
        ],
        "dayName": hours.day_name,
    }


def is_business_open_on_date(
    business: Business | None,
    date: DateValue,
    log: logging.Logger | None = None,
) -> bool:
    """Check whether the weekly schedule opens the business on a date."""
    return resolve_operating_hours(business, date, log).is_open


def get_disabled_dates(
    business: Business | None,
    start: DateValue,
    days_ahead: int = DEFAULT_DAYS_AHEAD,
    closures: Sequence[Closure] = (),
    log: logging.Logger | None = None,
) -> List[str]:
    """
    List the dates a date picker should disable.

    A date is disabled when the weekly schedule closes the business or when
    an active closure covers its whole opening window.

    Args:
        business: The business, or None
        start: First date to check (date or instant)
        days_ahead: Number of consecutive days to check
        closures: Closures to take into account

    Returns:
        ``YYYY-MM-DD`` strings in ascending order
    """
    log = log or logger
    time_zone = business.time_zone if business is not None else None

    try:
        first_day = resolve_local_date(start, time_zone, log)
    except ScheduleParseError as exc:
        log.warning("Cannot compute disabled dates from %r: %s", start, exc)
        return []

    disabled: List[str] = []

    for offset in range(days_ahead):
        day = first_day.add(days=offset)
        hours = resolve_operating_hours(business, day, log)

        if isinstance(hours, Closed):
            disabled.append(day.to_date_string())
        elif covers_window(day, hours.window, closures, time_zone, log):
            disabled.append(day.to_date_string())

    return disabled
