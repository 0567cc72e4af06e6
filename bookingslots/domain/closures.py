"""
Closure overlay: ad-hoc absolute-time exceptions to the weekly schedule.

Closures are static facts for the duration of one computation. Their own
lifecycle (create, edit, cancel) belongs to the closures CRUD layer.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import pendulum
from pendulum import DateTime

from .exceptions import ScheduleParseError
from .models import Closure, ConflictReason, MinuteRange, Slot, TimeRange
from .timeutils import (
    DateValue,
    is_date_only,
    local_midnight,
    local_wall_clock,
    parse_instant,
)
from .weekday import resolve_local_date, resolve_timezone

logger = logging.getLogger(__name__)

UPCOMING = "upcoming"
CURRENT = "current"
PAST = "past"


def closure_range(closure: Closure, timezone) -> TimeRange:
    """
    Convert a closure to an absolute time range.

    A closure without an end date lasts until the end of the business-local
    day it starts on. A date-only end date includes that whole day.

    Raises:
        ScheduleParseError: If a timestamp cannot be parsed
        ValueError: If the closure ends before it starts
    """
    start = parse_instant(closure.start_date, timezone)

    if closure.end_date is None:
        end = local_midnight(start.date(), timezone).add(days=1)
    elif is_date_only(closure.end_date):
        end = parse_instant(closure.end_date, timezone).add(days=1)
    else:
        end = parse_instant(closure.end_date, timezone)

    return TimeRange(start=start, end=end)


def _day_window(day, timezone) -> TimeRange:
    start = local_midnight(day, timezone)
    return TimeRange(start=start, end=start.add(days=1))


def closures_for_day(
    date: DateValue,
    time_zone: str | None,
    closures: Sequence[Closure],
    log: logging.Logger | None = None,
) -> List[TimeRange]:
    """
    Select the active closures that overlap the business-local day.

    Inactive closures are ignored without being removed from the input.
    Closures with unparseable or inverted timestamps are skipped.

    Returns:
        Absolute time ranges of the relevant closures, sorted by start
    """
    log = log or logger
    tz = resolve_timezone(time_zone, log)
    day = resolve_local_date(date, time_zone, log)
    window = _day_window(day, tz)

    ranges: List[TimeRange] = []

    for closure in closures:
        if not closure.is_active:
            continue

        try:
            time_range = closure_range(closure, tz)
        except (ScheduleParseError, ValueError) as exc:
            log.warning("Skipping closure %s: %s", closure.id or closure.start_date, exc)
            continue

        if time_range.overlaps(window):
            log.debug(
                "Closure %s applies on %s: %s (%d min)",
                closure.id or closure.start_date,
                day.to_date_string(),
                time_range,
                time_range.duration_minutes(),
            )
            ranges.append(time_range)

    return sorted(ranges, key=lambda r: r.start)


def _slot_instant(day, slot: Slot, timezone) -> DateTime:
    return local_wall_clock(day, slot.start_minutes, timezone)


def is_blocked(
    date: DateValue,
    slot: Slot,
    closures: Sequence[Closure],
    time_zone: str | None,
    log: logging.Logger | None = None,
) -> bool:
    """
    Check whether a slot's start instant falls inside an active closure.

    A closure only blocks slots whose start lies within [start, end); slots
    next to it stay untouched.
    """
    log = log or logger
    tz = resolve_timezone(time_zone, log)
    day = resolve_local_date(date, time_zone, log)
    instant = _slot_instant(day, slot, tz)

    return any(
        time_range.contains(instant)
        for time_range in closures_for_day(day, time_zone, closures, log)
    )


def apply_closures(
    date: DateValue,
    slots: Sequence[Slot],
    closures: Sequence[Closure],
    time_zone: str | None,
    log: logging.Logger | None = None,
) -> List[Slot]:
    """
    Mark every slot whose start falls inside an active closure as unavailable.

    Slots keep an appointment conflict reason when they already have one.
    """
    log = log or logger
    tz = resolve_timezone(time_zone, log)
    day = resolve_local_date(date, time_zone, log)
    relevant = closures_for_day(day, time_zone, closures, log)

    if not relevant:
        return list(slots)

    result: List[Slot] = []
    for slot in slots:
        instant = _slot_instant(day, slot, tz)
        if any(time_range.contains(instant) for time_range in relevant):
            result.append(slot.block(ConflictReason.CLOSURE))
        else:
            result.append(slot)

    return result


def _merge_adjacent_ranges(ranges: List[TimeRange]) -> List[TimeRange]:
    """
    Merge overlapping or adjacent time ranges.

    Example: [09:00-10:00, 10:00-11:00] -> [09:00-11:00]
    """
    if not ranges:
        return []

    sorted_ranges = sorted(ranges, key=lambda r: r.start)
    merged: List[TimeRange] = [sorted_ranges[0]]

    for current in sorted_ranges[1:]:
        last = merged[-1]

        if current.start <= last.end:
            merged[-1] = TimeRange(start=last.start, end=max(last.end, current.end))
        else:
            merged.append(current)

    return merged


def covers_window(
    date: DateValue,
    window: MinuteRange,
    closures: Sequence[Closure],
    time_zone: str | None,
    log: logging.Logger | None = None,
) -> bool:
    """
    Check whether active closures together cover a whole opening window.

    Used to disable a date entirely in the date picker.
    """
    log = log or logger
    tz = resolve_timezone(time_zone, log)
    day = resolve_local_date(date, time_zone, log)

    opening = TimeRange(
        start=local_wall_clock(day, window.start, tz),
        end=local_wall_clock(day, window.end, tz),
    )

    for time_range in _merge_adjacent_ranges(closures_for_day(day, time_zone, closures, log)):
        if time_range.start <= opening.start and time_range.end >= opening.end:
            return True

    return False


def closure_time_status(
    closure: Closure,
    now: DateTime | None = None,
    time_zone: str | None = None,
) -> str | None:
    """
    Classify a closure relative to ``now`` as upcoming, current or past.

    Returns None when the closure's timestamps cannot be parsed.
    """
    tz = resolve_timezone(time_zone or "UTC")
    now = now or pendulum.now(tz)

    try:
        time_range = closure_range(closure, tz)
    except (ScheduleParseError, ValueError):
        return None

    if now < time_range.start:
        return UPCOMING
    if now < time_range.end:
        return CURRENT
    return PAST
