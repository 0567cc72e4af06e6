"""
Time slot generation inside a single day's opening hours.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from .exceptions import ScheduleParseError
from .intervals import interval_for
from .models import BreakPeriod, MinuteRange, Slot
from .timeutils import format_minutes, parse_time_of_day

logger = logging.getLogger(__name__)


def parse_breaks(
    breaks: Sequence[BreakPeriod],
    window: MinuteRange,
    log: logging.Logger | None = None,
) -> List[MinuteRange]:
    """
    Convert break periods to minute ranges, dropping malformed ones.

    A break is ignored when it cannot be parsed, ends before it starts, or
    lies outside the opening window. At worst this over-generates slots,
    which booking validation downstream rejects.
    """
    log = log or logger
    parsed: List[MinuteRange] = []

    for period in breaks:
        try:
            start = parse_time_of_day(period.start_time)
            end = parse_time_of_day(period.end_time)
        except ScheduleParseError as exc:
            log.warning("Ignoring unparseable break %r: %s", period, exc)
            continue

        if end <= start:
            log.warning("Ignoring break %s-%s: end is not after start", period.start_time, period.end_time)
            continue

        if start < window.start or end > window.end:
            log.warning(
                "Ignoring break %s-%s outside opening hours %s-%s",
                period.start_time,
                period.end_time,
                format_minutes(window.start),
                format_minutes(window.end),
            )
            continue

        parsed.append(MinuteRange(start=start, end=end))

    return parsed


def generate_slots(
    open_time: str,
    close_time: str,
    duration_minutes: int,
    breaks: Sequence[BreakPeriod] = (),
    log: logging.Logger | None = None,
) -> List[Slot]:
    """
    Generate candidate start times for a service within opening hours.

    Algorithm:
    1. Step from opening time at the interval chosen for the duration
    2. Stop at the first start whose service would run past closing
    3. Drop starts whose service interval intersects a break

    The last offered start may be earlier than ``close - duration`` when the
    step skips past it; no partial or back-filled slot is ever added.

    Args:
        open_time: Local opening time (HH:MM)
        close_time: Local closing time (HH:MM)
        duration_minutes: Length of the requested service
        breaks: Break periods of the day

    Returns:
        Ascending list of available slots
    """
    log = log or logger
    step = interval_for(duration_minutes)

    try:
        window = MinuteRange(
            start=parse_time_of_day(open_time),
            end=parse_time_of_day(close_time),
        )
    except ScheduleParseError as exc:
        log.warning("Cannot generate slots for hours %r-%r: %s", open_time, close_time, exc)
        return []

    break_ranges = parse_breaks(breaks, window, log)
    slots: List[Slot] = []

    for start in range(window.start, window.end, step):
        service = MinuteRange(start=start, end=start + duration_minutes)

        if service.end > window.end:
            break

        # Touching a break edge is allowed, like back-to-back appointments
        if any(service.overlaps(period) for period in break_ranges):
            continue

        slots.append(Slot(time=format_minutes(start)))

    return slots
