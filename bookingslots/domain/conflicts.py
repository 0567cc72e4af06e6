"""
Conflict filter: marks slots that would overlap already booked appointments.

Appointment times arrive either as absolute ISO timestamps or as bare local
``HH:MM`` strings. Both are normalised once, at the boundary, into minutes
since the query date's local midnight in the business time zone. The
overlap logic below only ever sees integers.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Sequence

from pendulum import Date

from .exceptions import ScheduleParseError
from .models import ConflictReason, ExistingAppointment, MinuteRange, Slot, TimeValue
from .timeutils import DateValue, MINUTES_PER_DAY, parse_instant, parse_time_of_day
from .weekday import resolve_local_date, resolve_timezone

logger = logging.getLogger(__name__)

DEFAULT_APPOINTMENT_MINUTES = 60


def to_business_minutes(value: TimeValue, day: Date, timezone) -> int:
    """
    Convert an appointment time to minutes since local midnight of ``day``.

    Absolute timestamps are converted through the zone's wall clock rather
    than by subtracting a UTC offset, which would be wrong on DST days.
    Timestamps on other calendar days land outside 0..1440.

    Raises:
        ScheduleParseError: If the value cannot be parsed
    """
    if isinstance(value, datetime) or (isinstance(value, str) and ("T" in value or "-" in value)):
        local = parse_instant(value, timezone)
        day_offset = local.date().toordinal() - day.toordinal()
        return day_offset * MINUTES_PER_DAY + local.hour * 60 + local.minute

    return parse_time_of_day(value)


def appointment_range(appointment: ExistingAppointment, day: Date, timezone) -> MinuteRange:
    """
    Normalise an appointment to a minute range on ``day``.

    The end comes from end_time, else start plus duration, else a default
    of 60 minutes.

    Raises:
        ScheduleParseError: If a time cannot be parsed or the range is empty
    """
    start = to_business_minutes(appointment.start_time, day, timezone)

    if appointment.end_time is not None:
        end = to_business_minutes(appointment.end_time, day, timezone)
    else:
        end = start + (appointment.duration_minutes or DEFAULT_APPOINTMENT_MINUTES)

    if end <= start:
        raise ScheduleParseError(
            f"Appointment ends before it starts: {appointment.start_time!r} - {appointment.end_time!r}"
        )

    return MinuteRange(start=start, end=end)


def has_conflict(service: MinuteRange, booked: MinuteRange) -> bool:
    """
    Check whether a proposed service collides with a booked appointment.

    Back-to-back bookings, where one ends exactly as the other begins, are
    not conflicts.
    """
    return service.overlaps(booked) and not service.is_back_to_back(booked)


def booked_ranges(
    appointments: Sequence[ExistingAppointment],
    day: Date,
    timezone,
    log: logging.Logger | None = None,
) -> List[MinuteRange]:
    """
    Normalise appointments, skipping cancelled and unparseable ones.

    A bad record fails open for that record only.
    """
    log = log or logger
    ranges: List[MinuteRange] = []

    for appointment in appointments:
        if not appointment.blocks_time:
            continue

        try:
            ranges.append(appointment_range(appointment, day, timezone))
        except ScheduleParseError as exc:
            log.warning("Skipping appointment %s: %s", appointment.id or appointment.start_time, exc)

    return ranges


def filter_conflicts(
    slots: Sequence[Slot],
    duration_minutes: int,
    appointments: Sequence[ExistingAppointment],
    date: DateValue,
    time_zone: str | None,
    log: logging.Logger | None = None,
) -> List[Slot]:
    """
    Annotate slots with appointment conflicts.

    Args:
        slots: Candidate slots from the generator
        duration_minutes: Length of the requested service
        appointments: Appointments already booked around the date
        date: The queried date
        time_zone: The business's IANA zone

    Returns:
        New slot list in the same order; conflicting slots are unavailable
        with reason ``appointment-conflict``
    """
    log = log or logger
    tz = resolve_timezone(time_zone, log)
    day = resolve_local_date(date, time_zone, log)
    booked = booked_ranges(appointments, day, tz, log)

    log.debug(
        "Filtering %d slots for %d min service on %s against %d appointments",
        len(slots),
        duration_minutes,
        day.to_date_string(),
        len(booked),
    )

    result: List[Slot] = []

    for slot in slots:
        service = MinuteRange(start=slot.start_minutes, end=slot.start_minutes + duration_minutes)

        if any(has_conflict(service, existing) for existing in booked):
            log.debug("Slot %s conflicts with an existing appointment", slot.time)
            result.append(slot.block(ConflictReason.APPOINTMENT))
        else:
            result.append(slot)

    return result
