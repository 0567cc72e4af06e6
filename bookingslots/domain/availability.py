"""
Core business logic for calculating bookable appointment slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from .closures import apply_closures
from .conflicts import filter_conflicts
from .exceptions import InvalidDurationError, ScheduleParseError
from .hours import DEFAULT_DAYS_AHEAD, Closed, get_disabled_dates, resolve_operating_hours
from .models import Business, Closure, ExistingAppointment, Service, Slot
from .slot_generator import generate_slots
from .timeutils import DateValue

logger = logging.getLogger(__name__)


class AvailabilityCalculator:
    """
    Calculates bookable slots for a business, date and service duration.

    Algorithm:
    1. Resolve the business-local weekday and its opening hours
    2. Pick the slot step for the service duration
    3. Generate slots that fit before closing and avoid breaks
    4. Mark slots that collide with existing appointments
    5. Mark slots that start inside an active closure

    The calculator holds no state between calls; diagnostics go to the
    injected logger.
    """

    def __init__(self, log: logging.Logger | None = None):
        self.logger = log or logger

    def find_available_slots(
        self,
        business: Business | None,
        date: DateValue,
        duration_minutes: int,
        appointments: Sequence[ExistingAppointment] = (),
        closures: Sequence[Closure] = (),
    ) -> List[Slot]:
        """
        Compute the ordered slot list for one date.

        Args:
            business: The business, or None when it could not be loaded
            date: The queried date (``YYYY-MM-DD``, date, or instant)
            duration_minutes: Length of the requested service
            appointments: Appointments already booked for the date
            closures: Closures that may affect the date

        Returns:
            Slots ordered by start time; empty when the business is closed

        Raises:
            InvalidDurationError: If duration_minutes is not positive
        """
        if duration_minutes <= 0:
            raise InvalidDurationError(f"Service duration must be positive, got {duration_minutes}")

        if business is None:
            self.logger.warning("No business given, returning no slots for %s", date)
            return []

        try:
            hours = resolve_operating_hours(business, date, self.logger)
        except ScheduleParseError as exc:
            self.logger.warning("Cannot resolve hours for %r: %s", date, exc)
            return []

        if isinstance(hours, Closed):
            self.logger.debug("Business %s is closed on %s (%s)", business.id, date, hours.day_name)
            return []

        slots = generate_slots(
            hours.open_time,
            hours.close_time,
            duration_minutes,
            hours.breaks,
            self.logger,
        )

        if not slots:
            return []

        slots = filter_conflicts(
            slots,
            duration_minutes,
            appointments,
            date,
            business.time_zone,
            self.logger,
        )

        return apply_closures(date, slots, closures, business.time_zone, self.logger)

    def find_slots_for_service(
        self,
        business: Business | None,
        date: DateValue,
        service: Service,
        appointments: Sequence[ExistingAppointment] = (),
        closures: Sequence[Closure] = (),
    ) -> List[Slot]:
        """Convenience wrapper taking a Service instead of a bare duration."""
        return self.find_available_slots(
            business,
            date,
            service.duration_minutes,
            appointments=appointments,
            closures=closures,
        )

    def disabled_dates(
        self,
        business: Business | None,
        start: DateValue,
        days_ahead: int = DEFAULT_DAYS_AHEAD,
        closures: Sequence[Closure] = (),
    ) -> List[str]:
        """Dates within the look-ahead window on which nothing can be booked."""
        return get_disabled_dates(business, start, days_ahead, closures, self.logger)
