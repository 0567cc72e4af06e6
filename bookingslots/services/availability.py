"""
Application service for computing bookable slots.

The service coordinates fetching business data, appointments and closures
via a data source adapter and delegates the actual availability calculation
to the domain-level ``AvailabilityCalculator``. This keeps the CLI thin and
allows the booking API to be replaced by a stub in tests.
"""

from __future__ import annotations

from typing import List, Protocol

from ..domain.availability import AvailabilityCalculator
from ..domain.models import Business, Closure, ExistingAppointment, Slot
from ..domain.timeutils import DateValue
from ..domain.weekday import resolve_local_date


class BookingDataSourceProtocol(Protocol):
    """Protocol describing the booking data the service needs."""

    async def get_business(self, business_id: str | None = None) -> Business | None:
        """Return the business profile, or None if it does not exist."""

    async def get_appointments(self, business_id: str | None, date: str) -> List[ExistingAppointment]:
        """Return appointments booked on the business-local date."""

    async def get_closures(self, business_id: str | None) -> List[Closure]:
        """Return the business's closures."""


class AvailabilityService:
    """
    Orchestrates booking data retrieval and slot calculation.
    """

    def __init__(
        self,
        data_source: BookingDataSourceProtocol,
        calculator: AvailabilityCalculator | None = None,
    ) -> None:
        self._data_source = data_source
        self._calculator = calculator or AvailabilityCalculator()

    async def find_slots(
        self,
        *,
        business_id: str | None,
        date: DateValue,
        duration_minutes: int,
    ) -> List[Slot]:
        """
        Retrieve the day's bookings and closures and compute its slots.
        """
        business = await self._data_source.get_business(business_id)
        if business is None:
            return []

        day = resolve_local_date(date, business.time_zone).to_date_string()

        appointments = await self._data_source.get_appointments(business_id, day)
        closures = await self._data_source.get_closures(business_id)

        return self._calculator.find_available_slots(
            business,
            day,
            duration_minutes,
            appointments=appointments,
            closures=closures,
        )

    async def disabled_dates(
        self,
        *,
        business_id: str | None,
        start: DateValue,
        days_ahead: int,
    ) -> List[str]:
        """Dates a date picker should disable for the business."""
        business = await self._data_source.get_business(business_id)
        closures = await self._data_source.get_closures(business_id)

        return self._calculator.disabled_dates(business, start, days_ahead, closures)
