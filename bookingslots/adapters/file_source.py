"""
Booking data source backed by a local JSON file.

Stands in for the booking API when working offline or in tests.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from ..domain.exceptions import DataSourceError
from ..domain.models import Business, Closure, ExistingAppointment, Service
from .payloads import parse_appointments, parse_business, parse_closures, parse_service

logger = logging.getLogger(__name__)


class JsonFileDataSource:
    """
    Loads a business with its services, appointments and closures from JSON.

    Expected layout::

        {
            "business": {"id": "...", "timeZone": "...", "weeklySchedule": {...}},
            "services": [{"id": "...", "name": "...", "duration": 30}],
            "appointments": [{"date": "2024-06-03", "startTime": "10:00", "duration": 30}],
            "closures": [{"startDate": "...", "endDate": "...", "isActive": true}]
        }
    """

    def __init__(self, path: Path, default_time_zone: str = "UTC"):
        """
        Initialize the data source.

        Args:
            path: JSON file to read
            default_time_zone: Zone used when the business has none

        Raises:
            DataSourceError: If the file is missing or not valid JSON
        """
        self.path = path
        self.default_time_zone = default_time_zone
        self._data = self._load_data()

    def _load_data(self) -> Dict[str, Any]:
        """Load the JSON document from disk."""
        if not self.path.exists():
            raise DataSourceError(f"Data file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise DataSourceError(f"Could not read data file {self.path}: {exc}") from exc

        if not isinstance(data, dict):
            raise DataSourceError("Data file must contain a JSON object at the root level.")

        return data

    def _matches_business(self, business_id: str | None) -> bool:
        business = self._data.get("business") or {}
        return not business_id or str(business.get("id", "")) == business_id

    async def get_business(self, business_id: str | None = None) -> Business | None:
        """Return the business, or None when it is missing or another id was asked for."""
        if not self._matches_business(business_id):
            logger.warning("Business %s not found in %s", business_id, self.path)
            return None
        return parse_business(self._data.get("business"), self.default_time_zone)

    async def get_appointments(self, business_id: str | None, date: str) -> List[ExistingAppointment]:
        """Return the appointments booked on ``date``."""
        if not self._matches_business(business_id):
            return []
        return parse_appointments(self._data.get("appointments"), date=date)

    async def get_closures(self, business_id: str | None) -> List[Closure]:
        """Return all closures of the business, active or not."""
        if not self._matches_business(business_id):
            return []
        return parse_closures(self._data.get("closures"))

    async def get_service(self, service_id: str) -> Service | None:
        """Look up a service by id or (case-insensitive) name."""
        for record in self._data.get("services") or []:
            if not isinstance(record, dict):
                continue
            if str(record.get("id", "")) == service_id or str(record.get("name", "")).lower() == service_id.lower():
                return parse_service(record)
        return None
