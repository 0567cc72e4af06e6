"""
Parsing of booking API payloads into domain objects.

The booking API speaks camelCase JSON. Payload models accept both the API
names and snake_case, and every list is parsed record by record so one bad
entry never discards the rest.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Sequence

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..domain.models import (
    AppointmentStatus,
    BreakPeriod,
    Business,
    Closure,
    ClosureType,
    DaySchedule,
    ExistingAppointment,
    Service,
    WEEKDAY_NAMES,
)

logger = logging.getLogger(__name__)


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("id", mode="before", check_fields=False)
    @classmethod
    def coerce_id(cls, value: Any) -> str:
        """Identifiers may arrive as numbers or null."""
        return "" if value is None else str(value)


class BreakPayload(_Payload):
    start_time: str = Field(validation_alias=AliasChoices("startTime", "start_time"))
    end_time: str = Field(validation_alias=AliasChoices("endTime", "end_time"))
    description: str | None = ""

    def to_domain(self) -> BreakPeriod:
        return BreakPeriod(
            start_time=self.start_time,
            end_time=self.end_time,
            description=self.description or "",
        )


class DaySchedulePayload(_Payload):
    """
    One weekday of business hours.

    Accepts both ``openTime``/``closeTime`` and the older ``open``/``close``
    keys used by the business profile endpoint.
    """
    is_open: bool = Field(False, validation_alias=AliasChoices("isOpen", "is_open"))
    open_time: str | None = Field(None, validation_alias=AliasChoices("openTime", "open", "open_time"))
    close_time: str | None = Field(None, validation_alias=AliasChoices("closeTime", "close", "close_time"))
    breaks: List[BreakPayload] = Field(default_factory=list)

    @field_validator("breaks", mode="before")
    @classmethod
    def default_breaks(cls, value: Any) -> Any:
        """The API sends null for days without breaks."""
        return value or []

    def to_domain(self) -> DaySchedule:
        if not self.is_open:
            return DaySchedule(is_open=False)

        return DaySchedule(
            is_open=True,
            open_time=self.open_time,
            close_time=self.close_time,
            breaks=tuple(period.to_domain() for period in self.breaks),
        )


class BusinessPayload(_Payload):
    id: str = ""
    name: str | None = ""
    time_zone: str | None = Field(None, validation_alias=AliasChoices("timeZone", "timezone", "time_zone"))
    weekly_schedule: Dict[str, Any] | None = Field(
        None,
        validation_alias=AliasChoices("weeklySchedule", "businessHours", "weekly_schedule"),
    )


class ServicePayload(_Payload):
    id: str = ""
    name: str | None = ""
    duration_minutes: int = Field(validation_alias=AliasChoices("duration", "durationMinutes", "duration_minutes"))

    def to_domain(self) -> Service:
        return Service(duration_minutes=self.duration_minutes, id=self.id, name=self.name or "")


class AppointmentPayload(_Payload):
    id: str = ""
    date: str | None = None
    start_time: str | datetime = Field(validation_alias=AliasChoices("startTime", "start_time"))
    end_time: str | datetime | None = Field(None, validation_alias=AliasChoices("endTime", "end_time"))
    duration_minutes: int | None = Field(
        None,
        validation_alias=AliasChoices("duration", "durationMinutes", "duration_minutes"),
    )
    status: AppointmentStatus = AppointmentStatus.CONFIRMED

    @field_validator("status", mode="before")
    @classmethod
    def normalise_status(cls, value: Any) -> Any:
        """Unknown statuses block time like confirmed ones."""
        if value is None:
            return AppointmentStatus.CONFIRMED
        text = str(value).upper()
        if text not in AppointmentStatus.__members__:
            return AppointmentStatus.CONFIRMED
        return text

    def to_domain(self) -> ExistingAppointment:
        return ExistingAppointment(
            start_time=self.start_time,
            end_time=self.end_time,
            duration_minutes=self.duration_minutes,
            status=self.status,
            id=self.id,
        )


class ClosurePayload(_Payload):
    id: str = ""
    start_date: str | datetime = Field(validation_alias=AliasChoices("startDate", "start_date"))
    end_date: str | datetime | None = Field(None, validation_alias=AliasChoices("endDate", "end_date"))
    is_active: bool = Field(True, validation_alias=AliasChoices("isActive", "is_active"))
    type: ClosureType = ClosureType.OTHER
    reason: str | None = ""

    @field_validator("type", mode="before")
    @classmethod
    def normalise_type(cls, value: Any) -> Any:
        """Closure type only labels the closure; unknown values become OTHER."""
        if value is None:
            return ClosureType.OTHER
        text = str(value).upper()
        if text not in ClosureType.__members__:
            return ClosureType.OTHER
        return text

    def to_domain(self) -> Closure:
        return Closure(
            start_date=self.start_date,
            end_date=self.end_date,
            is_active=self.is_active,
            type=self.type,
            reason=self.reason or "",
            id=self.id,
        )


def parse_weekly_schedule(
    raw: Mapping[str, Any] | None,
    log: logging.Logger | None = None,
) -> Dict[str, DaySchedule] | None:
    """
    Parse a weekday -> hours mapping, dropping unknown or invalid days.

    A dropped day is simply absent, which the engine treats as closed.
    """
    log = log or logger

    if not raw:
        return None

    schedule: Dict[str, DaySchedule] = {}

    for day_name, day_data in raw.items():
        key = str(day_name).lower()
        if key not in WEEKDAY_NAMES:
            log.warning("Ignoring unknown weekday %r in business hours", day_name)
            continue

        try:
            schedule[key] = DaySchedulePayload.model_validate(day_data).to_domain()
        except ValidationError as exc:
            log.warning("Ignoring invalid hours for %s: %s", key, exc)

    return schedule


def parse_business(
    data: Mapping[str, Any] | None,
    default_time_zone: str = "UTC",
    log: logging.Logger | None = None,
) -> Business | None:
    """
    Parse a business profile payload.

    Returns None when the payload is missing or not a business at all.
    """
    log = log or logger

    if not data:
        return None

    try:
        payload = BusinessPayload.model_validate(data)
    except ValidationError as exc:
        log.warning("Invalid business payload: %s", exc)
        return None

    return Business(
        id=payload.id,
        time_zone=payload.time_zone or default_time_zone,
        weekly_schedule=parse_weekly_schedule(payload.weekly_schedule, log),
    )


def parse_service(data: Mapping[str, Any]) -> Service:
    """
    Parse a service catalogue entry.

    Raises:
        ValueError: If the payload has no usable duration
    """
    try:
        return ServicePayload.model_validate(data).to_domain()
    except ValidationError as exc:
        raise ValueError(f"Invalid service payload: {exc}") from exc


def _parse_records(records, payload_cls, kind: str, log: logging.Logger):
    parsed = []
    for index, record in enumerate(records or []):
        try:
            parsed.append(payload_cls.model_validate(record))
        except ValidationError as exc:
            log.warning("Skipping %s #%d: %s", kind, index, exc)
    return parsed


def parse_appointments(
    records: Sequence[Mapping[str, Any]] | None,
    date: str | None = None,
    log: logging.Logger | None = None,
) -> List[ExistingAppointment]:
    """
    Parse appointment records, skipping invalid ones.

    When ``date`` is given, records carrying a different ``date`` field are
    dropped; records without one are kept and placed by their timestamps.
    """
    log = log or logger
    payloads = _parse_records(records, AppointmentPayload, "appointment", log)

    return [
        payload.to_domain()
        for payload in payloads
        if date is None or payload.date is None or payload.date == date
    ]


def parse_closures(
    records: Sequence[Mapping[str, Any]] | None,
    log: logging.Logger | None = None,
) -> List[Closure]:
    """Parse closure records, skipping invalid ones."""
    log = log or logger
    return [
        payload.to_domain()
        for payload in _parse_records(records, ClosurePayload, "closure", log)
    ]
