"""
Domain models for businesses, schedules, bookings and slots.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Tuple, Union

from pendulum import DateTime

from .exceptions import InvalidDurationError

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# ISO datetime string, bare "HH:MM" string or a datetime instance
TimeValue = Union[str, datetime]


class ClosureType(str, Enum):
    """Kind of closure; only used for display labelling."""
    VACATION = "VACATION"
    SICK_LEAVE = "SICK_LEAVE"
    MAINTENANCE = "MAINTENANCE"
    EMERGENCY = "EMERGENCY"
    OTHER = "OTHER"

    @property
    def label(self) -> str:
        """Human readable label for the closure type."""
        return _CLOSURE_LABELS[self]


_CLOSURE_LABELS = {
    ClosureType.VACATION: "Vacation",
    ClosureType.SICK_LEAVE: "Sick leave",
    ClosureType.MAINTENANCE: "Maintenance",
    ClosureType.EMERGENCY: "Emergency",
    ClosureType.OTHER: "Other",
}


class AppointmentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class ConflictReason(str, Enum):
    """Reason attached to a slot that was marked unavailable."""
    APPOINTMENT = "appointment-conflict"
    CLOSURE = "closure"


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable absolute time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def contains(self, instant: DateTime) -> bool:
        """Check if an instant lies within the half-open range [start, end)."""
        return self.start <= instant < self.end

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('YYYY-MM-DD HH:mm')}"


@dataclass(frozen=True)
class MinuteRange:
    """
    Half-open interval [start, end) in minutes since local midnight.

    Values may fall outside 0..1440 for bookings on neighbouring days.
    """
    start: int
    end: int

    def overlaps(self, other: "MinuteRange") -> bool:
        return self.start < other.end and self.end > other.start

    def is_back_to_back(self, other: "MinuteRange") -> bool:
        """True when one range ends exactly where the other begins."""
        return self.end == other.start or self.start == other.end


@dataclass(frozen=True)
class BreakPeriod:
    """A break inside a day's opening hours, as local HH:MM strings."""
    start_time: str
    end_time: str
    description: str = ""


@dataclass(frozen=True)
class DaySchedule:
    """
    Opening hours for one weekday.

    open_time and close_time are only meaningful when is_open is set.
    """
    is_open: bool
    open_time: str | None = None
    close_time: str | None = None
    breaks: Tuple[BreakPeriod, ...] = ()


@dataclass(frozen=True)
class Business:
    """
    A business and its recurring weekly schedule.

    weekly_schedule is keyed by weekday name; keys are lowercased on
    construction. A missing schedule means the business is treated as
    closed on every day.
    """
    id: str
    time_zone: str = "UTC"
    weekly_schedule: Dict[str, DaySchedule] | None = field(default=None, hash=False)

    def __post_init__(self):
        if self.weekly_schedule:
            normalised = {str(day).lower(): hours for day, hours in self.weekly_schedule.items()}
            object.__setattr__(self, "weekly_schedule", normalised)

    def schedule_for(self, day_name: str) -> DaySchedule | None:
        """Return the configured hours for a weekday name, if any."""
        if not self.weekly_schedule:
            return None
        return self.weekly_schedule.get(day_name.lower())


@dataclass(frozen=True)
class Service:
    """A bookable service."""
    duration_minutes: int
    id: str = ""
    name: str = ""

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise InvalidDurationError(
                f"Service duration must be positive, got {self.duration_minutes}"
            )


@dataclass(frozen=True)
class ExistingAppointment:
    """
    An appointment that is already booked for the queried date.

    Either end_time or duration_minutes describes its length; with neither
    the appointment is assumed to last 60 minutes.
    """
    start_time: TimeValue
    end_time: TimeValue | None = None
    duration_minutes: int | None = None
    status: AppointmentStatus = AppointmentStatus.CONFIRMED
    id: str = ""

    @property
    def blocks_time(self) -> bool:
        """Cancelled appointments free their time again."""
        return self.status != AppointmentStatus.CANCELLED


@dataclass(frozen=True)
class Closure:
    """
    An ad-hoc closure over an absolute time range.

    Inactive closures are kept in the list but never block anything.
    """
    start_date: TimeValue
    end_date: TimeValue | None = None
    is_active: bool = True
    type: ClosureType = ClosureType.OTHER
    reason: str = ""
    id: str = ""


@dataclass(frozen=True)
class Slot:
    """
    A candidate service start time with its availability verdict.
    """
    time: str
    available: bool = True
    conflict_reason: ConflictReason | None = None

    @property
    def start_minutes(self) -> int:
        hour, minute = self.time.split(":")
        return int(hour) * 60 + int(minute)

    def block(self, reason: ConflictReason) -> "Slot":
        """Return an unavailable copy, keeping any reason already recorded."""
        return replace(
            self,
            available=False,
            conflict_reason=self.conflict_reason or reason,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the wire format consumed by the booking UI."""
        data: Dict[str, Any] = {"time": self.time, "available": self.available}
        if self.conflict_reason is not None:
            data["conflictReason"] = self.conflict_reason.value
        return data
