"""
Domain layer - Pure availability logic without external dependencies.
"""

from .availability import AvailabilityCalculator
from .closures import apply_closures, closure_time_status, closures_for_day, is_blocked
from .conflicts import filter_conflicts, to_business_minutes
from .hours import (
    Closed,
    Open,
    get_disabled_dates,
    hours_for_date,
    is_business_open_on_date,
    resolve_operating_hours,
)
from .intervals import interval_for
from .models import (
    AppointmentStatus,
    BreakPeriod,
    Business,
    Closure,
    ClosureType,
    ConflictReason,
    DaySchedule,
    ExistingAppointment,
    Service,
    Slot,
    TimeRange,
)
from .slot_generator import generate_slots
from .weekday import resolve_day

__all__ = [
    "AppointmentStatus",
    "AvailabilityCalculator",
    "BreakPeriod",
    "Business",
    "Closed",
    "Closure",
    "ClosureType",
    "ConflictReason",
    "DaySchedule",
    "ExistingAppointment",
    "Open",
    "Service",
    "Slot",
    "TimeRange",
    "apply_closures",
    "closure_time_status",
    "closures_for_day",
    "filter_conflicts",
    "generate_slots",
    "get_disabled_dates",
    "hours_for_date",
    "interval_for",
    "is_blocked",
    "is_business_open_on_date",
    "resolve_day",
    "resolve_operating_hours",
    "to_business_minutes",
]
