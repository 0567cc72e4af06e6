"""
Tests for the AvailabilityCalculator domain logic.
"""

import logging

import pytest

from bookingslots.domain.availability import AvailabilityCalculator
from bookingslots.domain.exceptions import InvalidDurationError
from bookingslots.domain.models import (
    AppointmentStatus,
    BreakPeriod,
    Business,
    Closure,
    ConflictReason,
    DaySchedule,
    ExistingAppointment,
    Service,
    WEEKDAY_NAMES,
)

LUNCH = BreakPeriod(start_time="12:00", end_time="13:00", description="Lunch")


def _every_day(open_time="09:00", close_time="17:00", breaks=()):
    return {
        day: DaySchedule(is_open=True, open_time=open_time, close_time=close_time, breaks=breaks)
        for day in WEEKDAY_NAMES
    }


def _salon() -> Business:
    schedule = _every_day("09:00", "18:00", (LUNCH,))
    schedule["sunday"] = DaySchedule(is_open=False)
    return Business(id="biz-001", time_zone="Europe/Istanbul", weekly_schedule=schedule)


def _by_time(slots):
    return {slot.time: slot for slot in slots}


class TestAvailabilityCalculator:
    """Tests for AvailabilityCalculator."""

    def test_empty_day(self):
        """No bookings: every generated slot is available."""
        business = Business(id="b1", time_zone="UTC", weekly_schedule=_every_day())
        calculator = AvailabilityCalculator()

        slots = calculator.find_available_slots(business, "2024-06-03", 30)

        assert slots[0].time == "09:00"
        assert slots[-1].time == "16:30"
        assert all(slot.available for slot in slots)

    def test_break_and_step(self):
        business = Business(id="b1", time_zone="UTC", weekly_schedule=_every_day(breaks=(LUNCH,)))
        calculator = AvailabilityCalculator()

        times = [slot.time for slot in calculator.find_available_slots(business, "2024-06-03", 60)]

        assert "11:00" in times
        assert "11:30" not in times
        assert "12:00" not in times
        assert "13:00" in times
        assert times[-1] == "16:00"

    def test_appointments_and_closures_combined(self):
        calculator = AvailabilityCalculator()
        appointments = [
            ExistingAppointment(id="apt-1", start_time="10:00", end_time="10:30"),
            ExistingAppointment(id="apt-2", start_time="2024-06-03T11:00:00Z", duration_minutes=60),
            ExistingAppointment(
                id="apt-3",
                start_time="15:00",
                duration_minutes=30,
                status=AppointmentStatus.CANCELLED,
            ),
        ]
        closures = [
            Closure(start_date="2024-06-03T16:00:00+03:00", end_date="2024-06-03T17:00:00+03:00")
        ]

        slots = calculator.find_available_slots(_salon(), "2024-06-03", 30, appointments, closures)
        result = _by_time(slots)

        assert len(slots) == 30
        assert "12:00" not in result
        assert result["10:00"].conflict_reason == ConflictReason.APPOINTMENT
        assert result["14:00"].conflict_reason == ConflictReason.APPOINTMENT
        assert result["10:30"].available is True
        assert result["15:00"].available is True
        assert result["16:15"].conflict_reason == ConflictReason.CLOSURE
        assert result["17:00"].available is True

    def test_partial_closure_blocks_only_starts_inside(self):
        closures = [
            Closure(start_date="2024-06-04T14:00:00+03:00", end_date="2024-06-04T16:00:00+03:00")
        ]

        slots = AvailabilityCalculator().find_available_slots(_salon(), "2024-06-04", 60, closures=closures)
        result = _by_time(slots)

        assert [slot.time for slot in slots if not slot.available] == ["14:00", "14:30", "15:00", "15:30"]
        assert result["13:30"].available is True
        assert result["16:00"].available is True

    def test_full_day_closure_blocks_everything(self):
        business = Business(id="b1", time_zone="UTC", weekly_schedule=_every_day())
        closures = [Closure(start_date="2024-06-01T00:00:00Z", end_date="2024-06-02T00:00:00Z")]

        slots = AvailabilityCalculator().find_available_slots(business, "2024-06-01", 30, closures=closures)

        assert slots
        assert all(not slot.available for slot in slots)
        assert all(slot.conflict_reason == ConflictReason.CLOSURE for slot in slots)

    def test_closed_weekday(self):
        assert AvailabilityCalculator().find_available_slots(_salon(), "2024-06-02", 30) == []

    def test_missing_schedule(self):
        business = Business(id="b1", time_zone="UTC")

        assert AvailabilityCalculator().find_available_slots(business, "2024-06-03", 30) == []

    def test_no_business(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert AvailabilityCalculator().find_available_slots(None, "2024-06-03", 30) == []

        assert "No business given" in caplog.text

    def test_unparseable_date(self):
        assert AvailabilityCalculator().find_available_slots(_salon(), "not a date at all", 30) == []

    @pytest.mark.parametrize("duration", [0, -30])
    def test_invalid_duration(self, duration):
        with pytest.raises(InvalidDurationError):
            AvailabilityCalculator().find_available_slots(_salon(), "2024-06-03", duration)

    def test_service_longer_than_day(self):
        assert AvailabilityCalculator().find_available_slots(_salon(), "2024-06-03", 600) == []

    def test_find_slots_for_service(self):
        slots = AvailabilityCalculator().find_slots_for_service(
            _salon(),
            "2024-06-03",
            Service(duration_minutes=180, name="Bridal package"),
        )

        assert [slot.time for slot in slots] == ["09:00", "13:30", "15:00"]

    def test_results_are_stable(self):
        """Same inputs, same output."""
        calculator = AvailabilityCalculator()
        appointments = [ExistingAppointment(start_time="10:00", end_time="10:30")]

        first = calculator.find_available_slots(_salon(), "2024-06-03", 30, appointments)
        second = calculator.find_available_slots(_salon(), "2024-06-03", 30, appointments)

        assert first == second

    def test_diagnostics_use_injected_logger(self, caplog):
        custom = logging.getLogger("tests.calculator")
        business = Business(id="b1", time_zone="Nowhere/Special", weekly_schedule=_every_day())

        with caplog.at_level(logging.WARNING, logger="tests.calculator"):
            slots = AvailabilityCalculator(custom).find_available_slots(business, "2024-06-03", 30)

        assert slots
        assert any(record.name == "tests.calculator" for record in caplog.records)

    def test_overlong_zone_name_uses_utc(self):
        business = Business(id="b1", time_zone="x" * 300, weekly_schedule=_every_day())

        slots = AvailabilityCalculator().find_available_slots(business, "2024-06-03", 30)

        assert slots[0].time == "09:00"

    def test_null_breaks(self):
        schedule = {
            day: DaySchedule(is_open=True, open_time="09:00", close_time="17:00", breaks=None)
            for day in WEEKDAY_NAMES
        }
        business = Business(id="b1", time_zone="UTC", weekly_schedule=schedule)

        slots = AvailabilityCalculator().find_available_slots(business, "2024-06-03", 30)

        assert slots[-1].time == "16:30"
        assert all(slot.available for slot in slots)

    def test_disabled_dates(self):
        closures = [
            Closure(start_date="2024-06-07T00:00:00+03:00", end_date="2024-06-08T00:00:00+03:00")
        ]

        disabled = AvailabilityCalculator().disabled_dates(_salon(), "2024-06-03", 7, closures)

        assert disabled == ["2024-06-07", "2024-06-09"]
