"""
Tests for the closure overlay.
"""

import logging

import pendulum

from bookingslots.domain.closures import (
    CURRENT,
    PAST,
    UPCOMING,
    apply_closures,
    closure_time_status,
    closures_for_day,
    covers_window,
    is_blocked,
)
from bookingslots.domain.models import Closure, ConflictReason, MinuteRange, Slot

ZONE = "Europe/Istanbul"

SICK_LEAVE = Closure(
    id="cl-2",
    start_date="2024-06-04T14:00:00+03:00",
    end_date="2024-06-04T16:00:00+03:00",
)


def _slots(*times):
    return [Slot(time=time) for time in times]


def _by_time(slots):
    return {slot.time: slot for slot in slots}


class TestClosuresForDay:
    """Tests for closures_for_day."""

    def test_selects_overlapping_active_closures(self):
        other_day = Closure(start_date="2024-06-10T09:00:00+03:00", end_date="2024-06-10T12:00:00+03:00")

        ranges = closures_for_day("2024-06-04", ZONE, [other_day, SICK_LEAVE])

        assert len(ranges) == 1
        assert ranges[0].start.hour == 14

    def test_inactive_closures_are_ignored(self):
        inactive = Closure(
            start_date="2024-06-04T00:00:00+03:00",
            end_date="2024-06-05T00:00:00+03:00",
            is_active=False,
        )

        assert closures_for_day("2024-06-04", ZONE, [inactive]) == []

    def test_results_are_sorted(self):
        later = Closure(start_date="2024-06-04T17:00:00+03:00", end_date="2024-06-04T18:00:00+03:00")

        ranges = closures_for_day("2024-06-04", ZONE, [later, SICK_LEAVE])

        assert [r.start.hour for r in ranges] == [14, 17]

    def test_closure_ending_at_midnight_does_not_touch_next_day(self):
        closure = Closure(start_date="2024-06-03T09:00:00+03:00", end_date="2024-06-04T00:00:00+03:00")

        assert closures_for_day("2024-06-04", ZONE, [closure]) == []

    def test_applying_closures_are_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="bookingslots.domain.closures"):
            closures_for_day("2024-06-04", ZONE, [SICK_LEAVE])

        assert "Closure cl-2 applies on 2024-06-04: 2024-06-04 14:00 - 2024-06-04 16:00 (120 min)" in caplog.text

    def test_bad_closures_are_skipped(self, caplog):
        closures = [
            Closure(id="bad", start_date="whenever"),
            Closure(id="inverted", start_date="2024-06-04T16:00:00+03:00", end_date="2024-06-04T14:00:00+03:00"),
            SICK_LEAVE,
        ]

        with caplog.at_level(logging.WARNING):
            ranges = closures_for_day("2024-06-04", ZONE, closures)

        assert len(ranges) == 1
        assert "Skipping closure bad" in caplog.text
        assert "Skipping closure inverted" in caplog.text


class TestApplyClosures:
    """Tests for apply_closures and is_blocked."""

    def test_partial_day_closure(self):
        slots = _slots("13:00", "13:30", "14:00", "15:30", "16:00")

        result = _by_time(apply_closures("2024-06-04", slots, [SICK_LEAVE], ZONE))

        assert result["13:00"].available is True
        assert result["13:30"].available is True
        assert result["14:00"].available is False
        assert result["14:00"].conflict_reason == ConflictReason.CLOSURE
        assert result["15:30"].available is False
        assert result["16:00"].available is True

    def test_full_day_utc_closure(self):
        """A UTC closure over the whole day blocks every slot."""
        closure = Closure(start_date="2024-06-01T00:00:00Z", end_date="2024-06-02T00:00:00Z")
        slots = _slots("09:00", "12:00", "16:30")

        result = apply_closures("2024-06-01", slots, [closure], "UTC")

        assert all(not slot.available for slot in result)
        assert {slot.conflict_reason for slot in result} == {ConflictReason.CLOSURE}

    def test_appointment_reason_is_kept(self):
        slots = [Slot(time="14:00").block(ConflictReason.APPOINTMENT)]

        result = apply_closures("2024-06-04", slots, [SICK_LEAVE], ZONE)

        assert result[0].conflict_reason == ConflictReason.APPOINTMENT

    def test_other_days_are_untouched(self):
        slots = _slots("14:00", "15:00")

        result = apply_closures("2024-06-05", slots, [SICK_LEAVE], ZONE)

        assert result == slots

    def test_open_ended_closure_lasts_until_midnight(self):
        closure = Closure(start_date="2024-06-04T14:00:00+03:00")

        assert is_blocked("2024-06-04", Slot(time="17:30"), [closure], ZONE)
        assert not is_blocked("2024-06-04", Slot(time="13:45"), [closure], ZONE)
        assert not is_blocked("2024-06-05", Slot(time="09:00"), [closure], ZONE)

    def test_date_only_end_includes_the_whole_day(self):
        closure = Closure(start_date="2024-06-04", end_date="2024-06-05")

        assert is_blocked("2024-06-04", Slot(time="09:00"), [closure], ZONE)
        assert is_blocked("2024-06-05", Slot(time="17:00"), [closure], ZONE)
        assert not is_blocked("2024-06-06", Slot(time="09:00"), [closure], ZONE)

    def test_closure_in_another_zone(self):
        """Closures are absolute; 11:00Z is 14:00 in Istanbul."""
        closure = Closure(start_date="2024-06-04T11:00:00Z", end_date="2024-06-04T12:00:00Z")

        assert is_blocked("2024-06-04", Slot(time="14:00"), [closure], ZONE)
        assert not is_blocked("2024-06-04", Slot(time="11:00"), [closure], ZONE)


class TestCoversWindow:
    """Tests for covers_window."""

    WINDOW = MinuteRange(start=540, end=1080)

    def test_full_day_closure(self):
        closure = Closure(start_date="2024-06-07T00:00:00+03:00", end_date="2024-06-08T00:00:00+03:00")

        assert covers_window("2024-06-07", self.WINDOW, [closure], ZONE)

    def test_partial_closure(self):
        assert not covers_window("2024-06-04", self.WINDOW, [SICK_LEAVE], ZONE)

    def test_adjacent_closures_combine(self):
        closures = [
            Closure(start_date="2024-06-04T08:00:00+03:00", end_date="2024-06-04T13:00:00+03:00"),
            Closure(start_date="2024-06-04T13:00:00+03:00", end_date="2024-06-04T19:00:00+03:00"),
        ]

        assert covers_window("2024-06-04", self.WINDOW, closures, ZONE)

    def test_gap_between_closures(self):
        closures = [
            Closure(start_date="2024-06-04T08:00:00+03:00", end_date="2024-06-04T12:00:00+03:00"),
            Closure(start_date="2024-06-04T13:00:00+03:00", end_date="2024-06-04T19:00:00+03:00"),
        ]

        assert not covers_window("2024-06-04", self.WINDOW, closures, ZONE)


class TestClosureTimeStatus:
    """Tests for closure_time_status."""

    def test_upcoming_current_past(self):
        tz = pendulum.timezone(ZONE)

        assert closure_time_status(SICK_LEAVE, pendulum.datetime(2024, 6, 1, tz=tz), ZONE) == UPCOMING
        assert closure_time_status(SICK_LEAVE, pendulum.datetime(2024, 6, 4, 15, tz=tz), ZONE) == CURRENT
        assert closure_time_status(SICK_LEAVE, pendulum.datetime(2024, 6, 10, tz=tz), ZONE) == PAST

    def test_end_instant_is_past(self):
        now = pendulum.datetime(2024, 6, 4, 13, tz="UTC")

        assert closure_time_status(SICK_LEAVE, now, ZONE) == PAST

    def test_unparseable(self):
        assert closure_time_status(Closure(start_date="someday")) is None
