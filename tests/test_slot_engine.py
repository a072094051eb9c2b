"""Tests for the slot availability engine."""

import random
from datetime import date, datetime
from types import SimpleNamespace

import pytest

from app.core.enums import BookingStatus, OperatingDays
from app.core.exceptions import InsufficientCapacity
from app.services.slot_engine import (
    OperatingWindow,
    SlotWindow,
    available_units,
    booked_resources,
    build_occupied_hours,
    candidate_start_hours,
    check_admission,
    format_hour,
    format_hour_12,
    parse_hour,
    slot_grid,
    total_price,
)

DAY = date(2025, 6, 11)  # a Wednesday


def booking(start, duration, units, status=BookingStatus.CONFIRMED):
    return SimpleNamespace(start_hour=start, duration=duration, resource_count=units, status=status)


class TestHourFormats:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("14:00", 14),
            ("09:00", 9),
            ("9", 9),
            ("2:00 PM", 14),
            ("2 pm", 14),
            ("12:00 PM", 12),
            ("12:00 AM", 0),
            ("11:00 AM", 11),
        ],
    )
    def test_parse_hour(self, text, expected):
        assert parse_hour(text) == expected

    @pytest.mark.parametrize("text", ["", "noon", "14:30", "25:00", "13:00 PM", "24:00"])
    def test_parse_hour_rejects(self, text):
        with pytest.raises(ValueError):
            parse_hour(text)

    def test_midnight_closes_window(self):
        assert parse_hour("12:00 AM", allow_midnight_end=True) == 24
        assert parse_hour("24:00", allow_midnight_end=True) == 24
        assert parse_hour("9:00 PM", allow_midnight_end=True) == 21

    def test_both_formats_reconcile(self):
        for hour in range(24):
            assert parse_hour(format_hour(hour)) == hour
            assert parse_hour(format_hour_12(hour)) == hour

    def test_format_hour_12(self):
        assert format_hour_12(0) == "12:00 AM"
        assert format_hour_12(12) == "12:00 PM"
        assert format_hour_12(17) == "5:00 PM"
        assert format_hour_12(24) == "12:00 AM"


class TestOccupiedHours:
    def test_sums_units_per_hour(self):
        occupied = build_occupied_hours([booking(10, 2, 3), booking(11, 2, 1)])
        assert occupied == {10: 3, 11: 4, 12: 1}

    def test_no_bookings(self):
        assert build_occupied_hours([]) == {}

    def test_cancelled_bookings_ignored(self):
        occupied = build_occupied_hours(
            [booking(10, 2, 3, BookingStatus.CANCELLED), booking(10, 1, 1)]
        )
        assert occupied == {10: 1}

    def test_recomputation_is_pure(self):
        bookings = [booking(8, 3, 2), booking(9, 1, 1), booking(15, 5, 2)]
        assert build_occupied_hours(bookings) == build_occupied_hours(bookings)

    def test_cancelling_frees_capacity(self):
        a = booking(10, 2, 3)
        b = booking(11, 1, 1)
        before = build_occupied_hours([a, b])
        a.status = BookingStatus.CANCELLED
        after = build_occupied_hours([a, b])
        assert before == {10: 3, 11: 4}
        assert after == {11: 1}

    def test_elapsed_bookings_hidden_today(self):
        now = datetime(2025, 6, 11, 13, 30)
        bookings = [booking(10, 2, 3), booking(12, 2, 1), booking(15, 1, 2)]

        displayed = build_occupied_hours(bookings, target_date=DAY, now=now)

        # 10-12 has ended; 12-14 is ongoing
        assert displayed == {12: 1, 13: 1, 15: 2}

    def test_elapsed_filter_only_applies_to_today(self):
        now = datetime(2025, 6, 10, 23, 0)
        bookings = [booking(10, 2, 3)]
        assert build_occupied_hours(bookings, target_date=DAY, now=now) == {10: 3, 11: 3}


class TestAdmission:
    def test_rejects_when_window_overflows(self):
        existing = [booking(10, 2, 3)]

        with pytest.raises(InsufficientCapacity) as exc_info:
            check_admission(4, existing, SlotWindow(11, 1), 2)

        assert exc_info.value.available == 1
        assert "Only 1 resources available" in exc_info.value.message

    def test_admits_up_to_capacity(self):
        existing = [booking(10, 2, 3)]
        assert check_admission(4, existing, SlotWindow(11, 1), 1) == 1

    def test_busiest_hour_in_window_binds(self):
        existing = [booking(10, 1, 1), booking(11, 1, 3)]

        assert available_units(4, build_occupied_hours(existing), SlotWindow(10, 2)) == 1
        with pytest.raises(InsufficientCapacity) as exc_info:
            check_admission(4, existing, SlotWindow(10, 2), 2)
        assert exc_info.value.available == 1

    def test_adjacent_bookings_do_not_overlap(self):
        existing = [booking(10, 2, 4)]
        assert check_admission(4, existing, SlotWindow(12, 2), 4) == 4
        assert not SlotWindow(10, 2).overlaps(SlotWindow(12, 2))
        assert SlotWindow(10, 2).overlaps(SlotWindow(11, 3))

    def test_empty_facility_has_full_capacity(self):
        assert check_admission(2, [], SlotWindow(9, 5), 2) == 2

    def test_cancelled_bookings_do_not_block(self):
        existing = [booking(10, 2, 4, BookingStatus.CANCELLED)]
        assert check_admission(4, existing, SlotWindow(10, 2), 4) == 4

    def test_admission_never_oversubscribes(self):
        rng = random.Random(42)
        capacity = 5
        admitted = []

        for _ in range(300):
            start = rng.randint(6, 20)
            duration = rng.randint(1, 5)
            units = rng.randint(1, 3)
            try:
                check_admission(capacity, admitted, SlotWindow(start, duration), units)
            except InsufficientCapacity:
                continue
            admitted.append(booking(start, duration, units))

            occupied = build_occupied_hours(admitted)
            assert max(occupied.values()) <= capacity

        assert admitted


class TestCandidateSlots:
    def test_windows_must_fit_before_closing(self):
        operating = OperatingWindow(9, 21)
        assert candidate_start_hours(operating, 3, DAY) == list(range(9, 19))

    def test_one_hour_slots(self):
        operating = OperatingWindow(9, 21)
        hours = candidate_start_hours(operating, 1, DAY)
        assert hours[0] == 9
        assert hours[-1] == 20

    def test_today_drops_started_hours(self):
        operating = OperatingWindow(9, 21)
        now = datetime(2025, 6, 11, 14, 0)
        assert candidate_start_hours(operating, 1, DAY, now) == list(range(15, 21))

    def test_past_date_has_no_slots(self):
        operating = OperatingWindow(9, 21)
        now = datetime(2025, 6, 12, 8, 0)
        assert candidate_start_hours(operating, 1, DAY, now) == []

    def test_closed_days(self):
        weekend_only = OperatingWindow(9, 21, OperatingDays.WEEKENDS)
        weekdays_only = OperatingWindow(9, 21, "Mon-Fri")
        saturday = date(2025, 6, 14)

        assert candidate_start_hours(weekend_only, 1, DAY) == []
        assert candidate_start_hours(weekend_only, 1, saturday)
        assert candidate_start_hours(weekdays_only, 1, DAY)
        assert candidate_start_hours(weekdays_only, 1, saturday) == []

    def test_duration_longer_than_opening(self):
        assert candidate_start_hours(OperatingWindow(10, 12), 3, DAY) == []


class TestSlotGrid:
    def test_full_capacity_without_bookings(self):
        grid = slot_grid(2, OperatingWindow(9, 21), [], 3, 2, DAY)

        assert [slot.start_hour for slot in grid] == list(range(9, 19))
        assert all(slot.available_units == 2 and slot.is_available for slot in grid)

    def test_marks_slots_without_room(self):
        bookings = [booking(10, 2, 3)]
        grid = {slot.start_hour: slot for slot in slot_grid(4, OperatingWindow(9, 21), bookings, 2, 2, DAY)}

        assert grid[9].available_units == 1 and not grid[9].is_available
        assert grid[11].available_units == 1
        assert grid[12].available_units == 4 and grid[12].is_available
        assert grid[12].end_hour == 14


class TestBookedResources:
    def test_ordered_by_hour(self):
        result = booked_resources([booking(15, 1, 2), booking(9, 2, 1)], DAY)
        assert result == [(9, 1), (10, 1), (15, 2)]

    def test_elapsed_hidden_but_still_conflicting(self):
        now = datetime(2025, 6, 11, 13, 0)
        bookings = [booking(10, 3, 4)]

        assert booked_resources(bookings, DAY, now) == []
        with pytest.raises(InsufficientCapacity):
            check_admission(4, bookings, SlotWindow(11, 1), 1)


def test_total_price():
    assert total_price("250.00", 2, 3) == 1500
    assert str(total_price(12.5, 1, 2)) == "25.0"
