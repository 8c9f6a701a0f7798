"""
Tests for slot generation: working hours split into bookable windows,
minus the windows held by active bookings.
"""

from datetime import timedelta

import pytest

from testdrive_desk.core.domain_exceptions import NotFound
from testdrive_desk.db.bootstrap import get_default_dealership
from testdrive_desk.db.models import Booking
from testdrive_desk.services.slot_service import (
    TimeSlot,
    exclude_booked,
    generate_slots,
    get_available_slots,
)
from testdrive_desk.services.time_utils import parse_hhmm
from testdrive_desk.services.working_hours_service import DayHours

from conftest import MONDAY, SUNDAY, add_booking, add_car, add_hours


def _starts(slots):
    return [slot.start_time for slot in slots]


class TestGenerateSlots:
    def test_hourly_slots_cover_open_window(self):
        slots = generate_slots(DayHours("09:00", "18:00", True), slot_minutes=60)

        assert len(slots) == 9
        assert slots[0] == TimeSlot("09:00", "10:00")
        assert slots[-1] == TimeSlot("17:00", "18:00")

    def test_closed_day_has_no_slots(self):
        assert generate_slots(DayHours("09:00", "18:00", False)) == []

    def test_slot_width_is_configurable(self):
        slots = generate_slots(DayHours("09:00", "11:00", True), slot_minutes=30)
        assert _starts(slots) == ["09:00", "09:30", "10:00", "10:30"]

    def test_partial_trailing_window_is_dropped(self):
        slots = generate_slots(DayHours("09:00", "11:30", True), slot_minutes=60)
        assert slots[-1] == TimeSlot("10:00", "11:00")

    def test_slots_are_disjoint_and_inside_hours(self):
        hours = DayHours("08:15", "19:45", True)
        slots = generate_slots(hours, slot_minutes=45)

        open_minutes, close_minutes = parse_hhmm(hours.open_time), parse_hhmm(hours.close_time)
        previous_end = open_minutes
        for slot in slots:
            start, end = parse_hhmm(slot.start_time), parse_hhmm(slot.end_time)
            assert start >= previous_end
            assert open_minutes <= start < end <= close_minutes
            previous_end = end

    def test_label(self):
        assert TimeSlot("09:00", "10:00").label == "09:00 - 10:00"


class TestExcludeBooked:
    def test_partial_overlap_blocks_slot(self, db):
        car_id = add_car(db)
        booking_id = add_booking(db, car_id, start_time="10:30", end_time="11:00")
        booking = db.get(Booking, booking_id)

        free = exclude_booked([TimeSlot("10:00", "11:00"), TimeSlot("11:00", "12:00")], [booking])
        assert free == [TimeSlot("11:00", "12:00")]


class TestGetAvailableSlots:
    def test_scenario_monday_with_one_pending_booking(self, db):
        dealership = get_default_dealership(db)
        add_hours(db, dealership.id, "MONDAY", "09:00", "18:00")
        car_id = add_car(db)
        add_booking(db, car_id, status="PENDING", start_time="10:00", end_time="11:00")

        slots = get_available_slots(db, car_id, MONDAY, slot_minutes=60)

        assert len(slots) == 8
        assert _starts(slots) == [
            "09:00", "11:00", "12:00", "13:00", "14:00", "15:00", "16:00", "17:00",
        ]
        assert slots[-1].end_time == "18:00"

    def test_closed_day_returns_empty(self, db):
        dealership = get_default_dealership(db)
        add_hours(db, dealership.id, "MONDAY", is_open=False)
        car_id = add_car(db)

        assert get_available_slots(db, car_id, MONDAY) == []

    def test_unconfigured_sunday_uses_closed_fallback(self, db):
        car_id = add_car(db)
        assert get_available_slots(db, car_id, SUNDAY) == []

    def test_unconfigured_weekday_uses_default_hours(self, db):
        car_id = add_car(db)
        slots = get_available_slots(db, car_id, MONDAY, slot_minutes=60)
        assert _starts(slots)[0] == "09:00"
        assert len(slots) == 9

    @pytest.mark.parametrize("status", ["CANCELLED", "COMPLETED", "NO_SHOW"])
    def test_terminal_bookings_do_not_block(self, db, status):
        car_id = add_car(db)
        add_booking(db, car_id, status=status, start_time="10:00", end_time="11:00")

        assert "10:00" in _starts(get_available_slots(db, car_id, MONDAY, slot_minutes=60))

    def test_confirmed_booking_blocks(self, db):
        car_id = add_car(db)
        add_booking(db, car_id, status="CONFIRMED", start_time="15:00", end_time="16:00")

        assert "15:00" not in _starts(get_available_slots(db, car_id, MONDAY, slot_minutes=60))

    def test_other_cars_and_dates_do_not_block(self, db):
        car_id = add_car(db)
        other_car_id = add_car(db, make="Honda", model="Civic")
        add_booking(db, other_car_id, start_time="10:00", end_time="11:00")
        add_booking(db, car_id, booking_date=MONDAY + timedelta(days=1), start_time="10:00", end_time="11:00")

        assert len(get_available_slots(db, car_id, MONDAY, slot_minutes=60)) == 9

    def test_unknown_car(self, db):
        with pytest.raises(NotFound):
            get_available_slots(db, 404, MONDAY)

    def test_output_is_sorted(self, db):
        car_id = add_car(db)
        slots = get_available_slots(db, car_id, MONDAY, slot_minutes=30)
        starts = [parse_hhmm(slot.start_time) for slot in slots]
        assert starts == sorted(starts)
