"""Bookable test-drive windows derived from working hours."""

from dataclasses import dataclass
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from testdrive_desk.core.config import SLOT_MINUTES
from testdrive_desk.core.domain_exceptions import NotFound
from testdrive_desk.core.error_codes import ErrorCode
from testdrive_desk.db.bootstrap import resolve_dealership_context
from testdrive_desk.db.models import ACTIVE_BOOKING_STATUSES, Booking, Car
from testdrive_desk.services.time_utils import format_minutes, parse_hhmm
from testdrive_desk.services.working_hours_service import DayHours, resolve_day_hours


@dataclass(frozen=True)
class TimeSlot:
    start_time: str
    end_time: str

    @property
    def label(self) -> str:
        return f"{self.start_time} - {self.end_time}"


def _overlaps(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    return start_a < end_b and start_b < end_a


def generate_slots(hours: DayHours, slot_minutes: int = SLOT_MINUTES) -> list[TimeSlot]:
    """Split [open, close) into consecutive fixed-width windows.

    A trailing remainder shorter than one slot is dropped.
    """
    if not hours.is_open:
        return []
    if slot_minutes <= 0:
        raise ValueError("slot_minutes must be positive.")

    open_minutes = parse_hhmm(hours.open_time, "openTime")
    close_minutes = parse_hhmm(hours.close_time, "closeTime")

    slots = []
    start = open_minutes
    while start + slot_minutes <= close_minutes:
        slots.append(TimeSlot(format_minutes(start), format_minutes(start + slot_minutes)))
        start += slot_minutes
    return slots


def exclude_booked(slots: list[TimeSlot], bookings: list[Booking]) -> list[TimeSlot]:
    """Drop every slot that intersects one of the given bookings."""
    taken = [
        (parse_hhmm(booking.start_time), parse_hhmm(booking.end_time))
        for booking in bookings
    ]
    free = []
    for slot in slots:
        slot_start = parse_hhmm(slot.start_time)
        slot_end = parse_hhmm(slot.end_time)
        if any(_overlaps(slot_start, slot_end, start, end) for start, end in taken):
            continue
        free.append(slot)
    return free


def get_available_slots(
    db: Session,
    car_id: int,
    target_date: date,
    dealership_id: int | None = None,
    slot_minutes: int = SLOT_MINUTES,
) -> list[TimeSlot]:
    """Free windows for a car on a date, ordered by start time."""
    car = db.scalar(select(Car).where(Car.id == car_id))
    if car is None:
        raise NotFound(code=ErrorCode.CAR_NOT_FOUND, message="Car not found.")

    context = resolve_dealership_context(db=db, dealership_id=dealership_id, car=car)
    hours = resolve_day_hours(db=db, dealership_id=context.dealership_id, target_date=target_date)
    if not hours.is_open:
        return []

    active_bookings = db.scalars(
        select(Booking)
        .where(Booking.car_id == car_id)
        .where(Booking.booking_date == target_date)
        .where(Booking.status.in_(ACTIVE_BOOKING_STATUSES))
    ).all()

    slots = exclude_booked(generate_slots(hours, slot_minutes), list(active_bookings))
    return sorted(slots, key=lambda slot: parse_hhmm(slot.start_time))
