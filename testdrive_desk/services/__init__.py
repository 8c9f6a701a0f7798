"""Test-drive reservation services."""

from testdrive_desk.services.booking_service import (
    BookingFilter,
    create_booking,
    get_user_booking_for_car,
    list_active_bookings_for_car,
    list_bookings,
    list_bookings_for_user,
)
from testdrive_desk.services.lifecycle_service import cancel_booking, set_booking_status
from testdrive_desk.services.report_service import get_daily_summary, get_dashboard_metrics
from testdrive_desk.services.slot_service import TimeSlot, get_available_slots
from testdrive_desk.services.working_hours_service import (
    DayHours,
    WorkingHoursEntry,
    get_dealership_info,
    hours_for,
    save_working_hours,
)

__all__ = [
    "BookingFilter",
    "DayHours",
    "TimeSlot",
    "WorkingHoursEntry",
    "cancel_booking",
    "create_booking",
    "get_available_slots",
    "get_daily_summary",
    "get_dashboard_metrics",
    "get_dealership_info",
    "get_user_booking_for_car",
    "hours_for",
    "list_active_bookings_for_car",
    "list_bookings",
    "list_bookings_for_user",
    "save_working_hours",
    "set_booking_status",
]
