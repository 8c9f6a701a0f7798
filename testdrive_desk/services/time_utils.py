"""Helpers for the HH:MM wall-clock strings stored on bookings and hours."""

import re
from datetime import date

from testdrive_desk.core.domain_exceptions import BookingValidationError
from testdrive_desk.db.models import WEEKDAYS

_HHMM_PATTERN = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")


def parse_hhmm(value: str, field_name: str = "time") -> int:
    """Return minutes since midnight for an ``HH:MM`` string."""
    match = _HHMM_PATTERN.fullmatch((value or "").strip())
    if match is None:
        raise BookingValidationError(f"{field_name} must be in HH:MM format.")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_minutes(minutes: int) -> str:
    hours, remainder = divmod(minutes, 60)
    return f"{hours:02d}:{remainder:02d}"


def normalize_hhmm(value: str, field_name: str = "time") -> str:
    """Canonical ``HH:MM`` form; the only form written to storage."""
    return format_minutes(parse_hhmm(value, field_name))


def weekday_name(target_date: date) -> str:
    return WEEKDAYS[target_date.weekday()]
