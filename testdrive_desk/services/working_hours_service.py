"""Dealership working hours: per-weekday lookup and admin maintenance."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from testdrive_desk.core.config import (
    DEFAULT_CLOSE_TIME,
    DEFAULT_CLOSED_DAYS,
    DEFAULT_OPEN_TIME,
)
from testdrive_desk.core.domain_exceptions import BookingValidationError, NotFound
from testdrive_desk.core.error_codes import ErrorCode
from testdrive_desk.db.bootstrap import resolve_dealership_context
from testdrive_desk.db.models import WEEKDAYS, Dealership, WorkingHours
from testdrive_desk.services.access import require_admin
from testdrive_desk.services.time_utils import format_minutes, parse_hhmm, weekday_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayHours:
    open_time: str
    close_time: str
    is_open: bool


@dataclass(frozen=True)
class WorkingHoursEntry:
    day_of_week: str
    open_time: str
    close_time: str
    is_open: bool = True


def hours_for(db: Session, dealership_id: int, target_date: date) -> DayHours | None:
    """Return the configured hours for the date's weekday, or None when not configured."""
    row = db.scalar(
        select(WorkingHours)
        .where(WorkingHours.dealership_id == dealership_id)
        .where(WorkingHours.day_of_week == weekday_name(target_date))
    )
    if row is None:
        return None
    return DayHours(open_time=row.open_time, close_time=row.close_time, is_open=row.is_open)


def fallback_hours(target_date: date) -> DayHours:
    return DayHours(
        open_time=DEFAULT_OPEN_TIME,
        close_time=DEFAULT_CLOSE_TIME,
        is_open=weekday_name(target_date) not in DEFAULT_CLOSED_DAYS,
    )


def resolve_day_hours(db: Session, dealership_id: int, target_date: date) -> DayHours:
    """Configured hours for the date, falling back to the default policy."""
    hours = hours_for(db=db, dealership_id=dealership_id, target_date=target_date)
    if hours is None:
        logger.debug(
            "No working hours for %s at dealership %s; using fallback.",
            weekday_name(target_date),
            dealership_id,
        )
        return fallback_hours(target_date)
    return hours


def _weekday_order(row: WorkingHours) -> int:
    return WEEKDAYS.index(row.day_of_week) if row.day_of_week in WEEKDAYS else len(WEEKDAYS)


def get_dealership_info(db: Session, dealership_id: int | None = None) -> Dealership:
    context = resolve_dealership_context(db=db, dealership_id=dealership_id)
    dealership = db.scalar(
        select(Dealership)
        .options(selectinload(Dealership.working_hours))
        .where(Dealership.id == context.dealership_id)
    )
    if dealership is None:
        raise NotFound(code=ErrorCode.DEALERSHIP_NOT_FOUND, message="Dealership not found.")

    dealership.working_hours.sort(key=_weekday_order)
    return dealership


def _validate_entry(entry: WorkingHoursEntry) -> WorkingHoursEntry:
    day = entry.day_of_week.strip().upper()
    if day not in WEEKDAYS:
        raise BookingValidationError(f"Unknown day of week: {entry.day_of_week}.")

    open_minutes = parse_hhmm(entry.open_time, "openTime")
    close_minutes = parse_hhmm(entry.close_time, "closeTime")
    if entry.is_open and open_minutes >= close_minutes:
        raise BookingValidationError(f"{day}: opening time must be before closing time.")

    return WorkingHoursEntry(
        day_of_week=day,
        open_time=format_minutes(open_minutes),
        close_time=format_minutes(close_minutes),
        is_open=entry.is_open,
    )


def save_working_hours(
    db: Session,
    entries: Iterable[WorkingHoursEntry],
    actor_role: str | None,
    dealership_id: int | None = None,
) -> Dealership:
    """Upsert one working-hours row per weekday given."""
    require_admin(actor_role)
    validated = [_validate_entry(entry) for entry in entries]

    seen: set[str] = set()
    for entry in validated:
        if entry.day_of_week in seen:
            raise BookingValidationError(f"{entry.day_of_week} listed more than once.")
        seen.add(entry.day_of_week)

    dealership = get_dealership_info(db=db, dealership_id=dealership_id)
    existing = {row.day_of_week: row for row in dealership.working_hours}

    try:
        for entry in validated:
            row = existing.get(entry.day_of_week)
            if row is None:
                row = WorkingHours(dealership_id=dealership.id, day_of_week=entry.day_of_week)
                dealership.working_hours.append(row)
            row.open_time = entry.open_time
            row.close_time = entry.close_time
            row.is_open = entry.is_open

        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Working hours saved",
        extra={"dealership_id": dealership.id, "days": sorted(seen)},
    )
    return get_dealership_info(db=db, dealership_id=dealership.id)
