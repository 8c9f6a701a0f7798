"""Booking status changes: user/admin cancellation and admin overwrite."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from testdrive_desk.core import config
from testdrive_desk.core.domain_exceptions import (
    AlreadyCancelled,
    AlreadyCompleted,
    InvalidStatus,
    NotFound,
    SlotConflict,
    Unauthorized,
)
from testdrive_desk.core.error_codes import ErrorCode
from testdrive_desk.db.models import BOOKING_STATUSES, Booking
from testdrive_desk.services.access import ADMIN_ROLE, require_admin

logger = logging.getLogger(__name__)

# Only consulted when STRICT_STATUS_TRANSITIONS is enabled.
ALLOWED_TRANSITIONS = {
    "PENDING": {"CONFIRMED", "CANCELLED", "NO_SHOW"},
    "CONFIRMED": {"COMPLETED", "CANCELLED", "NO_SHOW"},
    "COMPLETED": set(),
    "CANCELLED": set(),
    "NO_SHOW": set(),
}


def _get_booking_for_update(db: Session, booking_id: int) -> Booking:
    booking = db.scalar(
        select(Booking)
        .where(Booking.id == booking_id)
        .with_for_update()
    )
    if booking is None:
        raise NotFound(code=ErrorCode.BOOKING_NOT_FOUND, message="Booking not found.")
    return booking


def cancel_booking(
    db: Session,
    booking_id: int,
    actor_id: str | None,
    actor_role: str | None,
) -> Booking:
    """Cancel a booking on behalf of its owner or an admin."""
    booking = _get_booking_for_update(db, booking_id)

    if booking.user_id != actor_id and actor_role != ADMIN_ROLE:
        db.rollback()
        raise Unauthorized("Unauthorized to cancel this booking.")

    if booking.status == "CANCELLED":
        db.rollback()
        raise AlreadyCancelled("Booking is already cancelled.")

    if booking.status == "COMPLETED":
        db.rollback()
        raise AlreadyCompleted("Cannot cancel a completed booking.")

    previous_status = booking.status
    try:
        booking.status = "CANCELLED"
        db.commit()
        db.refresh(booking)
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Booking cancelled",
        extra={
            "booking_id": booking.id,
            "previous_status": previous_status,
            "actor_id": actor_id,
        },
    )
    return booking


def set_booking_status(
    db: Session,
    booking_id: int,
    new_status: str,
    actor_role: str | None,
) -> Booking:
    """Overwrite a booking's status (admin only).

    Any of the five statuses is accepted from any current status unless
    STRICT_STATUS_TRANSITIONS is on.
    """
    require_admin(actor_role)

    booking = _get_booking_for_update(db, booking_id)

    normalized_status = (new_status or "").strip().upper()
    if normalized_status not in BOOKING_STATUSES:
        db.rollback()
        raise InvalidStatus("Invalid status")

    current_status = booking.status
    if (
        config.STRICT_STATUS_TRANSITIONS
        and normalized_status != current_status
        and normalized_status not in ALLOWED_TRANSITIONS.get(current_status, set())
    ):
        db.rollback()
        raise InvalidStatus("Invalid status transition.")

    try:
        booking.status = normalized_status
        db.commit()
        db.refresh(booking)
    except IntegrityError:
        db.rollback()
        # Reactivating a booking whose slot has since been taken by someone else.
        raise SlotConflict("Another active booking already holds this slot.")
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Booking status updated",
        extra={
            "booking_id": booking.id,
            "previous_status": current_status,
            "status": normalized_status,
        },
    )
    return booking
