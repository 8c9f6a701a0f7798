"""Customer-facing booking routes."""

from typing import List

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from testdrive_desk.db.session import get_db
from testdrive_desk.routes.deps import get_actor
from testdrive_desk.schemas.booking import (
    BookingCreateRequest,
    BookingItem,
    BookingWithCarItem,
    CancelResponse,
)
from testdrive_desk.schemas.common import APIResponse
from testdrive_desk.services.access import Actor, require_user
from testdrive_desk.services.booking_service import create_booking, list_bookings_for_user
from testdrive_desk.services.lifecycle_service import cancel_booking

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("/", status_code=201, response_model=APIResponse[BookingItem])
def book_test_drive(
    payload: BookingCreateRequest,
    idempotency_key: str | None = Header(default=None, max_length=64),
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    user_id = require_user(actor)
    booking = create_booking(
        db=db,
        car_id=payload.car_id,
        user_id=user_id,
        booking_date=payload.booking_date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        notes=payload.notes,
        idempotency_key=idempotency_key,
    )
    return APIResponse(success=True, data=BookingItem.model_validate(booking))


@router.get("/me", response_model=APIResponse[List[BookingWithCarItem]])
def my_bookings(
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    user_id = require_user(actor)
    bookings = list_bookings_for_user(db=db, user_id=user_id)
    return APIResponse(
        success=True,
        data=[BookingWithCarItem.model_validate(booking) for booking in bookings],
    )


@router.patch("/{booking_id}/cancel", response_model=APIResponse[CancelResponse])
def cancel(
    booking_id: int,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    require_user(actor)
    booking = cancel_booking(
        db=db,
        booking_id=booking_id,
        actor_id=actor.actor_id,
        actor_role=actor.role,
    )
    return APIResponse(
        success=True,
        data=CancelResponse(booking_id=booking.id, status=booking.status),
    )
