"""Per-car test-drive availability routes."""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from testdrive_desk.db.session import get_db
from testdrive_desk.routes.deps import get_actor
from testdrive_desk.schemas.booking import ExistingBookingItem, SlotItem, UserCarBookingItem
from testdrive_desk.schemas.common import APIResponse
from testdrive_desk.services.access import Actor, require_user
from testdrive_desk.services.booking_service import (
    get_user_booking_for_car,
    list_active_bookings_for_car,
)
from testdrive_desk.services.slot_service import get_available_slots

router = APIRouter(prefix="/cars", tags=["cars"])


@router.get("/{car_id}/slots", response_model=APIResponse[List[SlotItem]])
def available_slots(
    car_id: int,
    slot_date: date = Query(alias="date", description="Date in YYYY-MM-DD format"),
    dealership_id: int | None = None,
    db: Session = Depends(get_db),
):
    slots = get_available_slots(
        db=db,
        car_id=car_id,
        target_date=slot_date,
        dealership_id=dealership_id,
    )
    return APIResponse(
        success=True,
        data=[
            SlotItem(start_time=slot.start_time, end_time=slot.end_time, label=slot.label)
            for slot in slots
        ],
    )


@router.get("/{car_id}/bookings", response_model=APIResponse[List[ExistingBookingItem]])
def active_bookings(car_id: int, db: Session = Depends(get_db)):
    bookings = list_active_bookings_for_car(db=db, car_id=car_id)
    return APIResponse(
        success=True,
        data=[ExistingBookingItem.model_validate(booking) for booking in bookings],
    )


@router.get("/{car_id}/my-booking", response_model=APIResponse[UserCarBookingItem | None])
def my_booking_for_car(
    car_id: int,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    user_id = require_user(actor)
    booking = get_user_booking_for_car(db=db, car_id=car_id, user_id=user_id)
    return APIResponse(
        success=True,
        data=UserCarBookingItem.model_validate(booking) if booking else None,
    )
