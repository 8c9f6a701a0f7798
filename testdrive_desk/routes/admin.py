"""Admin test-drive management and reporting routes."""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from testdrive_desk.db.session import get_db
from testdrive_desk.routes.deps import get_actor
from testdrive_desk.schemas.booking import (
    BookingStatusResponse,
    BookingWithCarItem,
    StatusUpdate,
)
from testdrive_desk.schemas.common import APIResponse
from testdrive_desk.schemas.report import DailySummaryResponse, DashboardMetricsResponse
from testdrive_desk.services.access import Actor
from testdrive_desk.services.booking_service import BookingFilter, list_bookings
from testdrive_desk.services.lifecycle_service import set_booking_status
from testdrive_desk.services.report_service import get_daily_summary, get_dashboard_metrics

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/bookings", response_model=APIResponse[List[BookingWithCarItem]])
def admin_bookings(
    status: str | None = None,
    search: str | None = None,
    booking_date: date | None = None,
    car_id: int | None = None,
    user_id: str | None = None,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    booking_filter = BookingFilter(
        status=status,
        search=search,
        booking_date=booking_date,
        car_id=car_id,
        user_id=user_id,
    )
    bookings = list_bookings(db=db, booking_filter=booking_filter, actor_role=actor.role)
    return APIResponse(
        success=True,
        data=[BookingWithCarItem.model_validate(booking) for booking in bookings],
    )


@router.patch("/bookings/{booking_id}/status", response_model=APIResponse[BookingStatusResponse])
def update_status(
    booking_id: int,
    payload: StatusUpdate,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    booking = set_booking_status(
        db=db,
        booking_id=booking_id,
        new_status=payload.status,
        actor_role=actor.role,
    )
    return APIResponse(
        success=True,
        data=BookingStatusResponse(booking_id=booking.id, status=booking.status),
    )


@router.get("/dashboard", response_model=APIResponse[DashboardMetricsResponse])
def dashboard(
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    metrics = get_dashboard_metrics(db=db, actor_role=actor.role)
    return APIResponse(success=True, data=DashboardMetricsResponse(**metrics))


@router.get("/reports/daily", response_model=APIResponse[DailySummaryResponse])
def daily_report(
    report_date: date | None = Query(
        default=None,
        description="Date in YYYY-MM-DD format",
    ),
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    summary = get_daily_summary(db=db, actor_role=actor.role, target_date=report_date)
    return APIResponse(success=True, data=DailySummaryResponse(**summary))
