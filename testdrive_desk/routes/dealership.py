"""Dealership settings routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from testdrive_desk.db.session import get_db
from testdrive_desk.routes.deps import get_actor
from testdrive_desk.schemas.common import APIResponse
from testdrive_desk.schemas.dealership import DealershipResponse, WorkingHoursUpdate
from testdrive_desk.services.access import Actor
from testdrive_desk.services.working_hours_service import (
    WorkingHoursEntry,
    get_dealership_info,
    save_working_hours,
)

router = APIRouter(prefix="/dealership", tags=["dealership"])


@router.get("/", response_model=APIResponse[DealershipResponse])
def dealership_info(dealership_id: int | None = None, db: Session = Depends(get_db)):
    dealership = get_dealership_info(db=db, dealership_id=dealership_id)
    return APIResponse(success=True, data=DealershipResponse.model_validate(dealership))


@router.put("/working-hours", response_model=APIResponse[DealershipResponse])
def update_working_hours(
    payload: WorkingHoursUpdate,
    dealership_id: int | None = None,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db),
):
    dealership = save_working_hours(
        db=db,
        entries=[
            WorkingHoursEntry(
                day_of_week=item.day_of_week,
                open_time=item.open_time,
                close_time=item.close_time,
                is_open=item.is_open,
            )
            for item in payload.working_hours
        ],
        actor_role=actor.role,
        dealership_id=dealership_id,
    )
    return APIResponse(success=True, data=DealershipResponse.model_validate(dealership))
