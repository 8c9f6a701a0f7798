from datetime import datetime

from pydantic import BaseModel, ConfigDict


class WorkingHoursItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day_of_week: str
    open_time: str
    close_time: str
    is_open: bool = True


class WorkingHoursUpdate(BaseModel):
    working_hours: list[WorkingHoursItem]


class DealershipResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    working_hours: list[WorkingHoursItem]
    created_at: datetime
    updated_at: datetime
