from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class SlotItem(BaseModel):
    start_time: str
    end_time: str
    label: str


class CarSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    make: str
    model: str
    year: int | None = None
    status: str


class BookingCreateRequest(BaseModel):
    car_id: int
    booking_date: date
    start_time: str = Field(examples=["10:00"])
    end_time: str = Field(examples=["11:00"])
    notes: str | None = Field(default=None, max_length=1000)


class BookingItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    car_id: int
    user_id: str
    booking_date: date
    start_time: str
    end_time: str
    status: str
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class BookingWithCarItem(BookingItem):
    car: CarSummary | None = None


class ExistingBookingItem(BaseModel):
    """Slot-blocking view of a booking; no user details."""

    model_config = ConfigDict(from_attributes=True)

    booking_date: date
    start_time: str
    end_time: str
    status: str


class UserCarBookingItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: str
    booking_date: date


class StatusUpdate(BaseModel):
    status: str


class BookingStatusResponse(BaseModel):
    booking_id: int
    status: str


class CancelResponse(BaseModel):
    booking_id: int
    status: str
