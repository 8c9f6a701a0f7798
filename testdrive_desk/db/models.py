"""SQLAlchemy ORM models."""

from datetime import date, datetime
from typing import Final, Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from testdrive_desk.db.session import Base

WEEKDAYS: Final[tuple[str, ...]] = (
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
)

CAR_STATUSES: Final[tuple[str, ...]] = ("AVAILABLE", "UNAVAILABLE", "SOLD")

BOOKING_STATUSES: Final[tuple[str, ...]] = (
    "PENDING",
    "CONFIRMED",
    "COMPLETED",
    "CANCELLED",
    "NO_SHOW",
)
ACTIVE_BOOKING_STATUSES: Final[tuple[str, ...]] = ("PENDING", "CONFIRMED")

_ACTIVE_STATUS_SQL = "status IN ('PENDING', 'CONFIRMED')"


class Dealership(Base):
    """The dealership whose opening hours drive test-drive slots."""

    __tablename__ = "dealerships"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    working_hours: Mapped[list["WorkingHours"]] = relationship(
        back_populates="dealership",
        cascade="all, delete-orphan",
    )
    cars: Mapped[list["Car"]] = relationship(back_populates="dealership")


class WorkingHours(Base):
    """Opening window of a dealership for one weekday."""

    __tablename__ = "working_hours"
    __table_args__ = (
        UniqueConstraint(
            "dealership_id",
            "day_of_week",
            name="uq_working_hours_dealership_day",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    dealership_id: Mapped[int] = mapped_column(
        ForeignKey("dealerships.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    day_of_week: Mapped[str] = mapped_column(String(16), nullable=False)
    open_time: Mapped[str] = mapped_column(String(5), nullable=False)
    close_time: Mapped[str] = mapped_column(String(5), nullable=False)
    is_open: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    dealership: Mapped["Dealership"] = relationship(back_populates="working_hours")


class Car(Base):
    """Inventory snapshot; owned by the inventory system, read here."""

    __tablename__ = "cars"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    make: Mapped[str] = mapped_column(String(100), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="AVAILABLE",
        server_default=text("'AVAILABLE'"),
        index=True,
    )
    featured: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    dealership_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("dealerships.id"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    dealership: Mapped[Optional["Dealership"]] = relationship(back_populates="cars")
    bookings: Mapped[list["Booking"]] = relationship(back_populates="car")


class Booking(Base):
    """A test-drive reservation of one car for one time window."""

    __tablename__ = "bookings"
    __table_args__ = (
        # At most one active booking per car, date and start time.
        Index(
            "uq_bookings_active_slot",
            "car_id",
            "booking_date",
            "start_time",
            unique=True,
            sqlite_where=text(_ACTIVE_STATUS_SQL),
            postgresql_where=text(_ACTIVE_STATUS_SQL),
        ),
        UniqueConstraint(
            "user_id",
            "idempotency_key",
            name="uq_bookings_user_idempotency_key",
        ),
        Index("ix_bookings_car_date", "car_id", "booking_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    car_id: Mapped[int] = mapped_column(
        ForeignKey("cars.id"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    booking_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)

    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="PENDING",
        server_default=text("'PENDING'"),
    )

    notes: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    idempotency_key: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    car: Mapped["Car"] = relationship(back_populates="bookings")
