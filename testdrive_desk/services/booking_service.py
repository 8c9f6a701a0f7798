"""Test-drive booking creation and lookups."""

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy import ColumnElement, or_, select
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager, joinedload

from testdrive_desk.core.domain_exceptions import (
    BookingValidationError,
    CarUnavailable,
    InvalidStatus,
    SlotConflict,
    StorageUnavailable,
)
from testdrive_desk.db.bootstrap import resolve_dealership_context
from testdrive_desk.db.models import (
    ACTIVE_BOOKING_STATUSES,
    BOOKING_STATUSES,
    Booking,
    Car,
)
from testdrive_desk.services.access import require_admin
from testdrive_desk.services.time_utils import normalize_hhmm, parse_hhmm
from testdrive_desk.services.working_hours_service import resolve_day_hours

logger = logging.getLogger(__name__)

# Statuses that mean "this user already has a test drive for this car".
USER_CAR_BOOKING_STATUSES = ("PENDING", "CONFIRMED", "COMPLETED")


def check_slot_conflict(db: Session, car_id: int, booking_date: date, start_time: str) -> bool:
    """True when an active booking already holds this car/date/start."""
    existing_id = db.scalar(
        select(Booking.id)
        .where(Booking.car_id == car_id)
        .where(Booking.booking_date == booking_date)
        .where(Booking.start_time == start_time)
        .where(Booking.status.in_(ACTIVE_BOOKING_STATUSES))
        .limit(1)
    )
    return existing_id is not None


def _validate_window(
    db: Session,
    car: Car,
    booking_date: date,
    start_time: str,
    end_time: str,
) -> None:
    start_minutes = parse_hhmm(start_time)
    end_minutes = parse_hhmm(end_time)
    if start_minutes >= end_minutes:
        raise BookingValidationError("Start time must be before end time.")

    context = resolve_dealership_context(db=db, car=car)
    hours = resolve_day_hours(db=db, dealership_id=context.dealership_id, target_date=booking_date)
    if not hours.is_open:
        raise BookingValidationError("The dealership is closed on the selected date.")

    if start_minutes < parse_hhmm(hours.open_time) or end_minutes > parse_hhmm(hours.close_time):
        raise BookingValidationError(
            f"Test drives on this date must be between {hours.open_time} and {hours.close_time}."
        )


def _find_by_idempotency_key(db: Session, user_id: str, idempotency_key: str) -> Booking | None:
    return db.scalar(
        select(Booking)
        .where(Booking.user_id == user_id)
        .where(Booking.idempotency_key == idempotency_key)
    )


def _release_replayed(db: Session, booking: Booking) -> Booking:
    # Detached so ending the read transaction leaves it loaded.
    db.expunge(booking)
    db.rollback()
    return booking


def create_booking(
    db: Session,
    car_id: int,
    user_id: str,
    booking_date: date,
    start_time: str,
    end_time: str,
    notes: str | None = None,
    idempotency_key: str | None = None,
) -> Booking:
    """Create a PENDING booking if the car is available and the slot is free.

    The availability check, the conflict check and the insert run in one
    transaction; the partial unique index on active bookings rejects any
    insert that slips past the check. Times are stored in canonical
    HH:MM form so the check and the index compare the same key.
    """
    start_time = normalize_hhmm(start_time, "startTime")
    end_time = normalize_hhmm(end_time, "endTime")

    try:
        if idempotency_key:
            replayed = _find_by_idempotency_key(db, user_id, idempotency_key)
            if replayed is not None:
                logger.info(
                    "Booking replayed for idempotency key",
                    extra={"booking_id": replayed.id, "user_id": user_id},
                )
                return _release_replayed(db, replayed)

        car = db.scalar(select(Car).where(Car.id == car_id))
        if car is None or car.status != "AVAILABLE":
            db.rollback()
            raise CarUnavailable("Car not available for test drive.")

        if check_slot_conflict(db=db, car_id=car_id, booking_date=booking_date, start_time=start_time):
            db.rollback()
            logger.info(
                "Booking rejected: slot taken",
                extra={"car_id": car_id, "booking_date": str(booking_date), "start_time": start_time},
            )
            raise SlotConflict("This time slot is already booked. Please select another time.")

        try:
            _validate_window(
                db=db,
                car=car,
                booking_date=booking_date,
                start_time=start_time,
                end_time=end_time,
            )
        except BookingValidationError:
            db.rollback()
            raise

        booking = Booking(
            car_id=car_id,
            user_id=user_id,
            booking_date=booking_date,
            start_time=start_time,
            end_time=end_time,
            notes=notes or None,
            idempotency_key=idempotency_key,
            status="PENDING",
        )

        db.add(booking)
        db.commit()
    except IntegrityError:
        db.rollback()
        if idempotency_key:
            replayed = _find_by_idempotency_key(db, user_id, idempotency_key)
            if replayed is not None:
                return _release_replayed(db, replayed)
        logger.info(
            "Booking rejected by active-slot index",
            extra={"car_id": car_id, "booking_date": str(booking_date), "start_time": start_time},
        )
        raise SlotConflict("This time slot is already booked. Please select another time.")
    except OperationalError as exc:
        db.rollback()
        logger.exception("Storage failure while creating booking for car %s.", car_id)
        raise StorageUnavailable("Booking storage is unavailable. Please try again later.") from exc
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(booking)

    logger.info(
        "Booking created",
        extra={
            "booking_id": booking.id,
            "car_id": car_id,
            "user_id": user_id,
        },
    )

    return booking


def list_bookings_for_user(db: Session, user_id: str) -> list[Booking]:
    return list(
        db.scalars(
            select(Booking)
            .options(joinedload(Booking.car))
            .where(Booking.user_id == user_id)
            .order_by(Booking.booking_date.desc(), Booking.start_time.asc())
        ).all()
    )


def list_active_bookings_for_car(db: Session, car_id: int) -> list[Booking]:
    """Bookings that currently block slots for the car."""
    return list(
        db.scalars(
            select(Booking)
            .where(Booking.car_id == car_id)
            .where(Booking.status.in_(ACTIVE_BOOKING_STATUSES))
            .order_by(Booking.booking_date.asc(), Booking.start_time.asc())
        ).all()
    )


def get_user_booking_for_car(db: Session, car_id: int, user_id: str) -> Booking | None:
    return db.scalar(
        select(Booking)
        .where(Booking.car_id == car_id)
        .where(Booking.user_id == user_id)
        .where(Booking.status.in_(USER_CAR_BOOKING_STATUSES))
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .limit(1)
    )


@dataclass(frozen=True)
class BookingFilter:
    status: str | None = None
    search: str | None = None
    booking_date: date | None = None
    car_id: int | None = None
    user_id: str | None = None

    def predicates(self) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = []

        if self.status:
            status = self.status.upper()
            if status not in BOOKING_STATUSES:
                raise InvalidStatus("Invalid status")
            clauses.append(Booking.status == status)

        if self.booking_date is not None:
            clauses.append(Booking.booking_date == self.booking_date)

        if self.car_id is not None:
            clauses.append(Booking.car_id == self.car_id)

        if self.user_id:
            clauses.append(Booking.user_id == self.user_id)

        term = (self.search or "").strip()
        if term:
            pattern = f"%{term}%"
            clauses.append(
                or_(
                    Car.make.ilike(pattern),
                    Car.model.ilike(pattern),
                    Booking.user_id.ilike(pattern),
                )
            )

        return clauses


def list_bookings(db: Session, booking_filter: BookingFilter, actor_role: str | None) -> list[Booking]:
    """Admin search over all bookings."""
    require_admin(actor_role)
    query = (
        select(Booking)
        .join(Booking.car)
        .options(contains_eager(Booking.car))
    )
    for clause in booking_filter.predicates():
        query = query.where(clause)

    query = query.order_by(Booking.booking_date.desc(), Booking.start_time.asc())
    return list(db.scalars(query).all())
