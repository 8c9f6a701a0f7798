"""Read-only dashboard and reporting aggregates."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from testdrive_desk.db.models import BOOKING_STATUSES, CAR_STATUSES, Booking, Car
from testdrive_desk.services.access import require_admin


def round2(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def conversion_rate(sold_after_test_drive: int, completed_test_drives: int) -> float:
    """Percent of completed test drives whose car ended up sold."""
    if completed_test_drives == 0:
        return 0.0
    return round2(sold_after_test_drive / completed_test_drives * 100)


def _count_by(db: Session, column, keys: tuple[str, ...]) -> dict[str, int]:
    counts = {key: 0 for key in keys}
    rows = db.execute(select(column, func.count()).group_by(column)).all()
    for key, count in rows:
        if key in counts:
            counts[key] = int(count)
    return counts


def get_car_metrics(db: Session) -> dict:
    by_status = _count_by(db, Car.status, CAR_STATUSES)
    total = db.scalar(select(func.count()).select_from(Car)) or 0
    featured = db.scalar(
        select(func.count()).select_from(Car).where(Car.featured.is_(True))
    ) or 0

    return {
        "total": int(total),
        "available": by_status["AVAILABLE"],
        "sold": by_status["SOLD"],
        "unavailable": by_status["UNAVAILABLE"],
        "featured": int(featured),
    }


def get_test_drive_metrics(db: Session) -> dict:
    by_status = _count_by(db, Booking.status, BOOKING_STATUSES)
    total = db.scalar(select(func.count()).select_from(Booking)) or 0

    completed_car_ids = select(Booking.car_id).where(Booking.status == "COMPLETED")
    sold_after_test_drive = db.scalar(
        select(func.count())
        .select_from(Car)
        .where(Car.status == "SOLD")
        .where(Car.id.in_(completed_car_ids))
    ) or 0

    return {
        "total": int(total),
        "pending": by_status["PENDING"],
        "confirmed": by_status["CONFIRMED"],
        "completed": by_status["COMPLETED"],
        "cancelled": by_status["CANCELLED"],
        "no_show": by_status["NO_SHOW"],
        "conversion_rate": conversion_rate(int(sold_after_test_drive), by_status["COMPLETED"]),
    }


def get_dashboard_metrics(db: Session, actor_role: str | None) -> dict:
    """Inventory and test-drive counts for the admin dashboard.

    Each figure comes from its own query; they are not taken at a single
    point in time.
    """
    require_admin(actor_role)
    return {
        "cars": get_car_metrics(db),
        "test_drives": get_test_drive_metrics(db),
    }


def get_daily_summary(
    db: Session,
    actor_role: str | None,
    target_date: date | None = None,
) -> dict:
    """Return booking counts by status for a given date."""
    require_admin(actor_role)
    if target_date is None:
        target_date = date.today()

    counts = {status: 0 for status in BOOKING_STATUSES}
    rows = db.execute(
        select(Booking.status, func.count(Booking.id))
        .where(Booking.booking_date == target_date)
        .group_by(Booking.status)
    ).all()

    total = 0
    for status, count in rows:
        total += count
        if status in counts:
            counts[status] = int(count)

    return {
        "date": str(target_date),
        "total_bookings": int(total),
        "pending": counts["PENDING"],
        "confirmed": counts["CONFIRMED"],
        "completed": counts["COMPLETED"],
        "cancelled": counts["CANCELLED"],
        "no_show": counts["NO_SHOW"],
    }
