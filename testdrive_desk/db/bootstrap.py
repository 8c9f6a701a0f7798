"""Bootstrap helpers for dealership defaults."""

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from testdrive_desk.core.domain_exceptions import NotFound
from testdrive_desk.core.error_codes import ErrorCode
from testdrive_desk.db.models import Car, Dealership


@dataclass(frozen=True)
class DealershipContext:
    dealership_id: int


def get_default_dealership(db: Session) -> Dealership:
    """First dealership row; seeded by ``init_db``. Never commits."""
    dealership = db.scalar(select(Dealership).order_by(Dealership.id.asc()).limit(1))
    if dealership is None:
        raise NotFound(
            code=ErrorCode.DEALERSHIP_NOT_FOUND,
            message="No dealership is configured.",
        )
    return dealership


def resolve_dealership_context(
    db: Session,
    dealership_id: int | None = None,
    car: Car | None = None,
) -> DealershipContext:
    """Pick the dealership for an hours lookup.

    An explicit id wins, then the car's own dealership, then the first
    dealership row.
    """
    if dealership_id is not None:
        exists = db.scalar(select(Dealership.id).where(Dealership.id == dealership_id))
        if exists is None:
            raise NotFound(
                code=ErrorCode.DEALERSHIP_NOT_FOUND,
                message="Dealership not found.",
            )
        return DealershipContext(dealership_id=dealership_id)

    if car is not None and car.dealership_id is not None:
        return DealershipContext(dealership_id=car.dealership_id)

    return DealershipContext(dealership_id=get_default_dealership(db).id)
