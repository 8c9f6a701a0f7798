"""Database initialization utilities."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from testdrive_desk.core.config import DEFAULT_DEALERSHIP_NAME
from testdrive_desk.db.models import Dealership
from testdrive_desk.db.session import Base, SessionLocal, engine

logger = logging.getLogger(__name__)


def _ensure_default_dealership() -> int:
    with SessionLocal() as db:
        dealership_id = db.scalar(select(Dealership.id).order_by(Dealership.id.asc()).limit(1))
        if dealership_id is not None:
            return dealership_id

        dealership = Dealership(name=DEFAULT_DEALERSHIP_NAME)
        db.add(dealership)
        db.commit()
        created_id = dealership.id

    logger.info("Created default dealership %s.", created_id)
    return created_id


def init_db() -> None:
    """Create the schema, including the active-slot unique index, and seed defaults."""
    try:
        Base.metadata.create_all(bind=engine)
        _ensure_default_dealership()
    except SQLAlchemyError:
        logger.exception("Database initialization failed.")
        raise
