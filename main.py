"""FastAPI entrypoint for the test-drive booking backend.

- `testdrive_desk/routes/` for API endpoints
- `testdrive_desk/services/` for slot, booking, lifecycle and reporting logic
- `testdrive_desk/db/` for SQLAlchemy models and session management
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.exceptions import HTTPException, RequestValidationError
from sqlalchemy.exc import OperationalError

from testdrive_desk.core.config import LOG_LEVEL
from testdrive_desk.core.domain_exceptions import DomainException
from testdrive_desk.core.exceptions import (
    domain_exception_handler,
    http_exception_handler,
    request_validation_handler,
    storage_exception_handler,
)
from testdrive_desk.core.middleware import RequestContextMiddleware
from testdrive_desk.db.init_db import init_db
from testdrive_desk.routes import admin, bookings, cars, dealership

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Initialize app resources before serving traffic."""
    # Ensure SQL tables and the active-slot index exist at app startup.
    init_db()
    logger.info("Database tables initialized.")

    yield

app = FastAPI(
    title="Test Drive Desk API",
    version="0.1.0",
    description="Test-drive scheduling backend for a vehicle marketplace.",
    lifespan=lifespan,
)

app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(OperationalError, storage_exception_handler)

app.include_router(cars.router)
app.include_router(bookings.router)
app.include_router(admin.router)
app.include_router(dealership.router)

@app.get("/", tags=["health"])
def root() -> dict[str, str]:
    """Simple status endpoint for uptime checks."""
    return {"status": "Test Drive Desk Running"}
