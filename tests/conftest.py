"""
Pytest configuration and fixtures.
Points the app at an isolated SQLite file before any application module loads.
"""

import os
import tempfile
from datetime import date

import pytest

TEST_DB_PATH = os.path.join(tempfile.gettempdir(), "testdrive_desk_test.db")
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ.setdefault("DB_LOCK_TIMEOUT_SECONDS", "5")

from testdrive_desk.db.init_db import init_db  # noqa: E402
from testdrive_desk.db.models import Booking, Car, WorkingHours  # noqa: E402
from testdrive_desk.db.session import Base, SessionLocal, engine  # noqa: E402

# Monday
MONDAY = date(2025, 7, 28)
SUNDAY = date(2025, 7, 27)

ADMIN_HEADERS = {"X-User-Id": "admin-1", "X-User-Role": "ADMIN"}


def user_headers(user_id: str = "user-1") -> dict[str, str]:
    return {"X-User-Id": user_id, "X-User-Role": "USER"}


@pytest.fixture(scope="session", autouse=True)
def cleanup_test_database():
    yield
    engine.dispose()
    if os.path.exists(TEST_DB_PATH):
        try:
            os.remove(TEST_DB_PATH)
        except PermissionError:
            pass  # Windows may have file locked


@pytest.fixture(autouse=True)
def fresh_schema():
    """Recreate every table so each test starts from an empty store."""
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from main import app

    with TestClient(app) as test_client:
        yield test_client


def add_car(session, status: str = "AVAILABLE", featured: bool = False, **fields) -> int:
    car = Car(
        make=fields.pop("make", "Toyota"),
        model=fields.pop("model", "Corolla"),
        year=fields.pop("year", 2022),
        status=status,
        featured=featured,
        **fields,
    )
    session.add(car)
    session.commit()
    return car.id


def add_hours(
    session,
    dealership_id: int,
    day_of_week: str,
    open_time: str = "09:00",
    close_time: str = "18:00",
    is_open: bool = True,
) -> None:
    session.add(
        WorkingHours(
            dealership_id=dealership_id,
            day_of_week=day_of_week,
            open_time=open_time,
            close_time=close_time,
            is_open=is_open,
        )
    )
    session.commit()


def add_booking(
    session,
    car_id: int,
    status: str = "PENDING",
    booking_date: date = MONDAY,
    start_time: str = "10:00",
    end_time: str = "11:00",
    user_id: str = "user-1",
) -> int:
    booking = Booking(
        car_id=car_id,
        user_id=user_id,
        booking_date=booking_date,
        start_time=start_time,
        end_time=end_time,
        status=status,
    )
    session.add(booking)
    session.commit()
    return booking.id


@pytest.fixture
def store():
    """Run a seeding callable in its own short-lived session.

    HTTP tests use this so no test-side transaction holds the SQLite
    write lock while the app handles a request.
    """

    def _run(seed, *args, **kwargs):
        with SessionLocal() as session:
            return seed(session, *args, **kwargs)

    return _run
