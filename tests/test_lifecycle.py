"""
Tests for booking status changes.

Cancellation is open to the booking owner and admins and refuses
terminal bookings. The admin status overwrite accepts any of the five
statuses from any current status unless strict transitions are enabled.
"""

import pytest

from testdrive_desk.core import config
from testdrive_desk.core.domain_exceptions import (
    AlreadyCancelled,
    AlreadyCompleted,
    InvalidStatus,
    NotFound,
    SlotConflict,
    Unauthorized,
)
from testdrive_desk.db.models import Booking
from testdrive_desk.services.lifecycle_service import cancel_booking, set_booking_status

from conftest import add_booking, add_car


@pytest.fixture
def booking_id(db):
    car_id = add_car(db)
    return add_booking(db, car_id, status="PENDING", user_id="owner")


class TestCancelBooking:
    def test_owner_can_cancel(self, db, booking_id):
        booking = cancel_booking(db, booking_id, actor_id="owner", actor_role="USER")
        assert booking.status == "CANCELLED"

    def test_admin_can_cancel_any_booking(self, db, booking_id):
        booking = cancel_booking(db, booking_id, actor_id="admin-1", actor_role="ADMIN")
        assert booking.status == "CANCELLED"

    def test_other_user_is_unauthorized(self, db, booking_id):
        with pytest.raises(Unauthorized):
            cancel_booking(db, booking_id, actor_id="someone-else", actor_role="USER")
        assert db.get(Booking, booking_id).status == "PENDING"

    def test_missing_booking(self, db):
        with pytest.raises(NotFound):
            cancel_booking(db, 999, actor_id="owner", actor_role="USER")

    def test_confirmed_booking_can_be_cancelled(self, db, booking_id):
        set_booking_status(db, booking_id, "CONFIRMED", actor_role="ADMIN")
        assert cancel_booking(db, booking_id, "owner", "USER").status == "CANCELLED"

    def test_second_cancel_is_rejected_and_state_unchanged(self, db, booking_id):
        cancel_booking(db, booking_id, actor_id="owner", actor_role="USER")
        before = db.get(Booking, booking_id).updated_at

        with pytest.raises(AlreadyCancelled):
            cancel_booking(db, booking_id, actor_id="owner", actor_role="USER")

        booking = db.get(Booking, booking_id)
        assert booking.status == "CANCELLED"
        assert booking.updated_at == before

    def test_completed_booking_cannot_be_cancelled(self, db, booking_id):
        set_booking_status(db, booking_id, "COMPLETED", actor_role="ADMIN")

        with pytest.raises(AlreadyCompleted):
            cancel_booking(db, booking_id, actor_id="admin-1", actor_role="ADMIN")
        assert db.get(Booking, booking_id).status == "COMPLETED"

    def test_no_show_can_still_be_cancelled(self, db, booking_id):
        set_booking_status(db, booking_id, "NO_SHOW", actor_role="ADMIN")
        assert cancel_booking(db, booking_id, "owner", "USER").status == "CANCELLED"


class TestSetBookingStatus:
    def test_requires_admin(self, db, booking_id):
        with pytest.raises(Unauthorized):
            set_booking_status(db, booking_id, "CONFIRMED", actor_role="USER")

    def test_unauthorized_checked_before_lookup(self, db):
        with pytest.raises(Unauthorized):
            set_booking_status(db, 999, "CONFIRMED", actor_role=None)

    def test_missing_booking(self, db):
        with pytest.raises(NotFound):
            set_booking_status(db, 999, "CONFIRMED", actor_role="ADMIN")

    def test_rejects_status_outside_enum(self, db, booking_id):
        with pytest.raises(InvalidStatus):
            set_booking_status(db, booking_id, "ARCHIVED", actor_role="ADMIN")
        assert db.get(Booking, booking_id).status == "PENDING"

    def test_lowercase_status_is_normalized(self, db, booking_id):
        assert set_booking_status(db, booking_id, "confirmed", "ADMIN").status == "CONFIRMED"

    @pytest.mark.parametrize(
        "path",
        [
            ["COMPLETED", "PENDING"],
            ["CANCELLED", "CONFIRMED"],
            ["NO_SHOW", "COMPLETED", "CANCELLED"],
        ],
    )
    def test_permissive_overwrite_from_any_status(self, db, booking_id, path):
        for status in path:
            assert set_booking_status(db, booking_id, status, actor_role="ADMIN").status == status

    def test_reactivating_into_taken_slot_conflicts(self, db):
        car_id = add_car(db)
        cancelled_id = add_booking(db, car_id, status="CANCELLED", user_id="a")
        add_booking(db, car_id, status="PENDING", user_id="b")

        with pytest.raises(SlotConflict):
            set_booking_status(db, cancelled_id, "CONFIRMED", actor_role="ADMIN")
        assert db.get(Booking, cancelled_id).status == "CANCELLED"


class TestStrictTransitions:
    @pytest.fixture(autouse=True)
    def strict_mode(self, monkeypatch):
        monkeypatch.setattr(config, "STRICT_STATUS_TRANSITIONS", True)

    def test_forward_transitions_allowed(self, db, booking_id):
        set_booking_status(db, booking_id, "CONFIRMED", actor_role="ADMIN")
        assert set_booking_status(db, booking_id, "COMPLETED", actor_role="ADMIN").status == "COMPLETED"

    def test_terminal_status_is_final(self, db, booking_id):
        set_booking_status(db, booking_id, "CANCELLED", actor_role="ADMIN")

        with pytest.raises(InvalidStatus):
            set_booking_status(db, booking_id, "PENDING", actor_role="ADMIN")

    def test_same_status_write_is_accepted(self, db, booking_id):
        assert set_booking_status(db, booking_id, "PENDING", actor_role="ADMIN").status == "PENDING"

    def test_pending_cannot_jump_to_completed(self, db, booking_id):
        with pytest.raises(InvalidStatus):
            set_booking_status(db, booking_id, "COMPLETED", actor_role="ADMIN")
