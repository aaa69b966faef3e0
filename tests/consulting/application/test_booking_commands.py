"""Application tests for booking commands and their counter cascades."""

from datetime import timedelta

import pytest
from consulting.booking.booking import Booking
from consulting.booking.cancellation import CancelBooking
from consulting.booking.rating import RateBooking
from consulting.category.category import Category
from consulting.consultant.consultant import Consultant
from consulting.consultant.profile import UpdateConsultantProfile
from consulting.errors import AccessDenied, InvalidBookingState
from protean import current_domain
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError


@pytest.fixture()
def setup(make_category, make_consultant):
    category_id = make_category()
    consultant_id = make_consultant("consultant-user", [category_id], hourly_rate=120.0)
    return {"category_id": category_id, "consultant_id": consultant_id}


def _booking(booking_id):
    return current_domain.repository_for(Booking).get(booking_id)


def _consultant(consultant_id):
    return current_domain.repository_for(Consultant).get(consultant_id)


def _rate(booking_id, client_id, score, review=None):
    return current_domain.process(
        RateBooking(booking_id=booking_id, client_id=client_id, score=score, review=review),
        asynchronous=False,
    )


class TestCreateBooking:
    def test_booking_is_pending_with_derived_fields(self, setup, make_booking):
        booking_id = make_booking("client-001", setup["consultant_id"], setup["category_id"])
        booking = _booking(booking_id)
        assert booking.status == "pending"
        assert booking.end_time == "10:00"
        assert booking.total_amount == 120.0

    def test_counters_are_incremented(self, setup, make_booking):
        make_booking("client-001", setup["consultant_id"], setup["category_id"])
        assert _consultant(setup["consultant_id"]).total_bookings == 1
        assert current_domain.repository_for(Category).get(setup["category_id"]).booking_count == 1

    def test_overlapping_slot_is_a_conflict(self, setup, make_booking):
        make_booking("client-001", setup["consultant_id"], setup["category_id"], start_time="10:00")
        with pytest.raises(InvalidOperationError):
            make_booking("client-002", setup["consultant_id"], setup["category_id"], start_time="10:30")
        assert _consultant(setup["consultant_id"]).total_bookings == 1

    def test_touching_slot_is_allowed(self, setup, make_booking):
        make_booking("client-001", setup["consultant_id"], setup["category_id"], start_time="10:00")
        make_booking("client-002", setup["consultant_id"], setup["category_id"], start_time="11:00")
        assert _consultant(setup["consultant_id"]).total_bookings == 2

    def test_same_slot_on_another_day_is_allowed(self, setup, make_booking, next_week):
        make_booking("client-001", setup["consultant_id"], setup["category_id"])
        make_booking(
            "client-002",
            setup["consultant_id"],
            setup["category_id"],
            on_date=next_week + timedelta(days=1),
        )

    def test_cancelled_booking_frees_its_slot(self, setup, make_booking):
        booking_id = make_booking("client-001", setup["consultant_id"], setup["category_id"])
        current_domain.process(CancelBooking(booking_id=booking_id, client_id="client-001"), asynchronous=False)
        make_booking("client-002", setup["consultant_id"], setup["category_id"])

    def test_inactive_consultant_cannot_be_booked(self, setup, make_booking):
        current_domain.process(
            UpdateConsultantProfile(
                consultant_id=setup["consultant_id"],
                actor_id="consultant-user",
                actor_role="consultant",
                is_active=False,
            ),
            asynchronous=False,
        )
        with pytest.raises(InvalidOperationError):
            make_booking("client-001", setup["consultant_id"], setup["category_id"])

    def test_unknown_consultant(self, setup, make_booking):
        with pytest.raises(ObjectNotFoundError):
            make_booking("client-001", "missing", setup["category_id"])

    def test_unknown_category(self, setup, make_booking):
        with pytest.raises(ObjectNotFoundError):
            make_booking("client-001", setup["consultant_id"], "missing")

    def test_midnight_rollover_is_rejected(self, setup, make_booking):
        with pytest.raises(ValidationError):
            make_booking("client-001", setup["consultant_id"], setup["category_id"], start_time="23:00")


class TestChangeStatus:
    def test_consultant_confirms(self, setup, make_booking, change_status):
        booking_id = make_booking("client-001", setup["consultant_id"], setup["category_id"])
        change_status(booking_id, "confirmed", "consultant-user", notes="Looking forward to it")
        booking = _booking(booking_id)
        assert booking.status == "confirmed"
        assert booking.notes.consultant == "Looking forward to it"

    def test_completion_is_counted_once(self, setup, make_booking, change_status):
        booking_id = make_booking("client-001", setup["consultant_id"], setup["category_id"])
        change_status(booking_id, "completed", "consultant-user")
        with pytest.raises(InvalidBookingState):
            change_status(booking_id, "completed", "consultant-user")

        consultant = _consultant(setup["consultant_id"])
        assert consultant.completed_bookings == 1
        assert consultant.total_bookings == 1
        assert _booking(booking_id).completed_at is not None

    def test_consultant_cancellation_is_attributed(self, setup, make_booking, change_status):
        booking_id = make_booking("client-001", setup["consultant_id"], setup["category_id"])
        change_status(booking_id, "cancelled", "consultant-user")
        assert _booking(booking_id).cancelled_by == "consultant"

    def test_admin_override_is_attributed(self, setup, make_booking, change_status):
        booking_id = make_booking("client-001", setup["consultant_id"], setup["category_id"])
        change_status(booking_id, "cancelled", "admin-001", actor_role="admin")
        assert _booking(booking_id).cancelled_by == "admin"

    def test_other_consultant_is_denied(self, setup, make_booking, make_consultant, change_status):
        make_consultant("other-consultant", [setup["category_id"]])
        booking_id = make_booking("client-001", setup["consultant_id"], setup["category_id"])
        with pytest.raises(AccessDenied):
            change_status(booking_id, "confirmed", "other-consultant")

    def test_client_is_denied(self, setup, make_booking, change_status):
        booking_id = make_booking("client-001", setup["consultant_id"], setup["category_id"])
        with pytest.raises(AccessDenied):
            change_status(booking_id, "confirmed", "client-001", actor_role="client")

    def test_unknown_booking(self, setup, change_status):
        with pytest.raises(ObjectNotFoundError):
            change_status("missing", "confirmed", "consultant-user")


class TestCancelBooking:
    def test_client_cancels_pending_booking(self, setup, make_booking):
        booking_id = make_booking("client-001", setup["consultant_id"], setup["category_id"])
        current_domain.process(
            CancelBooking(booking_id=booking_id, client_id="client-001", reason="Schedule conflict"),
            asynchronous=False,
        )
        booking = _booking(booking_id)
        assert booking.status == "cancelled"
        assert booking.cancelled_by == "client"
        assert booking.cancellation_reason == "Schedule conflict"

    def test_completed_booking_cannot_be_cancelled(self, setup, make_booking, change_status):
        booking_id = make_booking("client-001", setup["consultant_id"], setup["category_id"])
        change_status(booking_id, "completed", "consultant-user")
        with pytest.raises(InvalidBookingState):
            current_domain.process(CancelBooking(booking_id=booking_id, client_id="client-001"), asynchronous=False)

    def test_other_client_is_denied(self, setup, make_booking):
        booking_id = make_booking("client-001", setup["consultant_id"], setup["category_id"])
        with pytest.raises(AccessDenied):
            current_domain.process(CancelBooking(booking_id=booking_id, client_id="client-002"), asynchronous=False)


class TestRateBooking:
    def _completed(self, setup, make_booking, change_status, client_id, start_time):
        booking_id = make_booking(client_id, setup["consultant_id"], setup["category_id"], start_time=start_time)
        change_status(booking_id, "completed", "consultant-user")
        return booking_id

    def test_rating_updates_consultant_summary(self, setup, make_booking, change_status):
        first = self._completed(setup, make_booking, change_status, "client-001", "09:00")
        second = self._completed(setup, make_booking, change_status, "client-002", "10:00")
        third = self._completed(setup, make_booking, change_status, "client-003", "11:00")

        _rate(first, "client-001", 5)
        _rate(second, "client-002", 3)
        rating = _consultant(setup["consultant_id"]).rating
        assert (rating.average, rating.count) == (4.0, 2)

        _rate(third, "client-003", 4, review="Solid session")
        rating = _consultant(setup["consultant_id"]).rating
        assert (rating.average, rating.count) == (4.0, 3)
        assert _booking(third).rating.review == "Solid session"

    def test_second_rating_is_a_conflict(self, setup, make_booking, change_status):
        booking_id = self._completed(setup, make_booking, change_status, "client-001", "09:00")
        _rate(booking_id, "client-001", 5)
        with pytest.raises(InvalidOperationError):
            _rate(booking_id, "client-001", 1)
        rating = _consultant(setup["consultant_id"]).rating
        assert (rating.average, rating.count) == (5.0, 1)

    def test_pending_booking_cannot_be_rated(self, setup, make_booking):
        booking_id = make_booking("client-001", setup["consultant_id"], setup["category_id"])
        with pytest.raises(InvalidBookingState):
            _rate(booking_id, "client-001", 5)

    def test_other_client_is_denied(self, setup, make_booking, change_status):
        booking_id = self._completed(setup, make_booking, change_status, "client-001", "09:00")
        with pytest.raises(AccessDenied):
            _rate(booking_id, "client-002", 5)
