"""Shared BDD fixtures and step definitions for the consulting domain."""

from datetime import date, timedelta

import pytest
from protean.exceptions import InvalidOperationError, ValidationError
from pytest_bdd import given, parsers, then

from consulting.booking.booking import Booking
from consulting.booking.events import (
    BookingCancelled,
    BookingCompleted,
    BookingConfirmed,
    BookingCreated,
    BookingMarkedNoShow,
    BookingRated,
)
from consulting.errors import InvalidBookingState

_BOOKING_EVENT_CLASSES = {
    "BookingCreated": BookingCreated,
    "BookingConfirmed": BookingConfirmed,
    "BookingCompleted": BookingCompleted,
    "BookingCancelled": BookingCancelled,
    "BookingMarkedNoShow": BookingMarkedNoShow,
    "BookingRated": BookingRated,
}


@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


def scheduled_booking(start_time="09:00", duration=60, hourly_rate=100.0):
    booking = Booking.schedule(
        client_id="client-bdd",
        consultant_id="consultant-bdd",
        category_id="category-bdd",
        on_date=date.today() + timedelta(days=7),
        start_time=start_time,
        duration=duration,
        hourly_rate=hourly_rate,
    )
    booking._events.clear()
    return booking


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a pending booking", target_fixture="booking")
def pending_booking():
    return scheduled_booking()


@given("a confirmed booking", target_fixture="booking")
def confirmed_booking():
    booking = scheduled_booking()
    booking.transition_to("confirmed", actor="consultant")
    booking._events.clear()
    return booking


@given("a completed booking", target_fixture="booking")
def completed_booking():
    booking = scheduled_booking()
    booking.transition_to("confirmed", actor="consultant")
    booking.transition_to("completed", actor="consultant")
    booking._events.clear()
    return booking


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the booking status is "{status}"'))
def booking_status_is(booking, status):
    assert booking.status == status


@then(parsers.cfparse('a "{event_type}" event is raised'))
def event_raised(booking, event_type):
    event_cls = _BOOKING_EVENT_CLASSES[event_type]
    assert any(isinstance(e, event_cls) for e in booking._events)


@then("the booking action fails with a validation error")
def booking_action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then("the booking action is rejected")
def booking_action_rejected(error):
    assert isinstance(error["exc"], InvalidBookingState)


@then("the action is refused")
def action_refused(error):
    assert isinstance(error["exc"], InvalidOperationError)
