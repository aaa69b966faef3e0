"""BDD tests for the booking lifecycle."""

from datetime import date, timedelta

from protean.exceptions import ValidationError
from pytest_bdd import parsers, scenarios, then, when

from consulting.booking.booking import Booking
from consulting.errors import InvalidBookingState

scenarios("features/booking_lifecycle.feature")


@when(
    parsers.cfparse(
        'a client schedules {duration:d} minutes from "{start_time}" at an hourly rate of {rate:d}'
    ),
    target_fixture="booking",
)
def schedule_booking(duration, start_time, rate, error):
    try:
        return Booking.schedule(
            client_id="client-bdd-lc",
            consultant_id="consultant-bdd-lc",
            category_id="category-bdd-lc",
            on_date=date.today() + timedelta(days=3),
            start_time=start_time,
            duration=duration,
            hourly_rate=float(rate),
        )
    except ValidationError as exc:
        error["exc"] = exc
        return None


@when(parsers.cfparse('the "{actor}" moves the booking to "{status}"'))
def move_booking(booking, actor, status, error):
    try:
        booking.transition_to(status, actor=actor)
    except InvalidBookingState as exc:
        error["exc"] = exc


@when(parsers.cfparse('the client cancels the booking because "{reason}"'))
def client_cancels(booking, reason, error):
    try:
        booking.cancel_by_client(reason=reason)
    except InvalidBookingState as exc:
        error["exc"] = exc


@then(parsers.cfparse('the booking ends at "{end_time}"'))
def booking_ends_at(booking, end_time):
    assert booking.end_time == end_time


@then(parsers.cfparse("the booking costs {amount:d}"))
def booking_costs(booking, amount):
    assert booking.total_amount == amount


@then("the booking records when it was completed")
def booking_completed_at(booking):
    assert booking.completed_at is not None


@then(parsers.cfparse('the booking was cancelled by "{actor}"'))
def booking_cancelled_by(booking, actor):
    assert booking.cancelled_by == actor
    assert booking.cancelled_at is not None
