"""Booking aggregate — a priced, scheduled engagement with a consultant.

State Machine (5 states):
    PENDING → CONFIRMED → COMPLETED
    PENDING → COMPLETED (consultant skips confirmation)
    PENDING | CONFIRMED → CANCELLED | NO_SHOW
    COMPLETED, CANCELLED, NO_SHOW → (terminal)

A booking's slot is ``[start_time, end_time)`` on ``date``; ``end_time`` is
always derived from ``start_time + duration`` and never crosses midnight.
A completed booking may be rated exactly once.
"""

from datetime import UTC, date, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import InvalidOperationError, ValidationError
from protean.fields import Date, DateTime, Float, Identifier, Integer, String, ValueObject

from consulting.booking.events import (
    BookingCancelled,
    BookingCompleted,
    BookingConfirmed,
    BookingCreated,
    BookingMarkedNoShow,
    BookingRated,
)
from consulting.domain import consulting
from consulting.errors import InvalidBookingState
from consulting.shared import timeslots

MIN_DURATION = 30
MAX_DURATION = 480


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class BookingStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


class MeetingType(Enum):
    VIDEO = "video"
    AUDIO = "audio"
    IN_PERSON = "in-person"


class CancellationActor(Enum):
    CLIENT = "client"
    CONSULTANT = "consultant"
    ADMIN = "admin"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    BookingStatus.PENDING: {
        BookingStatus.CONFIRMED,
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED,
        BookingStatus.NO_SHOW,
    },
    BookingStatus.CONFIRMED: {
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED,
        BookingStatus.NO_SHOW,
    },
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
    BookingStatus.NO_SHOW: set(),
}

# Bookings in these states no longer hold their slot
NON_BLOCKING_STATES = {BookingStatus.CANCELLED, BookingStatus.NO_SHOW}

_CLIENT_CANCELLABLE_STATES = {BookingStatus.PENDING, BookingStatus.CONFIRMED}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@consulting.value_object(part_of="Booking")
class BookingNotes:
    client = String(max_length=500)
    consultant = String(max_length=500)


@consulting.value_object(part_of="Booking")
class BookingRating:
    """A client's score for a completed booking."""

    score = Integer(required=True)
    review = String(max_length=1000)
    created_at = DateTime()

    @invariant.post
    def score_must_be_in_range(self):
        if self.score is not None and (self.score < 1 or self.score > 5):
            raise ValidationError({"score": ["Rating must be between 1 and 5"]})


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@consulting.aggregate
class Booking:
    client_id = Identifier(required=True)
    consultant_id = Identifier(required=True)
    category_id = Identifier(required=True)

    # Slot
    date = Date(required=True)
    duration = Integer(required=True, min_value=MIN_DURATION, max_value=MAX_DURATION, default=60)
    start_time = String(required=True, max_length=5)
    end_time = String(max_length=5)

    status = String(choices=BookingStatus, default=BookingStatus.PENDING.value)
    total_amount = Float(required=True, min_value=0.0)
    notes = ValueObject(BookingNotes)

    # Meeting
    meeting_type = String(choices=MeetingType, default=MeetingType.VIDEO.value)
    meeting_link = String(max_length=500)
    location = String(max_length=200)

    # Outcome
    cancellation_reason = String(max_length=200)
    cancelled_by = String(choices=CancellationActor)
    cancelled_at = DateTime()
    completed_at = DateTime()
    rating = ValueObject(BookingRating)

    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def end_time_matches_duration(self):
        if self.start_time is None or self.duration is None:
            return
        if self.end_time != timeslots.end_time_for(self.start_time, self.duration):
            raise ValidationError({"end_time": ["End time must equal start time plus duration"]})

    @invariant.post
    def only_completed_bookings_carry_ratings(self):
        if self.is_rated and BookingStatus(self.status) != BookingStatus.COMPLETED:
            raise ValidationError({"rating": ["Only completed bookings can be rated"]})

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def is_rated(self):
        return self.rating is not None and self.rating.score is not None

    @property
    def holds_slot(self):
        return BookingStatus(self.status) not in NON_BLOCKING_STATES

    @property
    def time_range(self):
        return f"{self.start_time} - {self.end_time}"

    @property
    def duration_hours(self):
        return self.duration / 60

    def overlaps(self, on_date, start_time, end_time):
        """True when this booking still holds a slot overlapping the given one."""
        return (
            self.holds_slot
            and self.date == on_date
            and timeslots.overlaps(self.start_time, self.end_time, start_time, end_time)
        )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def schedule(
        cls,
        client_id,
        consultant_id,
        category_id,
        on_date,
        start_time,
        duration,
        hourly_rate,
        total_amount=None,
        meeting_type=None,
        client_notes=None,
        location=None,
    ):
        """Create a pending booking.

        ``on_date`` must be after today. ``total_amount`` defaults to the
        consultant's hourly rate pro-rated over ``duration``.
        """
        now = datetime.now(UTC)
        if not isinstance(on_date, date) or on_date <= date.today():
            raise ValidationError({"date": ["Booking date must be in the future"]})
        if duration is None or not MIN_DURATION <= duration <= MAX_DURATION:
            raise ValidationError({"duration": ["Duration must be between 30 and 480 minutes"]})

        start_time = timeslots.normalize(start_time, "start_time")
        end_time = timeslots.end_time_for(start_time, duration)

        if total_amount is None:
            total_amount = hourly_rate * duration / 60

        booking = cls(
            client_id=client_id,
            consultant_id=consultant_id,
            category_id=category_id,
            date=on_date,
            duration=duration,
            start_time=start_time,
            end_time=end_time,
            status=BookingStatus.PENDING.value,
            total_amount=total_amount,
            notes=BookingNotes(client=client_notes),
            meeting_type=meeting_type or MeetingType.VIDEO.value,
            location=location,
            created_at=now,
            updated_at=now,
        )

        booking.raise_(
            BookingCreated(
                booking_id=str(booking.id),
                client_id=str(client_id),
                consultant_id=str(consultant_id),
                category_id=str(category_id),
                date=on_date,
                start_time=start_time,
                end_time=end_time,
                duration=duration,
                total_amount=total_amount,
                created_at=now,
            )
        )
        return booking

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = BookingStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidBookingState(
                {"status": [f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    def transition_to(self, target_status, actor, consultant_notes=None):
        """Move the booking forward on behalf of its consultant or an admin.

        Returns True when this call moved the booking into COMPLETED, which is
        the signal to count the completion on the consultant.
        """
        target = BookingStatus(target_status)
        if target == BookingStatus.PENDING:
            raise InvalidBookingState({"status": ["A booking cannot return to pending"]})
        self._assert_can_transition(target)

        if consultant_notes:
            client_notes = self.notes.client if self.notes else None
            self.notes = BookingNotes(client=client_notes, consultant=consultant_notes)

        if target == BookingStatus.CONFIRMED:
            self._confirm()
        elif target == BookingStatus.COMPLETED:
            self._complete()
            return True
        elif target == BookingStatus.CANCELLED:
            self._cancel(cancelled_by=CancellationActor(actor).value)
        elif target == BookingStatus.NO_SHOW:
            self._mark_no_show()
        return False

    def cancel_by_client(self, reason=None):
        current = BookingStatus(self.status)
        if current not in _CLIENT_CANCELLABLE_STATES:
            raise InvalidBookingState({"status": ["Booking cannot be cancelled in its current status"]})
        if reason is not None and len(reason) > 200:
            raise ValidationError({"reason": ["Cancellation reason cannot exceed 200 characters"]})

        self._cancel(cancelled_by=CancellationActor.CLIENT.value, reason=reason)

    def _confirm(self):
        now = datetime.now(UTC)
        self.status = BookingStatus.CONFIRMED.value
        self.updated_at = now

        self.raise_(
            BookingConfirmed(
                booking_id=str(self.id),
                consultant_id=str(self.consultant_id),
                confirmed_at=now,
            )
        )

    def _complete(self):
        now = datetime.now(UTC)
        self.status = BookingStatus.COMPLETED.value
        self.completed_at = now
        self.updated_at = now

        self.raise_(
            BookingCompleted(
                booking_id=str(self.id),
                consultant_id=str(self.consultant_id),
                client_id=str(self.client_id),
                completed_at=now,
            )
        )

    def _cancel(self, cancelled_by, reason=None):
        now = datetime.now(UTC)
        self.status = BookingStatus.CANCELLED.value
        self.cancelled_by = cancelled_by
        self.cancelled_at = now
        if reason:
            self.cancellation_reason = reason
        self.updated_at = now

        self.raise_(
            BookingCancelled(
                booking_id=str(self.id),
                consultant_id=str(self.consultant_id),
                cancelled_by=cancelled_by,
                reason=reason,
                cancelled_at=now,
            )
        )

    def _mark_no_show(self):
        now = datetime.now(UTC)
        self.status = BookingStatus.NO_SHOW.value
        self.updated_at = now

        self.raise_(
            BookingMarkedNoShow(
                booking_id=str(self.id),
                consultant_id=str(self.consultant_id),
                marked_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Rating
    # -------------------------------------------------------------------
    def rate(self, score, review=None):
        if self.is_rated:
            raise InvalidOperationError({"rating": ["Booking has already been rated"]})
        if BookingStatus(self.status) != BookingStatus.COMPLETED:
            raise InvalidBookingState({"status": ["Can only rate completed bookings"]})

        now = datetime.now(UTC)
        self.rating = BookingRating(score=score, review=review, created_at=now)
        self.updated_at = now

        self.raise_(
            BookingRated(
                booking_id=str(self.id),
                consultant_id=str(self.consultant_id),
                client_id=str(self.client_id),
                score=score,
                rated_at=now,
            )
        )
