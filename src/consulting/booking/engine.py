"""BookingEngine — the booking write path and its counter cascades.

Every operation runs inside the caller's unit of work: the booking write and
the consultant/category counter updates it triggers commit together. Reads
inside a unit of work only see committed data, so each aggregate is loaded
once per operation and handed along.
"""

import structlog
from protean.exceptions import InvalidOperationError

from consulting.booking.booking import Booking
from consulting.booking.scheduling import find_conflict
from consulting.category.registry import CategoryRegistry
from consulting.consultant.directory import ConsultantDirectory
from consulting.errors import AccessDenied
from consulting.rating.aggregator import summarize

logger = structlog.get_logger(__name__)


class BookingEngine:
    def __init__(self, bookings, directory: ConsultantDirectory, registry: CategoryRegistry):
        self._bookings = bookings
        self._directory = directory
        self._registry = registry

    @classmethod
    def for_domain(cls, domain):
        return cls(
            domain.repository_for(Booking),
            ConsultantDirectory.for_domain(domain),
            CategoryRegistry.for_domain(domain),
        )

    # -------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------
    def get(self, booking_id) -> Booking:
        return self._bookings.get(str(booking_id))

    def assert_client_owns(self, booking, caller):
        if str(booking.client_id) != str(caller.id):
            raise AccessDenied({"booking": ["Access denied"]})

    def assert_can_manage(self, booking, caller):
        """Admins manage every booking; consultants only their own."""
        if caller.is_admin:
            return
        if caller.is_consultant:
            consultant = self._directory.find_by_user(caller.id)
            if consultant is not None and str(consultant.id) == str(booking.consultant_id):
                return
        raise AccessDenied({"booking": ["Access denied"]})

    # -------------------------------------------------------------------
    # Conflicts
    # -------------------------------------------------------------------
    def check_conflict(self, consultant_id, on_date, start_time, end_time, exclude=None):
        candidates = self._bookings.on_date_for_consultant(consultant_id, on_date)
        return find_conflict(candidates, on_date, start_time, end_time, exclude=exclude)

    # -------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------
    def create(
        self,
        client_id,
        consultant_id,
        category_id,
        on_date,
        start_time,
        duration,
        total_amount=None,
        meeting_type=None,
        client_notes=None,
        location=None,
    ) -> Booking:
        consultant = self._directory.get(consultant_id)
        if not consultant.is_active:
            raise InvalidOperationError({"consultant": ["Consultant is not accepting bookings"]})
        self._registry.get(category_id)

        booking = Booking.schedule(
            client_id=client_id,
            consultant_id=consultant.id,
            category_id=category_id,
            on_date=on_date,
            start_time=start_time,
            duration=duration,
            hourly_rate=consultant.hourly_rate,
            total_amount=total_amount,
            meeting_type=meeting_type,
            client_notes=client_notes,
            location=location,
        )

        conflict = self.check_conflict(consultant.id, booking.date, booking.start_time, booking.end_time)
        if conflict is not None:
            raise InvalidOperationError({"booking": ["Time slot conflicts with an existing booking"]})

        self._bookings.add(booking)
        self._directory.record_booking_created(consultant)
        self._registry.record_booking(category_id)

        logger.info(
            "Booking created",
            booking_id=str(booking.id),
            consultant_id=str(consultant.id),
            date=booking.date.isoformat(),
            time_range=booking.time_range,
            total_amount=booking.total_amount,
        )
        return booking

    # -------------------------------------------------------------------
    # Status changes
    # -------------------------------------------------------------------
    def transition(self, booking_id, status, caller, consultant_notes=None) -> Booking:
        booking = self.get(booking_id)
        self.assert_can_manage(booking, caller)

        previous = booking.status
        newly_completed = booking.transition_to(status, actor=caller.role.value, consultant_notes=consultant_notes)
        self._bookings.add(booking)

        if newly_completed:
            self._directory.record_booking_completed(booking.consultant_id)

        logger.info(
            "Booking status changed",
            booking_id=str(booking.id),
            from_status=previous,
            to_status=booking.status,
            actor_role=caller.role.value,
        )
        return booking

    def cancel(self, booking_id, caller, reason=None) -> Booking:
        booking = self.get(booking_id)
        self.assert_client_owns(booking, caller)

        booking.cancel_by_client(reason)
        self._bookings.add(booking)

        logger.info("Booking cancelled by client", booking_id=str(booking.id), reason=reason)
        return booking

    # -------------------------------------------------------------------
    # Rating
    # -------------------------------------------------------------------
    def rate(self, booking_id, caller, score, review=None) -> Booking:
        booking = self.get(booking_id)
        self.assert_client_owns(booking, caller)

        booking.rate(score, review)
        self._bookings.add(booking)

        # The stored copy of this booking is still unrated until commit
        others = [
            other.rating.score
            for other in self._bookings.rated_for_consultant(booking.consultant_id)
            if str(other.id) != str(booking.id)
        ]
        summary = summarize([*others, booking.rating.score])
        self._directory.apply_rating(booking.consultant_id, summary)

        logger.info(
            "Booking rated",
            booking_id=str(booking.id),
            consultant_id=str(booking.consultant_id),
            score=score,
            average=summary.average,
            count=summary.count,
        )
        return booking
