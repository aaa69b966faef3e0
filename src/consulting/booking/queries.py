"""Read side for bookings, scoped by the caller's role.

Clients see the bookings they made, consultants the bookings made with them,
admins everything.
"""

from consulting.booking.booking import Booking
from consulting.booking.scheduling import find_conflict
from consulting.consultant.directory import ConsultantDirectory
from consulting.errors import AccessDenied


class BookingQueries:
    def __init__(self, bookings, directory: ConsultantDirectory):
        self._bookings = bookings
        self._directory = directory

    @classmethod
    def for_domain(cls, domain):
        return cls(domain.repository_for(Booking), ConsultantDirectory.for_domain(domain))

    def _scope(self, caller):
        if caller.is_client:
            return {"client_id": caller.id}
        if caller.is_consultant:
            return {"consultant_id": self._directory.profile_of(caller.id).id}
        return {}

    def listing(self, caller, status=None, page=1, limit=10):
        """Return ``(bookings, total)`` for one page, in calendar order."""
        bookings = self._bookings.scheduled(status=status, **self._scope(caller))
        start = (page - 1) * limit
        return bookings[start : start + limit], len(bookings)

    def mine(self, caller) -> list[Booking]:
        return self._bookings.scheduled(**self._scope(caller))

    def visible(self, booking_id, caller) -> Booking:
        booking = self._bookings.get(str(booking_id))
        if caller.is_admin or str(booking.client_id) == str(caller.id):
            return booking
        if caller.is_consultant:
            consultant = self._directory.find_by_user(caller.id)
            if consultant is not None and str(consultant.id) == str(booking.consultant_id):
                return booking
        raise AccessDenied({"booking": ["Access denied"]})

    def conflict(self, consultant_id, on_date, start_time, end_time, exclude=None) -> Booking | None:
        candidates = self._bookings.on_date_for_consultant(consultant_id, on_date)
        return find_conflict(candidates, on_date, start_time, end_time, exclude=exclude)

    def for_admin(self, status=None, date_from=None, date_to=None, page=1, limit=20):
        bookings = self._bookings.newest(status=status, date_from=date_from, date_to=date_to)
        start = (page - 1) * limit
        return bookings[start : start + limit], len(bookings)
