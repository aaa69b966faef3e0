"""Repository for the Booking aggregate."""

from consulting.booking.booking import Booking
from consulting.domain import consulting


def _schedule_order(booking):
    return (booking.date, booking.start_time)


@consulting.repository(part_of=Booking)
class BookingRepository:
    def on_date_for_consultant(self, consultant_id, on_date) -> list[Booking]:
        """Every booking of a consultant on a date, whatever its status."""
        return (
            self._dao.query.filter(consultant_id=str(consultant_id), date=on_date)
            .limit(None)
            .all()
            .items
        )

    def rated_for_consultant(self, consultant_id) -> list[Booking]:
        completed = (
            self._dao.query.filter(consultant_id=str(consultant_id), status="completed")
            .limit(None)
            .all()
            .items
        )
        return [booking for booking in completed if booking.is_rated]

    def scheduled(self, client_id=None, consultant_id=None, status=None) -> list[Booking]:
        """Bookings matching the participant and status filters, in calendar order."""
        filters = {}
        if client_id is not None:
            filters["client_id"] = str(client_id)
        if consultant_id is not None:
            filters["consultant_id"] = str(consultant_id)
        if status is not None:
            filters["status"] = status
        bookings = self._dao.query.filter(**filters).limit(None).all().items
        return sorted(bookings, key=_schedule_order)

    def newest(self, status=None, date_from=None, date_to=None) -> list[Booking]:
        filters = {}
        if status is not None:
            filters["status"] = status
        if date_from is not None:
            filters["date__gte"] = date_from
        if date_to is not None:
            filters["date__lte"] = date_to
        return self._dao.query.filter(**filters).order_by("-created_at").limit(None).all().items

    def recent(self, limit=10) -> list[Booking]:
        return self._dao.query.order_by("-created_at").limit(limit).all().items

    def count_by_status(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for booking in self.everything():
            counts[booking.status] = counts.get(booking.status, 0) + 1
        return counts

    def everything(self) -> list[Booking]:
        return self._dao.query.limit(None).all().items
