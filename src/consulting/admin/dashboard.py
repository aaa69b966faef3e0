"""Admin dashboard — marketplace-wide totals and leaderboards."""

from dataclasses import dataclass, field

from consulting.booking.booking import Booking, BookingStatus
from consulting.category.category import Category
from consulting.consultant.consultant import Consultant

RECENT_BOOKINGS = 10
TOP_CATEGORIES = 5
TOP_CONSULTANTS = 5


@dataclass
class Dashboard:
    total_consultants: int
    total_categories: int
    total_bookings: int
    bookings_by_status: dict[str, int] = field(default_factory=dict)
    recent_bookings: list = field(default_factory=list)
    top_categories: list = field(default_factory=list)
    top_consultants: list = field(default_factory=list)


def build_dashboard(domain) -> Dashboard:
    bookings = domain.repository_for(Booking)
    categories = domain.repository_for(Category).everything()
    consultants = domain.repository_for(Consultant).everything()

    by_status = {status.value: 0 for status in BookingStatus}
    by_status.update(bookings.count_by_status())

    return Dashboard(
        total_consultants=len(consultants),
        total_categories=len(categories),
        total_bookings=sum(by_status.values()),
        bookings_by_status=by_status,
        recent_bookings=bookings.recent(RECENT_BOOKINGS),
        top_categories=sorted(categories, key=lambda c: c.consultant_count or 0, reverse=True)[:TOP_CATEGORIES],
        top_consultants=sorted(
            consultants,
            key=lambda c: c.rating.average if c.rating else 0.0,
            reverse=True,
        )[:TOP_CONSULTANTS],
    )
