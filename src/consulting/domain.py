"""Consulting marketplace bounded context — Categories, Consultants, Bookings.

Clients book time slots with consultants organized by category. The Booking
aggregate drives the scheduling state machine and pushes counter and rating
updates into the Consultant and Category aggregates within the same unit of
work.
"""

from protean.domain import Domain

from consulting.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
consulting = Domain(name="consulting")
