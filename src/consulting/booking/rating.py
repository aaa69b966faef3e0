"""RateBooking — the owning client scores a completed booking once.

The consultant's rating summary is recomputed from every rated booking in
the same unit of work.
"""

from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from consulting.booking.booking import Booking
from consulting.booking.engine import BookingEngine
from consulting.domain import consulting
from consulting.shared.access import Caller, Role


@consulting.command(part_of="Booking")
class RateBooking:
    booking_id = Identifier(required=True)
    client_id = Identifier(required=True)
    score = Integer(required=True)
    review = String(max_length=1000)


@consulting.command_handler(part_of=Booking)
class RateBookingHandler:
    @handle(RateBooking)
    def rate_booking(self, command):
        caller = Caller(id=str(command.client_id), role=Role.CLIENT)
        BookingEngine.for_domain(current_domain).rate(
            command.booking_id,
            caller,
            score=command.score,
            review=command.review,
        )
