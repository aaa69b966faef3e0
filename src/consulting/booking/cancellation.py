"""CancelBooking — the owning client withdraws a pending or confirmed booking."""

from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from consulting.booking.booking import Booking
from consulting.booking.engine import BookingEngine
from consulting.domain import consulting
from consulting.shared.access import Caller, Role


@consulting.command(part_of="Booking")
class CancelBooking:
    booking_id = Identifier(required=True)
    client_id = Identifier(required=True)
    reason = String(max_length=200)


@consulting.command_handler(part_of=Booking)
class CancelBookingHandler:
    @handle(CancelBooking)
    def cancel_booking(self, command):
        caller = Caller(id=str(command.client_id), role=Role.CLIENT)
        BookingEngine.for_domain(current_domain).cancel(command.booking_id, caller, reason=command.reason)
