"""ChangeBookingStatus — consultant or admin moves a booking through its lifecycle.

Admins reach the same handler through the oversight API; the acting role is
what ends up in ``cancelled_by`` when the target status is ``cancelled``.
"""

from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from consulting.booking.booking import Booking
from consulting.booking.engine import BookingEngine
from consulting.domain import consulting
from consulting.shared.access import Caller, Role


@consulting.command(part_of="Booking")
class ChangeBookingStatus:
    booking_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    consultant_notes = String(max_length=500)


@consulting.command_handler(part_of=Booking)
class ChangeBookingStatusHandler:
    @handle(ChangeBookingStatus)
    def change_status(self, command):
        caller = Caller(id=str(command.actor_id), role=Role(command.actor_role))
        booking = BookingEngine.for_domain(current_domain).transition(
            command.booking_id,
            command.status,
            caller,
            consultant_notes=command.consultant_notes,
        )
        return booking.status
