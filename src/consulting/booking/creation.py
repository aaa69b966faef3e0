"""CreateBooking — a client requests a slot with a consultant."""

from protean.fields import Date, Float, Identifier, Integer, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from consulting.booking.booking import Booking
from consulting.booking.engine import BookingEngine
from consulting.domain import consulting


@consulting.command(part_of="Booking")
class CreateBooking:
    client_id = Identifier(required=True)
    consultant_id = Identifier(required=True)
    category_id = Identifier(required=True)
    date = Date(required=True)
    start_time = String(required=True, max_length=5)
    duration = Integer(required=True)
    total_amount = Float(min_value=0.0)
    meeting_type = String(max_length=20)
    client_notes = String(max_length=500)
    location = String(max_length=200)


@consulting.command_handler(part_of=Booking)
class CreateBookingHandler:
    @handle(CreateBooking)
    def create_booking(self, command):
        booking = BookingEngine.for_domain(current_domain).create(
            client_id=command.client_id,
            consultant_id=command.consultant_id,
            category_id=command.category_id,
            on_date=command.date,
            start_time=command.start_time,
            duration=command.duration,
            total_amount=command.total_amount,
            meeting_type=command.meeting_type,
            client_notes=command.client_notes,
            location=command.location,
        )
        return str(booking.id)
