"""Domain events for the Booking aggregate."""

from protean.fields import Date, DateTime, Float, Identifier, Integer, String

from consulting.domain import consulting


@consulting.event(part_of="Booking")
class BookingCreated:
    """A client requested a slot with a consultant."""

    __version__ = 1

    booking_id = Identifier(required=True)
    client_id = Identifier(required=True)
    consultant_id = Identifier(required=True)
    category_id = Identifier(required=True)
    date = Date(required=True)
    start_time = String(required=True)
    end_time = String(required=True)
    duration = Integer(required=True)
    total_amount = Float(required=True)
    created_at = DateTime(required=True)


@consulting.event(part_of="Booking")
class BookingConfirmed:
    __version__ = 1

    booking_id = Identifier(required=True)
    consultant_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@consulting.event(part_of="Booking")
class BookingCompleted:
    __version__ = 1

    booking_id = Identifier(required=True)
    consultant_id = Identifier(required=True)
    client_id = Identifier(required=True)
    completed_at = DateTime(required=True)


@consulting.event(part_of="Booking")
class BookingCancelled:
    """The booking released its slot. ``cancelled_by`` names the acting role."""

    __version__ = 1

    booking_id = Identifier(required=True)
    consultant_id = Identifier(required=True)
    cancelled_by = String(required=True)
    reason = String()
    cancelled_at = DateTime(required=True)


@consulting.event(part_of="Booking")
class BookingMarkedNoShow:
    __version__ = 1

    booking_id = Identifier(required=True)
    consultant_id = Identifier(required=True)
    marked_at = DateTime(required=True)


@consulting.event(part_of="Booking")
class BookingRated:
    __version__ = 1

    booking_id = Identifier(required=True)
    consultant_id = Identifier(required=True)
    client_id = Identifier(required=True)
    score = Integer(required=True)
    rated_at = DateTime(required=True)
