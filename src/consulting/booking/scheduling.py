"""Double-booking detection."""

from consulting.shared import timeslots


def find_conflict(bookings, on_date, start_time, end_time, exclude=None):
    """First booking that still holds a slot overlapping ``[start_time, end_time)``.

    ``bookings`` should already be narrowed to one consultant. ``exclude`` is a
    booking id to ignore, used when re-checking a booking against its own slot.
    """
    timeslots.to_minutes(start_time, "start_time")
    timeslots.to_minutes(end_time, "end_time")

    for booking in bookings:
        if exclude is not None and str(booking.id) == str(exclude):
            continue
        if booking.overlaps(on_date, start_time, end_time):
            return booking
    return None
