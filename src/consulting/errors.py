"""Domain errors that Protean does not already provide.

Validation failures use ``protean.exceptions.ValidationError``, missing
records ``ObjectNotFoundError`` and business conflicts (duplicate names,
double-booking, repeated ratings) ``InvalidOperationError``.
"""

from protean.exceptions import ProteanExceptionWithMessage


class AccessDenied(ProteanExceptionWithMessage):
    """The caller is authenticated but may not act on this record."""


class InvalidBookingState(ProteanExceptionWithMessage):
    """The booking's current status does not allow the requested change."""
