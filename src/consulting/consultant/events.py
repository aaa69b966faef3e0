"""Domain events for the Consultant aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, Text

from consulting.domain import consulting


@consulting.event(part_of="Consultant")
class ConsultantRegistered:
    """A consultant-role user published their profile."""

    __version__ = 1

    consultant_id = Identifier(required=True)
    user_id = Identifier(required=True)
    category_ids = Text(required=True)  # JSON array
    hourly_rate = Float(required=True)
    registered_at = DateTime(required=True)


@consulting.event(part_of="Consultant")
class ConsultantProfileUpdated:
    __version__ = 1

    consultant_id = Identifier(required=True)
    changed_fields = Text()  # JSON array of field names
    category_ids = Text()
    is_active = Boolean()
    updated_at = DateTime(required=True)


@consulting.event(part_of="Consultant")
class ConsultantVerificationChanged:
    """An admin verified or un-verified a consultant."""

    __version__ = 1

    consultant_id = Identifier(required=True)
    is_verified = Boolean(required=True)
    changed_at = DateTime(required=True)


@consulting.event(part_of="Consultant")
class ConsultantRatingRecalculated:
    """The consultant's rating summary was recomputed from rated bookings."""

    __version__ = 1

    consultant_id = Identifier(required=True)
    average = Float(required=True)
    count = Integer(required=True)
    recalculated_at = DateTime(required=True)
