"""Category aggregate — the consulting taxonomy.

Categories group consultants and bookings. Their ``consultant_count`` and
``booking_count`` fields are denormalized counters: the Consultant and
Booking write paths adjust them through ``CategoryRegistry``; API callers
never set them.
"""

import re
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import InvalidOperationError, ValidationError
from protean.fields import Boolean, DateTime, Integer, String

from consulting.category.events import CategoryCreated, CategoryDeleted, CategoryUpdated
from consulting.domain import consulting

DEFAULT_COLOR = "#4B8843"

HEX_COLOR = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")

_UNSET = object()


def normalize_name(name):
    """Collapse whitespace and title-case every word: "data  science" -> "Data Science"."""
    return " ".join(word.capitalize() for word in (name or "").split())


@consulting.aggregate
class Category:
    name = String(required=True, min_length=2, max_length=100)
    description = String(required=True, max_length=500)
    icon = String(required=True, max_length=100)
    color = String(max_length=7, default=DEFAULT_COLOR)
    is_active = Boolean(default=True)
    sort_order = Integer(default=0, min_value=0)
    consultant_count = Integer(default=0, min_value=0)
    booking_count = Integer(default=0, min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def color_must_be_hex(self):
        if self.color and not HEX_COLOR.match(self.color):
            raise ValidationError({"color": ["Please enter a valid hex color"]})

    @invariant.post
    def description_minimum_length(self):
        if self.description is not None and len(self.description.strip()) < 10:
            raise ValidationError({"description": ["Description must be between 10 and 500 characters"]})

    @classmethod
    def create(cls, name, description, icon, color=None, sort_order=0):
        now = datetime.now(UTC)
        category = cls(
            name=normalize_name(name),
            description=description.strip() if description else description,
            icon=icon.strip() if icon else icon,
            color=color or DEFAULT_COLOR,
            sort_order=sort_order or 0,
            is_active=True,
            consultant_count=0,
            booking_count=0,
            created_at=now,
            updated_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=str(category.id),
                name=category.name,
                sort_order=category.sort_order,
                created_at=now,
            )
        )
        return category

    def update_details(
        self,
        name=_UNSET,
        description=_UNSET,
        icon=_UNSET,
        color=_UNSET,
        sort_order=_UNSET,
        is_active=_UNSET,
    ):
        """Patch the descriptive fields. Counters are not part of the patch."""
        if name is not _UNSET:
            self.name = normalize_name(name)
        if description is not _UNSET:
            self.description = description.strip() if description else description
        if icon is not _UNSET:
            self.icon = icon.strip() if icon else icon
        if color is not _UNSET:
            self.color = color
        if sort_order is not _UNSET:
            self.sort_order = sort_order
        if is_active is not _UNSET:
            self.is_active = is_active

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CategoryUpdated(
                category_id=str(self.id),
                name=self.name,
                is_active=self.is_active,
                sort_order=self.sort_order,
                updated_at=now,
            )
        )

    def adjust_consultant_count(self, delta):
        # Counters bottom out at zero; a stale decrement is absorbed here and
        # corrected by reconciliation.
        self.consultant_count = max(0, (self.consultant_count or 0) + delta)

    def record_booking(self):
        self.booking_count = (self.booking_count or 0) + 1

    def restate_counters(self, consultant_count, booking_count):
        """Overwrite both counters with values re-derived from source records."""
        self.consultant_count = consultant_count
        self.booking_count = booking_count

    def prepare_for_deletion(self, referencing_consultants=0):
        """Refuse deletion while any consultant still lists the category.

        ``consultant_count`` covers active consultants only; inactive profiles
        that reference the category arrive as ``referencing_consultants``.
        """
        if self.consultant_count > 0:
            raise InvalidOperationError({"category": ["Cannot delete category with active consultants"]})
        if referencing_consultants > 0:
            raise InvalidOperationError({"category": ["Cannot delete category referenced by consultant profiles"]})

        self.raise_(
            CategoryDeleted(
                category_id=str(self.id),
                name=self.name,
                deleted_at=datetime.now(UTC),
            )
        )
