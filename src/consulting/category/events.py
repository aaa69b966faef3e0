"""Domain events for the Category aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from consulting.domain import consulting


@consulting.event(part_of="Category")
class CategoryCreated:
    """A consulting category was added to the catalog."""

    __version__ = 1

    category_id = Identifier(required=True)
    name = String(required=True)
    sort_order = Integer()
    created_at = DateTime(required=True)


@consulting.event(part_of="Category")
class CategoryUpdated:
    """A category's descriptive fields or visibility changed."""

    __version__ = 1

    category_id = Identifier(required=True)
    name = String(required=True)
    is_active = Boolean()
    sort_order = Integer()
    updated_at = DateTime(required=True)


@consulting.event(part_of="Category")
class CategoryDeleted:
    """A category with no consultants was removed from the catalog."""

    __version__ = 1

    category_id = Identifier(required=True)
    name = String(required=True)
    deleted_at = DateTime(required=True)
