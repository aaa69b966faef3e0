"""CategoryRegistry — the only writer of Category counters.

The Consultant and Booking write paths call it explicitly, inside their own
unit of work, so the counter changes commit together with the change that
caused them.
"""

import structlog
from protean.exceptions import ObjectNotFoundError

from consulting.category.category import Category

logger = structlog.get_logger(__name__)


class CategoryRegistry:
    def __init__(self, repository):
        self._repo = repository

    @classmethod
    def for_domain(cls, domain):
        return cls(domain.repository_for(Category))

    def get(self, category_id) -> Category:
        return self._repo.get(str(category_id))

    def ensure_exist(self, category_ids):
        """Raise ObjectNotFoundError naming the first unknown category."""
        wanted = [str(category_id) for category_id in category_ids]
        found = {str(category.id) for category in self._repo.find_many(wanted)}
        missing = [category_id for category_id in wanted if category_id not in found]
        if missing:
            raise ObjectNotFoundError({"categories": [f"Category {missing[0]} not found"]})

    def apply_category_delta(self, old_ids, new_ids):
        """Move consultant counts from ``old_ids`` to ``new_ids``.

        Categories present in both sets are left alone. Returns the pair
        ``(removed, added)`` of category id sets that were adjusted.
        """
        old = {str(category_id) for category_id in old_ids or []}
        new = {str(category_id) for category_id in new_ids or []}
        removed = old - new
        added = new - old
        if not removed and not added:
            return removed, added

        categories = {str(c.id): c for c in self._repo.find_many(removed | added)}
        for category_id in removed:
            category = categories.get(category_id)
            if category is None:
                # Deleted categories have nothing left to decrement
                continue
            category.adjust_consultant_count(-1)
            self._repo.add(category)
        for category_id in added:
            category = categories.get(category_id)
            if category is None:
                raise ObjectNotFoundError({"categories": [f"Category {category_id} not found"]})
            category.adjust_consultant_count(1)
            self._repo.add(category)

        logger.info(
            "Category consultant counts adjusted",
            removed=sorted(removed),
            added=sorted(added),
        )
        return removed, added

    def record_booking(self, category_id):
        category = self.get(category_id)
        category.record_booking()
        self._repo.add(category)
        return category
