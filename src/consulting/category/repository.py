"""Repository for the Category aggregate."""

from consulting.category.category import Category, normalize_name
from consulting.domain import consulting

SORTABLE_FIELDS = {
    "name": "name",
    "sortOrder": "sort_order",
    "consultantCount": "consultant_count",
}


@consulting.repository(part_of=Category)
class CategoryRepository:
    def find_by_name(self, name) -> Category | None:
        """Case-insensitive lookup; stored names are already normalized."""
        return self._dao.query.filter(name=normalize_name(name)).all().first

    def find_many(self, category_ids) -> list[Category]:
        wanted = {str(category_id) for category_id in category_ids}
        if not wanted:
            return []
        return self._dao.query.filter(id__in=list(wanted)).limit(None).all().items

    def listing(self, active=None, sort="sortOrder", order="asc") -> list[Category]:
        query = self._dao.query
        if active is not None:
            query = query.filter(is_active=active)

        field = SORTABLE_FIELDS.get(sort, "sort_order")
        prefix = "-" if order == "desc" else ""
        return query.order_by(f"{prefix}{field}").limit(None).all().items

    def everything(self) -> list[Category]:
        return self._dao.query.limit(None).all().items
