"""Repository for the Consultant aggregate."""

from consulting.consultant.consultant import Consultant
from consulting.domain import consulting


@consulting.repository(part_of=Consultant)
class ConsultantRepository:
    def find_by_user(self, user_id) -> Consultant | None:
        return self._dao.query.filter(user_id=str(user_id)).all().first

    def search(self, active=True, verified=None, min_rate=None, max_rate=None) -> list[Consultant]:
        """Consultants matching the scalar filters, unordered.

        Category membership lives in a JSON column, so callers filter on it
        in memory.
        """
        filters = {}
        if active is not None:
            filters["is_active"] = active
        if verified is not None:
            filters["is_verified"] = verified
        if min_rate is not None:
            filters["hourly_rate__gte"] = float(min_rate)
        if max_rate is not None:
            filters["hourly_rate__lte"] = float(max_rate)
        return self._dao.query.filter(**filters).limit(None).all().items

    def referencing(self, category_id) -> list[Consultant]:
        """Every consultant listing the category, active or not."""
        return [c for c in self.everything() if str(category_id) in c.categories]

    def everything(self) -> list[Consultant]:
        return self._dao.query.limit(None).all().items
