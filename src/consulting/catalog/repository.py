"""Repository for the Service catalogue."""

from consulting.catalog.service import Service
from consulting.domain import consulting


@consulting.repository(part_of=Service)
class ServiceRepository:
    def listing(self, category=None) -> list[Service]:
        query = self._dao.query
        if category:
            query = query.filter(category=category)
        return query.order_by("title").limit(None).all().items

    def everything(self) -> list[Service]:
        return self._dao.query.limit(None).all().items
