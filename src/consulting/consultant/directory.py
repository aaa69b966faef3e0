"""ConsultantDirectory — profile lookups, listings and booking aggregates.

The Booking Engine pushes booking counts and rating summaries through this
service; the directory stores and serves them but never computes them from
API input.
"""

import structlog
from protean.exceptions import ObjectNotFoundError

from consulting.consultant.consultant import Consultant

logger = structlog.get_logger(__name__)

SORT_KEYS = {
    "rating": lambda consultant: (consultant.rating.average if consultant.rating else 0.0),
    "hourlyRate": lambda consultant: consultant.hourly_rate,
    "experience": lambda consultant: consultant.experience,
    "createdAt": lambda consultant: consultant.created_at,
}


class ConsultantDirectory:
    def __init__(self, repository):
        self._repo = repository

    @classmethod
    def for_domain(cls, domain):
        return cls(domain.repository_for(Consultant))

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def get(self, consultant_id) -> Consultant:
        return self._repo.get(str(consultant_id))

    def find_by_user(self, user_id) -> Consultant | None:
        return self._repo.find_by_user(user_id)

    def profile_of(self, user_id) -> Consultant:
        consultant = self._repo.find_by_user(user_id)
        if consultant is None:
            raise ObjectNotFoundError({"consultant": ["Consultant profile not found"]})
        return consultant

    def listing(
        self,
        category=None,
        active=True,
        verified=None,
        min_rate=None,
        max_rate=None,
        sort="rating",
        order="desc",
        page=1,
        limit=10,
    ):
        """Return ``(consultants, total)`` for one page of the directory."""
        consultants = self._repo.search(active=active, verified=verified, min_rate=min_rate, max_rate=max_rate)
        if category:
            consultants = [c for c in consultants if str(category) in c.categories]

        key = SORT_KEYS.get(sort, SORT_KEYS["rating"])
        consultants = sorted(consultants, key=key, reverse=(order == "desc"))

        start = (page - 1) * limit
        return consultants[start : start + limit], len(consultants)

    def top_rated(self, limit=10, order="desc"):
        consultants, _ = self.listing(sort="rating", order=order, page=1, limit=limit)
        return consultants

    # -------------------------------------------------------------------
    # Aggregates pushed by the Booking Engine
    # -------------------------------------------------------------------
    def record_booking_created(self, consultant):
        consultant.record_booking()
        self._repo.add(consultant)

    def record_booking_completed(self, consultant_id):
        consultant = self.get(consultant_id)
        consultant.record_completion()
        self._repo.add(consultant)
        logger.info(
            "Consultant completion recorded",
            consultant_id=str(consultant.id),
            completed_bookings=consultant.completed_bookings,
        )
        return consultant

    def apply_rating(self, consultant_id, summary):
        consultant = self.get(consultant_id)
        consultant.apply_rating(average=summary.average, count=summary.count)
        self._repo.add(consultant)
        return consultant
