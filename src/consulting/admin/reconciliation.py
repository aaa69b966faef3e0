"""ReconcileCounters — re-derive every denormalized counter from source records.

Counter cascades run inside each command's unit of work, but records changed
out of band (deleted bookings, imported consultants) can still leave them
stale. This command recounts:

* ``Category.consultant_count`` from active consultants referencing the category
* ``Category.booking_count`` from bookings in the category
* ``Consultant.total_bookings`` / ``completed_bookings`` from the consultant's bookings
* ``Consultant.rating`` from the consultant's rated bookings

Only records whose stored values differ are written.
"""

from collections import Counter, defaultdict

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from consulting.booking.booking import Booking, BookingStatus
from consulting.category.category import Category
from consulting.consultant.consultant import Consultant
from consulting.domain import consulting
from consulting.rating.aggregator import scores_of, summarize

logger = structlog.get_logger(__name__)


@consulting.command(part_of="Category")
class ReconcileCounters:
    requested_by = Identifier()


@consulting.command_handler(part_of=Category)
class ReconcileCountersHandler:
    @handle(ReconcileCounters)
    def reconcile(self, _command):
        category_repo = current_domain.repository_for(Category)
        consultant_repo = current_domain.repository_for(Consultant)
        bookings = current_domain.repository_for(Booking).everything()
        consultants = consultant_repo.everything()

        consultants_per_category = Counter()
        for consultant in consultants:
            consultants_per_category.update(consultant.counted_categories)
        bookings_per_category = Counter(str(booking.category_id) for booking in bookings)

        bookings_per_consultant = defaultdict(list)
        for booking in bookings:
            bookings_per_consultant[str(booking.consultant_id)].append(booking)

        categories_fixed = 0
        for category in category_repo.everything():
            key = str(category.id)
            expected = (consultants_per_category[key], bookings_per_category[key])
            if (category.consultant_count, category.booking_count) != expected:
                category.restate_counters(*expected)
                category_repo.add(category)
                categories_fixed += 1

        consultants_fixed = 0
        for consultant in consultants:
            own = bookings_per_consultant[str(consultant.id)]
            completed = sum(1 for b in own if b.status == BookingStatus.COMPLETED.value)
            summary = summarize(scores_of(own))

            dirty = False
            if (consultant.total_bookings, consultant.completed_bookings) != (len(own), completed):
                consultant.restate_counters(len(own), completed)
                dirty = True
            current = consultant.rating
            if current is None or (current.average, current.count) != (summary.average, summary.count):
                consultant.apply_rating(average=summary.average, count=summary.count)
                dirty = True
            if dirty:
                consultant_repo.add(consultant)
                consultants_fixed += 1

        logger.info(
            "Counters reconciled",
            categories_fixed=categories_fixed,
            consultants_fixed=consultants_fixed,
        )
        return {"categories": categories_fixed, "consultants": consultants_fixed}
