import json
from datetime import date, timedelta

import pytest
from protean.integrations.pytest import DomainFixture
from protean.utils.globals import current_domain

BIO = (
    "Strategy consultant with a decade of experience helping startups "
    "shape their go-to-market plans and pricing."
)


@pytest.fixture(scope="session")
def consulting_bed():
    from consulting.domain import consulting

    bed = DomainFixture(consulting)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(consulting_bed):
    with consulting_bed.domain_context():
        yield

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def next_week():
    return date.today() + timedelta(days=7)


@pytest.fixture()
def make_category():
    from consulting.category.management import CreateCategory

    def _make(name="Business Strategy", **overrides):
        values = {
            "name": name,
            "description": f"Advice on {name.lower()} for growing companies.",
            "icon": "briefcase",
        }
        values.update(overrides)
        return current_domain.process(CreateCategory(**values), asynchronous=False)

    return _make


@pytest.fixture()
def make_consultant():
    from consulting.consultant.profile import CreateConsultantProfile

    def _make(user_id, category_ids, hourly_rate=100.0, **overrides):
        values = {
            "user_id": user_id,
            "category_ids": json.dumps(list(category_ids)),
            "bio": BIO,
            "experience": 8,
            "hourly_rate": hourly_rate,
        }
        values.update(overrides)
        return current_domain.process(CreateConsultantProfile(**values), asynchronous=False)

    return _make


@pytest.fixture()
def make_booking(next_week):
    from consulting.booking.creation import CreateBooking

    def _make(client_id, consultant_id, category_id, start_time="09:00", duration=60, on_date=None, **overrides):
        values = {
            "client_id": client_id,
            "consultant_id": consultant_id,
            "category_id": category_id,
            "date": on_date or next_week,
            "start_time": start_time,
            "duration": duration,
        }
        values.update(overrides)
        return current_domain.process(CreateBooking(**values), asynchronous=False)

    return _make


@pytest.fixture()
def change_status():
    from consulting.booking.status import ChangeBookingStatus

    def _change(booking_id, status, actor_id, actor_role="consultant", notes=None):
        command = ChangeBookingStatus(
            booking_id=booking_id,
            status=status,
            actor_id=actor_id,
            actor_role=actor_role,
            consultant_notes=notes,
        )
        return current_domain.process(command, asynchronous=False)

    return _change
