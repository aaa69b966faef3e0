"""Tests for the Service catalogue entry."""

import pytest
from consulting.catalog.service import Service
from protean.exceptions import ValidationError


def test_publish_stamps_timestamps():
    service = Service.publish(title="  Growth Planning ", duration="120 min", price=250, rating=4.9)
    assert service.title == "Growth Planning"
    assert service.created_at is not None
    assert service.created_at == service.updated_at


def test_title_is_required():
    with pytest.raises(ValidationError) as exc:
        Service.publish(title=None)
    assert "title" in exc.value.messages


def test_rating_above_five_is_rejected():
    with pytest.raises(ValidationError) as exc:
        Service.publish(title="Growth Planning", rating=5.5)
    assert "rating" in exc.value.messages
