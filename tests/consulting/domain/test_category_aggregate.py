"""Tests for the Category aggregate."""

import pytest
from consulting.category.category import DEFAULT_COLOR, Category, normalize_name
from consulting.category.events import CategoryCreated, CategoryDeleted, CategoryUpdated
from protean.exceptions import InvalidOperationError, ValidationError


def _make_category(**overrides):
    defaults = {
        "name": "business strategy",
        "description": "Advice on growth, pricing and positioning.",
        "icon": "briefcase",
    }
    defaults.update(overrides)
    return Category.create(**defaults)


class TestCreation:
    def test_name_is_title_cased(self):
        category = _make_category(name="  data   SCIENCE ")
        assert category.name == "Data Science"

    def test_defaults(self):
        category = _make_category()
        assert category.color == DEFAULT_COLOR
        assert category.is_active is True
        assert category.sort_order == 0
        assert category.consultant_count == 0
        assert category.booking_count == 0

    def test_raises_created_event(self):
        category = _make_category()
        assert isinstance(category._events[-1], CategoryCreated)
        assert category._events[-1].name == "Business Strategy"

    @pytest.mark.parametrize("color", ["#fff", "#A1B2C3"])
    def test_accepts_hex_colors(self, color):
        assert _make_category(color=color).color == color

    @pytest.mark.parametrize("color", ["red", "#12345", "123456"])
    def test_rejects_non_hex_colors(self, color):
        with pytest.raises(ValidationError) as exc:
            _make_category(color=color)
        assert "color" in exc.value.messages

    def test_short_description_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _make_category(description="Too short")
        assert "description" in exc.value.messages

    def test_single_character_name_is_rejected(self):
        with pytest.raises(ValidationError):
            _make_category(name="x")

    def test_negative_sort_order_is_rejected(self):
        with pytest.raises(ValidationError):
            _make_category(sort_order=-1)


def test_normalize_name():
    assert normalize_name("machine   learning") == "Machine Learning"


class TestUpdate:
    def test_patch_only_touches_given_fields(self):
        category = _make_category()
        category.update_details(icon="chart", sort_order=3)
        assert category.icon == "chart"
        assert category.sort_order == 3
        assert category.name == "Business Strategy"

    def test_rename_normalizes(self):
        category = _make_category()
        category.update_details(name="corporate strategy")
        assert category.name == "Corporate Strategy"

    def test_deactivate(self):
        category = _make_category()
        category._events.clear()
        category.update_details(is_active=False)
        assert category.is_active is False
        assert isinstance(category._events[-1], CategoryUpdated)


class TestCounters:
    def test_consultant_count_never_goes_below_zero(self):
        category = _make_category()
        category.adjust_consultant_count(-1)
        assert category.consultant_count == 0

    def test_consultant_count_moves_both_ways(self):
        category = _make_category()
        category.adjust_consultant_count(1)
        category.adjust_consultant_count(1)
        category.adjust_consultant_count(-1)
        assert category.consultant_count == 1

    def test_record_booking(self):
        category = _make_category()
        category.record_booking()
        assert category.booking_count == 1

    def test_restate_counters(self):
        category = _make_category()
        category.restate_counters(consultant_count=4, booking_count=9)
        assert (category.consultant_count, category.booking_count) == (4, 9)


class TestDeletion:
    def test_blocked_while_consultants_are_counted(self):
        category = _make_category()
        category.adjust_consultant_count(1)
        with pytest.raises(InvalidOperationError):
            category.prepare_for_deletion()

    def test_allowed_when_empty(self):
        category = _make_category()
        category.prepare_for_deletion()
        assert isinstance(category._events[-1], CategoryDeleted)

    def test_blocked_while_inactive_profiles_reference_it(self):
        category = _make_category()
        with pytest.raises(InvalidOperationError) as exc:
            category.prepare_for_deletion(referencing_consultants=1)
        assert "category" in exc.value.args[0]
