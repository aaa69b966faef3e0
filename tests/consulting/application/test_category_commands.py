"""Application tests for category management commands."""

import pytest
from consulting.category.category import Category
from consulting.category.management import DeleteCategory, UpdateCategory
from consulting.consultant.profile import UpdateConsultantProfile
from protean import current_domain
from protean.exceptions import InvalidOperationError, ObjectNotFoundError


class TestCreateCategory:
    def test_create_persists_normalized_name(self, make_category):
        category_id = make_category(name="data science")
        category = current_domain.repository_for(Category).get(category_id)
        assert category.name == "Data Science"
        assert category.consultant_count == 0

    def test_duplicate_name_is_case_insensitive(self, make_category):
        make_category(name="Data Science")
        with pytest.raises(InvalidOperationError) as exc:
            make_category(name="DATA science")
        assert "name" in exc.value.args[0]


class TestUpdateCategory:
    def test_patch(self, make_category):
        category_id = make_category()
        current_domain.process(
            UpdateCategory(category_id=category_id, icon="chart", is_active=False),
            asynchronous=False,
        )
        category = current_domain.repository_for(Category).get(category_id)
        assert category.icon == "chart"
        assert category.is_active is False
        assert category.name == "Business Strategy"

    def test_rename_to_existing_name_is_rejected(self, make_category):
        make_category(name="Marketing")
        category_id = make_category(name="Finance")
        with pytest.raises(InvalidOperationError):
            current_domain.process(UpdateCategory(category_id=category_id, name="marketing"), asynchronous=False)

    def test_keeping_own_name_is_allowed(self, make_category):
        category_id = make_category(name="Finance")
        current_domain.process(UpdateCategory(category_id=category_id, name="FINANCE"), asynchronous=False)
        assert current_domain.repository_for(Category).get(category_id).name == "Finance"

    def test_unknown_category(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateCategory(category_id="missing", icon="x"), asynchronous=False)


class TestDeleteCategory:
    def test_delete_empty_category(self, make_category):
        category_id = make_category()
        current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Category).get(category_id)

    def test_delete_with_consultants_is_a_conflict(self, make_category, make_consultant):
        category_id = make_category()
        make_consultant("user-del", [category_id])
        with pytest.raises(InvalidOperationError):
            current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
        assert current_domain.repository_for(Category).get(category_id) is not None

    def test_delete_referenced_by_inactive_consultant_is_a_conflict(self, make_category, make_consultant):
        category_id = make_category()
        consultant_id = make_consultant("user-idle", [category_id])
        current_domain.process(
            UpdateConsultantProfile(
                consultant_id=consultant_id,
                actor_id="user-idle",
                actor_role="consultant",
                is_active=False,
            ),
            asynchronous=False,
        )
        assert current_domain.repository_for(Category).get(category_id).consultant_count == 0

        with pytest.raises(InvalidOperationError):
            current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
        assert current_domain.repository_for(Category).get(category_id) is not None
