"""Category management — admin commands and their handler."""

import structlog
from protean import handle
from protean.exceptions import InvalidOperationError
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain

from consulting.category.category import Category
from consulting.consultant.consultant import Consultant
from consulting.domain import consulting

logger = structlog.get_logger(__name__)


@consulting.command(part_of="Category")
class CreateCategory:
    name = String(required=True, max_length=100)
    description = String(required=True, max_length=500)
    icon = String(required=True, max_length=100)
    color = String(max_length=7)
    sort_order = Integer(min_value=0)


@consulting.command(part_of="Category")
class UpdateCategory:
    category_id = Identifier(required=True)
    name = String(max_length=100)
    description = String(max_length=500)
    icon = String(max_length=100)
    color = String(max_length=7)
    sort_order = Integer(min_value=0)
    is_active = Boolean()


@consulting.command(part_of="Category")
class DeleteCategory:
    category_id = Identifier(required=True)


def _duplicate_name():
    return InvalidOperationError({"name": ["Category with this name already exists"]})


@consulting.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)
        if repo.find_by_name(command.name) is not None:
            raise _duplicate_name()

        category = Category.create(
            name=command.name,
            description=command.description,
            icon=command.icon,
            color=command.color,
            sort_order=command.sort_order,
        )
        repo.add(category)
        logger.info("Category created", category_id=str(category.id), name=category.name)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if command.name is not None:
            existing = repo.find_by_name(command.name)
            if existing is not None and str(existing.id) != str(category.id):
                raise _duplicate_name()

        changes = {
            field: getattr(command, field)
            for field in ("name", "description", "icon", "color", "sort_order", "is_active")
            if getattr(command, field) is not None
        }
        category.update_details(**changes)
        repo.add(category)
        return str(category.id)

    @handle(DeleteCategory)
    def delete_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)
        referencing = current_domain.repository_for(Consultant).referencing(category.id)
        category.prepare_for_deletion(referencing_consultants=len(referencing))
        repo._dao.delete(category)
        logger.info("Category deleted", category_id=str(category.id), name=category.name)
