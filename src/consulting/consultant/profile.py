"""Consultant profile commands — publish and maintain a consultant's profile.

Both handlers keep ``Category.consultant_count`` in step with the profile:
only an active consultant counts toward its categories, so activating,
deactivating and changing categories all move counts through the registry
in the same unit of work as the profile write.
"""

import json

import structlog
from protean.exceptions import InvalidOperationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from consulting.category.registry import CategoryRegistry
from consulting.consultant.consultant import Consultant
from consulting.domain import consulting
from consulting.errors import AccessDenied

logger = structlog.get_logger(__name__)

# Optional JSON-encoded list/dict fields shared by both commands
_JSON_FIELDS = (
    "languages",
    "specializations",
    "achievements",
    "availability",
    "qualifications",
    "certifications",
)


@consulting.command(part_of="Consultant")
class CreateConsultantProfile:
    user_id = Identifier(required=True)
    category_ids = Text(required=True)  # JSON array
    bio = String(required=True, max_length=1000)
    experience = Integer(required=True)
    hourly_rate = Float(required=True)
    languages = Text()  # JSON array
    specializations = Text()  # JSON array
    achievements = Text()  # JSON array
    availability = Text()  # JSON object keyed by weekday
    qualifications = Text()  # JSON array of {name, institution, year}
    certifications = Text()  # JSON array of {name, issuing_body, issue_date, expiry_date}


@consulting.command(part_of="Consultant")
class UpdateConsultantProfile:
    consultant_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    category_ids = Text()
    bio = String(max_length=1000)
    experience = Integer()
    hourly_rate = Float()
    languages = Text()
    specializations = Text()
    achievements = Text()
    availability = Text()
    qualifications = Text()
    certifications = Text()
    is_active = Boolean()


def _decoded(command, field):
    raw = getattr(command, field)
    return json.loads(raw) if raw is not None else None


@consulting.command_handler(part_of=Consultant)
class ConsultantProfileHandler:
    @handle(CreateConsultantProfile)
    def create_profile(self, command):
        repo = current_domain.repository_for(Consultant)
        registry = CategoryRegistry.for_domain(current_domain)

        if repo.find_by_user(command.user_id) is not None:
            raise InvalidOperationError({"consultant": ["Consultant profile already exists"]})

        category_ids = json.loads(command.category_ids)
        registry.ensure_exist(category_ids)

        extras = {field: _decoded(command, field) for field in _JSON_FIELDS}
        consultant = Consultant.register(
            user_id=command.user_id,
            category_ids=category_ids,
            bio=command.bio,
            experience=command.experience,
            hourly_rate=command.hourly_rate,
            **extras,
        )

        registry.apply_category_delta(set(), consultant.counted_categories)
        repo.add(consultant)

        logger.info(
            "Consultant profile created",
            consultant_id=str(consultant.id),
            user_id=str(command.user_id),
            categories=consultant.categories,
        )
        return str(consultant.id)

    @handle(UpdateConsultantProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(Consultant)
        registry = CategoryRegistry.for_domain(current_domain)

        consultant = repo.get(command.consultant_id)
        if command.actor_role != "admin" and str(consultant.user_id) != str(command.actor_id):
            raise AccessDenied({"consultant": ["Access denied"]})

        changes = {field: _decoded(command, field) for field in _JSON_FIELDS if getattr(command, field) is not None}
        if command.category_ids is not None:
            changes["category_ids"] = json.loads(command.category_ids)
            registry.ensure_exist(changes["category_ids"])
        for field in ("bio", "experience", "hourly_rate", "is_active"):
            if getattr(command, field) is not None:
                changes[field] = getattr(command, field)

        counted_before = consultant.counted_categories
        changed = consultant.update_profile(**changes)
        registry.apply_category_delta(counted_before, consultant.counted_categories)
        repo.add(consultant)

        logger.info("Consultant profile updated", consultant_id=str(consultant.id), changed=changed)
        return str(consultant.id)
