"""VerifyConsultant — admin marks a consultant as verified (or not)."""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain

from consulting.consultant.consultant import Consultant
from consulting.domain import consulting

logger = structlog.get_logger(__name__)


@consulting.command(part_of="Consultant")
class VerifyConsultant:
    consultant_id = Identifier(required=True)
    is_verified = Boolean(required=True)


@consulting.command_handler(part_of=Consultant)
class VerifyConsultantHandler:
    @handle(VerifyConsultant)
    def verify(self, command):
        repo = current_domain.repository_for(Consultant)
        consultant = repo.get(command.consultant_id)
        consultant.set_verified(command.is_verified)
        repo.add(consultant)

        logger.info(
            "Consultant verification changed",
            consultant_id=str(consultant.id),
            is_verified=consultant.is_verified,
        )
        return str(consultant.id)
