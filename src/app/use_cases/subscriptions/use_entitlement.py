"""UseEntitlement Use Case

Consumes quota when a service is booked.
"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.entitlement_repository import EntitlementRepository
from src.domain.errors import DomainError, LimitExceededError, NotFoundError
from .dtos import EntitlementCommandDTO, EntitlementDTO
from .mappers import to_entitlement_dto

logger = logging.getLogger(__name__)


class UseEntitlement:
    """
    Use Case: Consume entitlement quota

    Business Rules:
    1. The category must be included (SERVICE_NOT_INCLUDED)
    2. Unlimited entitlements only track quota_used
    3. Bounded entitlements are decremented by one guarded UPDATE
       (quota_remaining >= quantity); losing the check is QUOTA_EXCEEDED
       and leaves the row unchanged
    4. quota_used + quota_remaining == quota_total always holds

    Flow:
    1. Lock entitlement row (SELECT FOR UPDATE)
    2. Guarded UPDATE computed by the database
    3. Re-read the row
    4. Commit
    """

    def __init__(self, uow: UnitOfWork, entitlement_repo: EntitlementRepository):
        self.uow = uow
        self.entitlement_repo = entitlement_repo

    async def execute(self, command: EntitlementCommandDTO) -> Result[EntitlementDTO]:
        try:
            # Step 1: Lock the entitlement row
            entitlement = await self.entitlement_repo.get(
                command.subscription_id, command.category_id, for_update=True
            )
            if not entitlement:
                raise NotFoundError("SERVICE_NOT_INCLUDED", "Service not included in subscription")

            # Step 2: Guarded decrement
            consumed = await self.entitlement_repo.consume(
                entitlement.id,
                command.quantity,
                used_at=datetime.utcnow(),
                bounded=not entitlement.is_unlimited,
            )
            if not consumed:
                raise LimitExceededError("QUOTA_EXCEEDED", "Insufficient quota remaining")

            # Step 3: Re-read the updated row
            updated = await self.entitlement_repo.get(command.subscription_id, command.category_id)
            response = to_entitlement_dto(updated)

            # Step 4: Commit
            await self.uow.commit()

            logger.info(
                f"Used {command.quantity} of category {command.category_id} "
                f"on subscription {command.subscription_id}"
            )
            return Return.ok(response)

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="USE_ENTITLEMENT_FAILED",
                    message="Failed to use entitlement",
                    reason=str(e),
                )
            )
