"""ReleaseEntitlement Use Case

Gives quota back when a booked service is cancelled.
"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.entitlement_repository import EntitlementRepository
from src.domain.errors import DomainError, NotFoundError, ValidationFailureError
from .dtos import EntitlementCommandDTO, EntitlementDTO
from .mappers import to_entitlement_dto


class ReleaseEntitlement:
    """
    Use Case: Release previously consumed quota

    Inverse of UseEntitlement. The guarded UPDATE only applies while
    quota_used >= quantity, so quota_used never goes negative and the
    quota_used + quota_remaining == quota_total balance is kept.
    """

    def __init__(self, uow: UnitOfWork, entitlement_repo: EntitlementRepository):
        self.uow = uow
        self.entitlement_repo = entitlement_repo

    async def execute(self, command: EntitlementCommandDTO) -> Result[EntitlementDTO]:
        try:
            entitlement = await self.entitlement_repo.get(
                command.subscription_id, command.category_id, for_update=True
            )
            if not entitlement:
                raise NotFoundError("SERVICE_NOT_INCLUDED", "Service not included in subscription")

            released = await self.entitlement_repo.release(
                entitlement.id,
                command.quantity,
                bounded=not entitlement.is_unlimited,
            )
            if not released:
                raise ValidationFailureError(
                    "INVALID_QUOTA_RELEASE",
                    f"Cannot release {command.quantity} units; only {entitlement.quota_used} used",
                )

            updated = await self.entitlement_repo.get(command.subscription_id, command.category_id)
            response = to_entitlement_dto(updated)

            await self.uow.commit()
            return Return.ok(response)

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="RELEASE_ENTITLEMENT_FAILED",
                    message="Failed to release entitlement",
                    reason=str(e),
                )
            )
