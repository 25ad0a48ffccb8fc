"""Get Entitlements Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.entitlement_repository import EntitlementRepository
from src.domain.errors import DomainError
from .dtos import GetEntitlementsQueryDTO, EntitlementListDTO
from .mappers import load_owned_subscription, to_entitlement_dto


class GetEntitlements:
    """Lists a subscription's entitlements for its owner (read-only)"""

    def __init__(
        self,
        subscription_repo: SubscriptionRepository,
        entitlement_repo: EntitlementRepository,
    ):
        self.subscription_repo = subscription_repo
        self.entitlement_repo = entitlement_repo

    async def execute(self, query: GetEntitlementsQueryDTO) -> Result[EntitlementListDTO]:
        try:
            subscription = await load_owned_subscription(
                self.subscription_repo, query.subscription_id, query.user_id
            )
            entitlements = await self.entitlement_repo.list_by_subscription(subscription.id)

            return Return.ok(
                EntitlementListDTO(
                    subscription_id=subscription.id,
                    entitlements=[to_entitlement_dto(e) for e in entitlements],
                )
            )
        except DomainError as e:
            return Return.err(e.to_error())
        except Exception as e:
            return Return.err(
                Error(
                    code="GET_ENTITLEMENTS_FAILED",
                    message="Failed to list entitlements",
                    reason=str(e),
                )
            )
