"""Get Subscription Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.catalog_repository import CatalogRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.entitlement_repository import EntitlementRepository
from src.domain.errors import DomainError
from .dtos import SubscriptionQueryDTO, SubscriptionDetailDTO
from .mappers import load_owned_subscription, to_entitlement_dto, to_subscription_dto


class GetSubscription:
    """
    Get Subscription Use Case

    Read-only lookup of a subscription owned by the caller, with the
    tier and billing cycle names and current entitlements.

    Errors:
        SUBSCRIPTION_NOT_FOUND: absent or owned by another user
    """

    def __init__(
        self,
        subscription_repo: SubscriptionRepository,
        catalog_repo: CatalogRepository,
        entitlement_repo: EntitlementRepository,
    ):
        self.subscription_repo = subscription_repo
        self.catalog_repo = catalog_repo
        self.entitlement_repo = entitlement_repo

    async def execute(self, query: SubscriptionQueryDTO) -> Result[SubscriptionDetailDTO]:
        try:
            subscription = await load_owned_subscription(
                self.subscription_repo, query.subscription_id, query.user_id
            )
            tier = await self.catalog_repo.get_tier(subscription.tier_id, active_only=False)
            cycle = await self.catalog_repo.get_billing_cycle(subscription.billing_cycle_id)
            entitlements = await self.entitlement_repo.list_by_subscription(subscription.id)

            return Return.ok(
                SubscriptionDetailDTO(
                    subscription=to_subscription_dto(subscription),
                    tier_name=tier.tier_name if tier else None,
                    billing_cycle_name=cycle.cycle_name if cycle else None,
                    entitlements=[to_entitlement_dto(e) for e in entitlements],
                )
            )
        except DomainError as e:
            return Return.err(e.to_error())
        except Exception as e:
            return Return.err(
                Error(
                    code="GET_SUBSCRIPTION_FAILED",
                    message="Failed to get subscription",
                    reason=str(e),
                )
            )
