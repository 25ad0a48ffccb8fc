"""DowngradeSubscription Use Case

Records a downgrade to take effect at the next billing date.
"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.catalog_repository import CatalogRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.subscription_history_repository import SubscriptionHistoryRepository
from src.domain.errors import (
    DomainError,
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
)
from src.domain.subscription import SubscriptionStatus
from src.domain.subscription_history import SubscriptionHistory, HistoryAction
from .calculate_price import CalculatePrice
from .dtos import ChangeTierCommandDTO, DowngradeSubscriptionResponseDTO
from .mappers import load_owned_subscription

SCHEDULED_NOTE = "Scheduled for next billing cycle"


class DowngradeSubscription:
    """
    Use Case: Schedule a downgrade

    Business Rules:
    1. Only active subscriptions can be downgraded
    2. The new tier's rank must be strictly lower than the current one
    3. The subscription row is not modified; a 'downgraded' history row
       with effective_date = next_billing_date records the intent
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        catalog_repo: CatalogRepository,
        history_repo: SubscriptionHistoryRepository,
        price_calculator: CalculatePrice,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.catalog_repo = catalog_repo
        self.history_repo = history_repo
        self.price_calculator = price_calculator

    async def execute(
        self, command: ChangeTierCommandDTO
    ) -> Result[DowngradeSubscriptionResponseDTO]:
        try:
            subscription = await load_owned_subscription(
                self.subscription_repo, command.subscription_id, command.user_id, for_update=True
            )

            if subscription.status != SubscriptionStatus.ACTIVE:
                raise InvalidStateError(
                    "INVALID_SUBSCRIPTION_STATUS", "Can only downgrade active subscriptions"
                )

            current_tier = await self.catalog_repo.get_tier(subscription.tier_id, active_only=False)
            new_tier = await self.catalog_repo.get_tier(command.new_tier_id)
            if not new_tier or not current_tier:
                raise NotFoundError("INVALID_TIER", "Invalid tier")

            if new_tier.rank >= current_tier.rank:
                raise InvalidTransitionError(
                    "INVALID_DOWNGRADE", "New tier must be lower than current tier"
                )

            billing_cycle_id = command.new_billing_cycle_id or subscription.billing_cycle_id
            pricing = await self.price_calculator.calculate(new_tier.id, billing_cycle_id)

            # TODO: apply the scheduled change once a renewal processor rolls periods over
            await self.history_repo.append(
                SubscriptionHistory(
                    subscription_id=subscription.id,
                    action=HistoryAction.DOWNGRADED,
                    old_tier_id=subscription.tier_id,
                    new_tier_id=new_tier.id,
                    old_billing_cycle_id=subscription.billing_cycle_id,
                    new_billing_cycle_id=billing_cycle_id,
                    old_price=subscription.final_price,
                    new_price=pricing.final_price,
                    price_difference=pricing.final_price - subscription.final_price,
                    performed_by=command.user_id,
                    effective_date=subscription.next_billing_date,
                    notes=SCHEDULED_NOTE,
                )
            )

            response = DowngradeSubscriptionResponseDTO(
                subscription_id=subscription.id,
                effective_date=subscription.next_billing_date,
                new_price=pricing.final_price,
                message="Downgrade scheduled for next billing cycle",
            )

            await self.uow.commit()
            return Return.ok(response)

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DOWNGRADE_SUBSCRIPTION_FAILED",
                    message="Failed to downgrade subscription",
                    reason=str(e),
                )
            )
