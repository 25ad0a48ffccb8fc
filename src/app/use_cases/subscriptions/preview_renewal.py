"""PreviewRenewal Use Case

Shows what the next renewal would charge. Records nothing.
"""

from libs.result import Result, Return, Error
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.errors import DomainError, InvalidStateError
from src.domain.subscription import SubscriptionStatus
from .calculate_price import CalculatePrice
from .dtos import SubscriptionQueryDTO, RenewalPreviewDTO
from .mappers import load_owned_subscription


class PreviewRenewal:
    """
    Preview Renewal Use Case

    - Only active subscriptions renew
    - auto_renew off: will_renew is False and no price is computed
    - Otherwise the current tier and cycle are re-priced without a promo code
    """

    def __init__(self, subscription_repo: SubscriptionRepository, price_calculator: CalculatePrice):
        self.subscription_repo = subscription_repo
        self.price_calculator = price_calculator

    async def execute(self, query: SubscriptionQueryDTO) -> Result[RenewalPreviewDTO]:
        try:
            subscription = await load_owned_subscription(
                self.subscription_repo, query.subscription_id, query.user_id
            )

            if subscription.status != SubscriptionStatus.ACTIVE:
                raise InvalidStateError("INVALID_SUBSCRIPTION_STATUS", "Subscription is not active")

            if not subscription.auto_renew:
                return Return.ok(
                    RenewalPreviewDTO(will_renew=False, message="Auto-renewal is disabled")
                )

            pricing = await self.price_calculator.calculate(
                subscription.tier_id, subscription.billing_cycle_id
            )

            return Return.ok(
                RenewalPreviewDTO(
                    will_renew=True,
                    renewal_date=subscription.next_billing_date,
                    tier_name=pricing.tier_name,
                    billing_cycle=pricing.billing_cycle_name,
                    amount_to_charge=pricing.total_amount,
                    pricing_breakdown=pricing,
                )
            )
        except DomainError as e:
            return Return.err(e.to_error())
        except Exception as e:
            return Return.err(
                Error(
                    code="PREVIEW_RENEWAL_FAILED",
                    message="Failed to preview renewal",
                    reason=str(e),
                )
            )
