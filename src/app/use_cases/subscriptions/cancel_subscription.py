"""CancelSubscription Use Case

Cancels a subscription either immediately (with a prorated refund) or at
the end of the current billing period.
"""

import logging
from datetime import datetime
from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.subscription_history_repository import SubscriptionHistoryRepository
from src.domain.errors import DomainError, InvalidStateError
from src.domain.proration import cancellation_refund, period_fraction
from src.domain.subscription import SubscriptionStatus
from src.domain.subscription_history import SubscriptionHistory, HistoryAction
from .dtos import CancelSubscriptionCommandDTO, CancelSubscriptionResponseDTO
from .mappers import load_owned_subscription

logger = logging.getLogger(__name__)

CANCELLABLE_STATUSES = (SubscriptionStatus.ACTIVE, SubscriptionStatus.PAUSED)


class CancelSubscription:
    """
    Use Case: Cancel subscription

    Business Rules:
    1. Only active or paused subscriptions can be cancelled
    2. Immediate: refund = final_price * remaining_days / total_days
       (rounded to 0.01), access ends now
    3. End of period: auto_renew is switched off and access continues
       until current_period_end
    4. Cancellation date, reason and cancelling user are always recorded
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        history_repo: SubscriptionHistoryRepository,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.history_repo = history_repo

    async def execute(
        self, command: CancelSubscriptionCommandDTO
    ) -> Result[CancelSubscriptionResponseDTO]:
        try:
            # Step 1: Lock and validate
            subscription = await load_owned_subscription(
                self.subscription_repo, command.subscription_id, command.user_id, for_update=True
            )

            if subscription.status not in CANCELLABLE_STATUSES:
                raise InvalidStateError(
                    "INVALID_SUBSCRIPTION_STATUS", "Cannot cancel subscription in current status"
                )

            now = datetime.utcnow()
            refund_amount = Decimal("0.00")

            # Step 2: Apply the cancellation
            subscription.status = SubscriptionStatus.CANCELLED
            subscription.cancellation_date = now
            subscription.cancellation_reason = command.reason
            subscription.cancelled_by = command.user_id

            if command.immediate:
                remaining_days, total_days = period_fraction(
                    subscription.current_period_start, subscription.current_period_end, now
                )
                refund_amount = cancellation_refund(
                    subscription.final_price, remaining_days, total_days
                )
                subscription.end_date = now
                access_until = now
                message = (
                    f"Subscription cancelled immediately. "
                    f"Refund of ₹{refund_amount:.2f} will be processed."
                )
            else:
                subscription.auto_renew = False
                access_until = subscription.current_period_end
                message = "Subscription cancelled. Access will continue until end of current period."

            subscription = await self.subscription_repo.update(subscription)

            # Step 3: History
            await self.history_repo.append(
                SubscriptionHistory(
                    subscription_id=subscription.id,
                    action=HistoryAction.CANCELLED,
                    performed_by=command.user_id,
                    reason=command.reason,
                    prorated_amount=refund_amount,
                    effective_date=now,
                )
            )

            # Step 4: Commit
            await self.uow.commit()

            logger.info(
                f"Subscription {subscription.id} cancelled "
                f"({'immediate' if command.immediate else 'end of period'}), refund {refund_amount}"
            )
            return Return.ok(
                CancelSubscriptionResponseDTO(
                    subscription_id=subscription.id,
                    refund_amount=refund_amount,
                    access_until=access_until,
                    message=message,
                )
            )

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CANCEL_SUBSCRIPTION_FAILED",
                    message="Failed to cancel subscription",
                    reason=str(e),
                )
            )
