"""ResumeSubscription Use Case"""

from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.subscription_history_repository import SubscriptionHistoryRepository
from src.domain.errors import DomainError, InvalidStateError
from src.domain.subscription import SubscriptionStatus
from src.domain.subscription_history import SubscriptionHistory, HistoryAction
from .dtos import SubscriptionQueryDTO, SubscriptionDTO
from .mappers import load_owned_subscription, to_subscription_dto


class ResumeSubscription:
    """Use Case: Resume a paused subscription and clear its pause fields"""

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        history_repo: SubscriptionHistoryRepository,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.history_repo = history_repo

    async def execute(self, command: SubscriptionQueryDTO) -> Result[SubscriptionDTO]:
        try:
            subscription = await load_owned_subscription(
                self.subscription_repo, command.subscription_id, command.user_id, for_update=True
            )

            if subscription.status != SubscriptionStatus.PAUSED:
                raise InvalidStateError(
                    "INVALID_SUBSCRIPTION_STATUS", "Can only resume paused subscriptions"
                )

            subscription.status = SubscriptionStatus.ACTIVE
            subscription.pause_reason = None
            subscription.paused_at = None
            subscription.resume_date = None
            subscription = await self.subscription_repo.update(subscription)

            await self.history_repo.append(
                SubscriptionHistory(
                    subscription_id=subscription.id,
                    action=HistoryAction.RESUMED,
                    performed_by=command.user_id,
                    effective_date=datetime.utcnow(),
                )
            )

            response = to_subscription_dto(subscription)
            await self.uow.commit()
            return Return.ok(response)

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="RESUME_SUBSCRIPTION_FAILED",
                    message="Failed to resume subscription",
                    reason=str(e),
                )
            )
