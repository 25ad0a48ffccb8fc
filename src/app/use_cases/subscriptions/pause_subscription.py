"""PauseSubscription Use Case"""

import math
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.subscription_history_repository import SubscriptionHistoryRepository
from src.domain.errors import (
    DomainError,
    InvalidStateError,
    LimitExceededError,
    ValidationFailureError,
)
from src.domain.proration import DAY
from src.domain.subscription import SubscriptionStatus
from src.domain.subscription_history import SubscriptionHistory, HistoryAction
from .dtos import PauseSubscriptionCommandDTO, SubscriptionDTO
from .mappers import load_owned_subscription, to_naive_utc, to_subscription_dto


class PauseSubscription:
    """
    Use Case: Pause an active subscription

    Business Rules:
    1. Only active subscriptions can be paused
    2. pause_days = ceil((resume_date - now) / 1 day)
    3. 1 <= pause_days <= max_pause_days (default 90)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        history_repo: SubscriptionHistoryRepository,
        max_pause_days: int = 90,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.history_repo = history_repo
        self.max_pause_days = max_pause_days

    async def execute(self, command: PauseSubscriptionCommandDTO) -> Result[SubscriptionDTO]:
        try:
            subscription = await load_owned_subscription(
                self.subscription_repo, command.subscription_id, command.user_id, for_update=True
            )

            if subscription.status != SubscriptionStatus.ACTIVE:
                raise InvalidStateError(
                    "INVALID_SUBSCRIPTION_STATUS", "Can only pause active subscriptions"
                )

            now = datetime.utcnow()
            resume_date = to_naive_utc(command.resume_date)
            pause_days = math.ceil((resume_date - now) / DAY)

            if pause_days < 1:
                raise ValidationFailureError(
                    "INVALID_RESUME_DATE", "Resume date must be in the future"
                )
            if pause_days > self.max_pause_days:
                raise LimitExceededError(
                    "MAX_PAUSE_EXCEEDED",
                    f"Cannot pause for more than {self.max_pause_days} days",
                )

            subscription.status = SubscriptionStatus.PAUSED
            subscription.pause_reason = command.reason
            subscription.paused_at = now
            subscription.resume_date = resume_date
            subscription = await self.subscription_repo.update(subscription)

            await self.history_repo.append(
                SubscriptionHistory(
                    subscription_id=subscription.id,
                    action=HistoryAction.PAUSED,
                    performed_by=command.user_id,
                    reason=command.reason,
                    effective_date=now,
                    notes=f"Resumes on {resume_date.date().isoformat()}",
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
                    code="PAUSE_SUBSCRIPTION_FAILED",
                    message="Failed to pause subscription",
                    reason=str(e),
                )
            )
