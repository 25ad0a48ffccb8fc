"""Get Subscription History Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.subscription_history_repository import SubscriptionHistoryRepository
from src.domain.errors import DomainError
from .dtos import SubscriptionQueryDTO, SubscriptionHistoryResponseDTO
from .mappers import load_owned_subscription, to_history_dto


class GetSubscriptionHistory:
    """Lists a subscription's history ledger, newest first (read-only)"""

    def __init__(
        self,
        subscription_repo: SubscriptionRepository,
        history_repo: SubscriptionHistoryRepository,
    ):
        self.subscription_repo = subscription_repo
        self.history_repo = history_repo

    async def execute(self, query: SubscriptionQueryDTO) -> Result[SubscriptionHistoryResponseDTO]:
        try:
            subscription = await load_owned_subscription(
                self.subscription_repo, query.subscription_id, query.user_id
            )
            entries = await self.history_repo.list_by_subscription(subscription.id)

            return Return.ok(
                SubscriptionHistoryResponseDTO(
                    subscription_id=subscription.id,
                    history=[to_history_dto(entry) for entry in entries],
                )
            )
        except DomainError as e:
            return Return.err(e.to_error())
        except Exception as e:
            return Return.err(
                Error(
                    code="GET_SUBSCRIPTION_HISTORY_FAILED",
                    message="Failed to get subscription history",
                    reason=str(e),
                )
            )
