"""ListUserSubscriptions Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.subscription_repository import SubscriptionRepository
from .dtos import ListUserSubscriptionsQueryDTO, SubscriptionListDTO
from .mappers import to_subscription_dto


class ListUserSubscriptions:
    """
    List User Subscriptions Use Case

    Every subscription of the caller across pets, newest first, optionally
    filtered by status. Cancelled subscriptions are included unless filtered out.
    """

    def __init__(self, subscription_repo: SubscriptionRepository):
        self.subscription_repo = subscription_repo

    async def execute(self, query: ListUserSubscriptionsQueryDTO) -> Result[SubscriptionListDTO]:
        try:
            subscriptions = await self.subscription_repo.list_by_user(query.user_id, query.status)

            return Return.ok(
                SubscriptionListDTO(
                    user_id=query.user_id,
                    subscriptions=[to_subscription_dto(s) for s in subscriptions],
                )
            )
        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_SUBSCRIPTIONS_FAILED",
                    message="Failed to list subscriptions",
                    reason=str(e),
                )
            )
