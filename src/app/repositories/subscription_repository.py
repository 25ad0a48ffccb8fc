"""Subscription Repository Interface

Defines the contract for subscription persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.subscription import Subscription, SubscriptionStatus


class SubscriptionRepository(ABC):
    """
    Repository interface for Subscription persistence

    Lifecycle operations read with for_update=True so concurrent
    transitions on the same subscription serialize.
    """

    @abstractmethod
    async def get_by_id_for_user(
        self, subscription_id: str, user_id: str, for_update: bool = False
    ) -> Optional[Subscription]:
        """
        Retrieve a subscription owned by a user

        Args:
            subscription_id: Subscription identifier
            user_id: Owning user (other users' subscriptions are not visible)
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Subscription if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_live_for_pet(self, pet_id: int) -> Optional[Subscription]:
        """
        Retrieve the pet's active or trial subscription

        Args:
            pet_id: Pet identifier

        Returns:
            Subscription if the pet has one in {active, trial}, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_user(
        self, user_id: str, status: Optional[SubscriptionStatus] = None
    ) -> List[Subscription]:
        """
        Retrieve a user's subscriptions, newest first

        Args:
            user_id: Owning user
            status: Optional filter by status

        Returns:
            List of subscriptions ordered by created_at descending
        """
        pass

    @abstractmethod
    async def create(self, subscription: Subscription) -> Subscription:
        """
        Create a new subscription

        Args:
            subscription: Subscription entity to persist

        Returns:
            Created Subscription

        Raises:
            ConflictError: ACTIVE_SUBSCRIPTION_EXISTS if the pet already has
                a live subscription (checked by the database)
        """
        pass

    @abstractmethod
    async def update(self, subscription: Subscription) -> Subscription:
        """
        Update an existing subscription

        Args:
            subscription: Subscription entity with updated values

        Returns:
            Updated Subscription
        """
        pass
