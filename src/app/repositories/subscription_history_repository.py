"""Subscription History Repository Interface

History is append-only: there is no update or delete.
"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.subscription_history import SubscriptionHistory


class SubscriptionHistoryRepository(ABC):
    """Repository interface for the subscription history ledger"""

    @abstractmethod
    async def append(self, entry: SubscriptionHistory) -> SubscriptionHistory:
        """
        Append a history row

        Args:
            entry: SubscriptionHistory entity to persist

        Returns:
            Created SubscriptionHistory with generated ID
        """
        pass

    @abstractmethod
    async def list_by_subscription(self, subscription_id: str) -> List[SubscriptionHistory]:
        """
        Retrieve the history of a subscription, newest first

        Args:
            subscription_id: Subscription identifier

        Returns:
            List of SubscriptionHistory rows
        """
        pass
