"""Entitlement Repository Interface

Defines the contract for entitlement persistence. Quota arithmetic is done
by the store so concurrent consumers cannot overdraw a quota.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.domain.entitlement import Entitlement


class EntitlementRepository(ABC):
    """Repository interface for Entitlement persistence"""

    @abstractmethod
    async def create(self, entitlement: Entitlement) -> Entitlement:
        pass

    @abstractmethod
    async def get(
        self, subscription_id: str, category_id: int, for_update: bool = False
    ) -> Optional[Entitlement]:
        """
        Retrieve the entitlement for a subscription and category

        Args:
            subscription_id: Subscription identifier
            category_id: Service category
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Entitlement if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_subscription(self, subscription_id: str) -> List[Entitlement]:
        pass

    @abstractmethod
    async def delete_by_subscription(self, subscription_id: str) -> int:
        """
        Delete every entitlement of a subscription

        Returns:
            Number of rows deleted
        """
        pass

    @abstractmethod
    async def consume(
        self, entitlement_id: int, quantity: int, used_at: datetime, bounded: bool
    ) -> bool:
        """
        Consume quota in a single guarded UPDATE

        Bounded entitlements only change when quota_remaining >= quantity;
        unlimited ones only track quota_used.

        Args:
            entitlement_id: Entitlement ID
            quantity: Units to consume
            used_at: Consumption timestamp (last_used_date)
            bounded: False when quota_total is NULL

        Returns:
            True if the row was updated, False if the quota was insufficient
        """
        pass

    @abstractmethod
    async def release(self, entitlement_id: int, quantity: int, bounded: bool) -> bool:
        """
        Give back previously consumed quota in a single guarded UPDATE

        Only applies when quota_used >= quantity.

        Returns:
            True if the row was updated, False otherwise
        """
        pass
