"""Catalog Repository Interface

Read access to subscription reference data: tiers, billing cycles and
tier configurations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.subscription_tier import SubscriptionTier, BillingCycle
from src.domain.tier_config import TierConfig


class CatalogRepository(ABC):
    """
    Repository interface for subscription catalog lookups

    Reference data is maintained elsewhere; this interface is read-only.
    """

    @abstractmethod
    async def get_tier(self, tier_id: int, active_only: bool = True) -> Optional[SubscriptionTier]:
        """
        Retrieve a tier by ID

        Args:
            tier_id: Tier identifier
            active_only: If True, inactive tiers are treated as missing

        Returns:
            SubscriptionTier if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_billing_cycle(self, billing_cycle_id: int) -> Optional[BillingCycle]:
        """
        Retrieve a billing cycle by ID

        Args:
            billing_cycle_id: Billing cycle identifier

        Returns:
            BillingCycle if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_tier_configs(
        self, tier_id: int, species_id: int, life_stage_id: int
    ) -> List[TierConfig]:
        """
        Retrieve every category configuration for a tier/species/life stage

        Args:
            tier_id: Tier identifier
            species_id: Pet species
            life_stage_id: Pet life stage

        Returns:
            List of TierConfig rows (included and excluded)
        """
        pass

    @abstractmethod
    async def list_active_tiers(self) -> List[SubscriptionTier]:
        """
        Retrieve the tiers that can be sold

        Returns:
            Active tiers ordered by display_order
        """
        pass

    @abstractmethod
    async def list_billing_cycles(self) -> List[BillingCycle]:
        """
        Retrieve every billing cycle

        Returns:
            Billing cycles ordered by length (months)
        """
        pass
