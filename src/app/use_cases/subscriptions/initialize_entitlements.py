"""InitializeEntitlements

Creates a subscription's quota rows from the tier configuration.
"""

import logging
from datetime import datetime
from typing import List, Optional
from src.app.repositories.catalog_repository import CatalogRepository
from src.app.repositories.entitlement_repository import EntitlementRepository
from src.domain.entitlement import Entitlement
from src.domain.subscription_tier import BillingCycle

logger = logging.getLogger(__name__)


class InitializeEntitlements:
    """
    Entitlement initializer used inside lifecycle transactions

    Business Rules:
    1. One entitlement per included TierConfig row for (tier, species, life stage)
    2. quota_total = quota_annual for annual cycles, quota_monthly otherwise
    3. A NULL quota means unlimited
    4. Never commits; joins the caller's transaction
    """

    def __init__(self, catalog_repo: CatalogRepository, entitlement_repo: EntitlementRepository):
        self.catalog_repo = catalog_repo
        self.entitlement_repo = entitlement_repo

    async def initialize(
        self,
        subscription_id: str,
        tier_id: int,
        species_id: int,
        life_stage_id: Optional[int],
        billing_cycle: BillingCycle,
        reset_date: datetime,
    ) -> List[Entitlement]:
        configs = await self.catalog_repo.get_tier_configs(tier_id, species_id, life_stage_id)

        entitlements = []
        for config in configs:
            if not config.is_included:
                continue

            quota = config.quota_annual if billing_cycle.is_annual else config.quota_monthly
            entitlement = Entitlement(
                subscription_id=subscription_id,
                category_id=config.category_id,
                quota_total=quota,
                quota_used=0,
                quota_remaining=quota,
                reset_date=reset_date,
            )
            entitlements.append(await self.entitlement_repo.create(entitlement))

        logger.info(
            f"Initialized {len(entitlements)} entitlements for subscription {subscription_id} "
            f"(tier={tier_id}, species={species_id}, life_stage={life_stage_id})"
        )
        return entitlements
