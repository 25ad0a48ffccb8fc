"""SQLAlchemy Catalog Repository Implementation"""

from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.catalog_repository import CatalogRepository
from src.domain.subscription_tier import SubscriptionTier, BillingCycle
from src.domain.tier_config import TierConfig


class SqlAlchemyCatalogRepository(CatalogRepository):
    """SQLAlchemy implementation of CatalogRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_tier(self, tier_id: int, active_only: bool = True) -> Optional[SubscriptionTier]:
        stmt = select(SubscriptionTier).where(SubscriptionTier.id == tier_id)

        if active_only:
            stmt = stmt.where(SubscriptionTier.is_active.is_(True))

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_billing_cycle(self, billing_cycle_id: int) -> Optional[BillingCycle]:
        stmt = select(BillingCycle).where(BillingCycle.id == billing_cycle_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_tier_configs(
        self, tier_id: int, species_id: int, life_stage_id: int
    ) -> List[TierConfig]:
        stmt = (
            select(TierConfig)
            .where(TierConfig.tier_id == tier_id)
            .where(TierConfig.species_id == species_id)
            .where(TierConfig.life_stage_id == life_stage_id)
            .order_by(TierConfig.category_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_active_tiers(self) -> List[SubscriptionTier]:
        stmt = (
            select(SubscriptionTier)
            .where(SubscriptionTier.is_active.is_(True))
            .order_by(SubscriptionTier.display_order, SubscriptionTier.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_billing_cycles(self) -> List[BillingCycle]:
        stmt = select(BillingCycle).order_by(BillingCycle.months, BillingCycle.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
