"""SQLAlchemy Entitlement Repository Implementation

Quota changes are single guarded UPDATE statements so that concurrent
consumers can never push quota_remaining below zero.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.entitlement_repository import EntitlementRepository
from src.domain.entitlement import Entitlement


class SqlAlchemyEntitlementRepository(EntitlementRepository):
    """
    SQLAlchemy implementation of EntitlementRepository

    Features:
    - Row-level locking via SELECT FOR UPDATE
    - Arithmetic done by the database, checked through the UPDATE rowcount
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entitlement: Entitlement) -> Entitlement:
        self.session.add(entitlement)
        await self.session.flush()
        await self.session.refresh(entitlement)
        return entitlement

    async def get(
        self, subscription_id: str, category_id: int, for_update: bool = False
    ) -> Optional[Entitlement]:
        stmt = (
            select(Entitlement)
            .where(Entitlement.subscription_id == subscription_id)
            .where(Entitlement.category_id == category_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_subscription(self, subscription_id: str) -> List[Entitlement]:
        stmt = (
            select(Entitlement)
            .where(Entitlement.subscription_id == subscription_id)
            .order_by(Entitlement.category_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_by_subscription(self, subscription_id: str) -> int:
        # ORM deletes keep the identity map free of rows that no longer exist
        entitlements = await self.list_by_subscription(subscription_id)
        for entitlement in entitlements:
            await self.session.delete(entitlement)

        await self.session.flush()
        return len(entitlements)

    async def consume(
        self, entitlement_id: int, quantity: int, used_at: datetime, bounded: bool
    ) -> bool:
        table = Entitlement.__table__
        stmt = update(table).where(table.c.id == entitlement_id)

        if bounded:
            stmt = stmt.where(table.c.quota_remaining >= quantity).values(
                quota_used=table.c.quota_used + quantity,
                quota_remaining=table.c.quota_remaining - quantity,
                last_used_date=used_at,
            )
        else:
            stmt = stmt.values(
                quota_used=table.c.quota_used + quantity,
                last_used_date=used_at,
            )

        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def release(self, entitlement_id: int, quantity: int, bounded: bool) -> bool:
        table = Entitlement.__table__
        stmt = (
            update(table)
            .where(table.c.id == entitlement_id)
            .where(table.c.quota_used >= quantity)
        )

        if bounded:
            stmt = stmt.values(
                quota_used=table.c.quota_used - quantity,
                quota_remaining=table.c.quota_remaining + quantity,
            )
        else:
            stmt = stmt.values(quota_used=table.c.quota_used - quantity)

        result = await self.session.execute(stmt)
        return result.rowcount == 1
