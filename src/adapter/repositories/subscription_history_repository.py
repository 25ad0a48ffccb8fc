"""SQLAlchemy Subscription History Repository Implementation"""

from typing import List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.subscription_history_repository import SubscriptionHistoryRepository
from src.domain.subscription_history import SubscriptionHistory


class SqlAlchemySubscriptionHistoryRepository(SubscriptionHistoryRepository):
    """Append-only history ledger backed by SQLAlchemy"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, entry: SubscriptionHistory) -> SubscriptionHistory:
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def list_by_subscription(self, subscription_id: str) -> List[SubscriptionHistory]:
        stmt = (
            select(SubscriptionHistory)
            .where(SubscriptionHistory.subscription_id == subscription_id)
            .order_by(SubscriptionHistory.created_at.desc(), SubscriptionHistory.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
