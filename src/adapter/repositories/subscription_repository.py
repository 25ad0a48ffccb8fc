"""SQLAlchemy Subscription Repository Implementation

Implements subscription persistence using SQLAlchemy async session.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.errors import ConflictError
from src.domain.subscription import Subscription, SubscriptionStatus, LIVE_STATUSES


class SqlAlchemySubscriptionRepository(SubscriptionRepository):
    """
    SQLAlchemy implementation of SubscriptionRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE for lifecycle transitions
    - Ownership filter on every lookup
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id_for_user(
        self, subscription_id: str, user_id: str, for_update: bool = False
    ) -> Optional[Subscription]:
        """
        Retrieve subscription owned by a user with optional row-level locking

        Args:
            subscription_id: Subscription identifier
            user_id: Owning user
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Subscription if found, None otherwise
        """
        stmt = (
            select(Subscription)
            .where(Subscription.id == subscription_id)
            .where(Subscription.user_id == user_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_live_for_pet(self, pet_id: int) -> Optional[Subscription]:
        stmt = (
            select(Subscription)
            .where(Subscription.pet_id == pet_id)
            .where(Subscription.status.in_(LIVE_STATUSES))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_by_user(
        self, user_id: str, status: Optional[SubscriptionStatus] = None
    ) -> List[Subscription]:
        stmt = select(Subscription).where(Subscription.user_id == user_id)

        if status:
            stmt = stmt.where(Subscription.status == status)

        stmt = stmt.order_by(Subscription.created_at.desc()).execution_options(
            populate_existing=True
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, subscription: Subscription) -> Subscription:
        self.session.add(subscription)
        try:
            await self.session.flush()
        except IntegrityError as e:
            # uq_subscriptions_live_pet: another create for the pet won the race
            raise ConflictError(
                "ACTIVE_SUBSCRIPTION_EXISTS", "Pet already has an active subscription"
            ) from e
        await self.session.refresh(subscription)
        return subscription

    async def update(self, subscription: Subscription) -> Subscription:
        subscription.updated_at = datetime.utcnow()
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription
