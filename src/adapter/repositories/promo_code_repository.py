"""SQLAlchemy Promo Code Repository Implementation

Implements promo code lookups and redemption counters.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import or_, update
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.promo_code_repository import PromoCodeRepository
from src.domain.promo_code import PromoCode, PromoCodeUsage


class SqlAlchemyPromoCodeRepository(PromoCodeRepository):
    """
    SQLAlchemy implementation of PromoCodeRepository

    current_uses is only ever incremented by a guarded UPDATE, so the
    global cap holds under concurrent redemptions.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_valid_by_code(self, promo_code: str, now: datetime) -> Optional[PromoCode]:
        stmt = (
            select(PromoCode)
            .where(PromoCode.promo_code == promo_code)
            .where(PromoCode.is_active.is_(True))
            .where(PromoCode.valid_from <= now)
            .where(PromoCode.valid_until >= now)
            .where(
                or_(
                    PromoCode.max_uses_total.is_(None),
                    PromoCode.current_uses < PromoCode.max_uses_total,
                )
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_user_usage(self, promo_id: int, user_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(PromoCodeUsage)
            .where(PromoCodeUsage.promo_id == promo_id)
            .where(PromoCodeUsage.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def record_usage(self, usage: PromoCodeUsage) -> PromoCodeUsage:
        self.session.add(usage)
        await self.session.flush()
        await self.session.refresh(usage)
        return usage

    async def increment_uses(self, promo_id: int) -> bool:
        table = PromoCode.__table__
        stmt = (
            update(table)
            .where(table.c.id == promo_id)
            .where(
                or_(
                    table.c.max_uses_total.is_(None),
                    table.c.current_uses < table.c.max_uses_total,
                )
            )
            .values(
                current_uses=table.c.current_uses + 1,
                updated_at=datetime.utcnow(),
            )
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
