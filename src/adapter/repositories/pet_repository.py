"""SQLAlchemy Pet Repository Implementation

Bulk life stage updates are issued as a single executemany UPDATE.
"""

from datetime import datetime
from typing import List, Optional, Sequence, Tuple
from sqlalchemy import bindparam, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.pet_repository import PetRepository
from src.domain.pet import Pet, LifeStage


class SqlAlchemyPetRepository(PetRepository):
    """SQLAlchemy implementation of PetRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_owned_active(
        self, pet_id: int, owner_id: str, for_update: bool = False
    ) -> Optional[Pet]:
        stmt = (
            select(Pet)
            .where(Pet.id == pet_id)
            .where(Pet.owner_id == owner_id)
            .where(Pet.is_active.is_(True))
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, pet_id: int) -> Optional[Pet]:
        stmt = select(Pet).where(Pet.id == pet_id).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active_life_stages(self) -> List[LifeStage]:
        stmt = (
            select(LifeStage)
            .where(LifeStage.is_active.is_(True))
            .order_by(LifeStage.species_id, LifeStage.min_age_months.nulls_first(), LifeStage.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_active_pets_batch(self, after_id: int, limit: int) -> List[Pet]:
        stmt = (
            select(Pet)
            .where(Pet.is_active.is_(True))
            .where(Pet.id > after_id)
            .order_by(Pet.id)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def bulk_update_life_stages(self, updates: Sequence[Tuple[int, int]]) -> int:
        """
        Set life_stage_id for many pets in one executemany UPDATE

        Note:
            Rows already loaded in the session are not refreshed.
        """
        if not updates:
            return 0

        pets = Pet.__table__
        stmt = (
            update(pets)
            .where(pets.c.id == bindparam("b_pet_id"))
            .values(
                life_stage_id=bindparam("b_life_stage_id"),
                updated_at=bindparam("b_updated_at"),
            )
        )
        now = datetime.utcnow()
        await self.session.execute(
            stmt,
            [
                {"b_pet_id": pet_id, "b_life_stage_id": stage_id, "b_updated_at": now}
                for pet_id, stage_id in updates
            ],
        )
        return len(updates)
