"""Integration tests for the nightly pet life stage job"""

import pytest
from datetime import date, timedelta
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories import SqlAlchemyPetRepository
from src.adapter.services import SqlAlchemyUnitOfWork
from src.app.use_cases.pets import UpdatePetLifeStages, UpdatePetLifeStagesCommandDTO
from src.domain import Pet
from src.worker.life_stage_updater import LifeStageUpdaterWorker


class TestUpdatePetLifeStagesIntegration:
    @pytest.mark.asyncio
    async def test_grown_pets_move_stage_and_second_run_is_noop(
        self, db_session, catalog, reload
    ):
        """Test a puppy past its first birthday becomes an adult, then the job is idempotent"""
        # Arrange - a one-year-old still marked as a puppy, an old dog marked adult
        today = date.today()
        grown_puppy = Pet(owner_id="user_123", name="Milo", species_id=1,
                          life_stage_id=catalog["puppy"],
                          date_of_birth=today - timedelta(days=400))
        old_dog = Pet(owner_id="user_123", name="Max", species_id=1,
                      life_stage_id=catalog["adult"],
                      date_of_birth=date(today.year - 10, 1, 1))
        no_birthday = Pet(owner_id="user_123", name="Stray", species_id=1, life_stage_id=None)
        db_session.add_all([grown_puppy, old_dog, no_birthday])
        await db_session.commit()
        grown_puppy_id, old_dog_id, no_birthday_id = grown_puppy.id, old_dog.id, no_birthday.id

        use_case = UpdatePetLifeStages(
            SqlAlchemyUnitOfWork(db_session), SqlAlchemyPetRepository(db_session)
        )

        # Act
        first = await use_case.execute(UpdatePetLifeStagesCommandDTO(today=today, batch_size=2))
        second = await use_case.execute(UpdatePetLifeStagesCommandDTO(today=today, batch_size=2))

        # Assert
        assert first.is_ok()
        assert first.value.updated_count == 2
        assert first.value.scanned_count == 6
        assert second.value.updated_count == 0

        assert (await reload(Pet, grown_puppy_id)).life_stage_id == catalog["adult"]
        assert (await reload(Pet, old_dog_id)).life_stage_id == catalog["senior"]
        assert (await reload(Pet, no_birthday_id)).life_stage_id is None

    @pytest.mark.asyncio
    async def test_worker_runs_job_on_session_factory(self, engine, catalog):
        Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
        worker = LifeStageUpdaterWorker(batch_size=100, session_factory=Session)

        result = await worker.run_once()

        assert result.scanned_count == 3
        assert result.updated_count == 0
        await worker.shutdown()
