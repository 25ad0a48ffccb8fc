"""Unit tests for UpdatePetLifeStages use case

Tests cover:
- Mismatched life stages are bulk updated
- Pets already in the right stage or without a birth date are skipped
- Chunked scanning commits once per chunk
- Failures roll back and return an error
"""

import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.pets import UpdatePetLifeStages, UpdatePetLifeStagesCommandDTO
from src.domain.pet import LifeStage, Pet

TODAY = date(2024, 6, 15)

DOG_STAGES = [
    LifeStage(id=1, species_id=1, life_stage_name="Puppy", min_age_months=None, max_age_months=12),
    LifeStage(id=2, species_id=1, life_stage_name="Adult", min_age_months=12, max_age_months=84),
    LifeStage(id=3, species_id=1, life_stage_name="Senior", min_age_months=84, max_age_months=None),
]


def pet(pet_id: int, date_of_birth, life_stage_id, species_id: int = 1) -> Pet:
    return Pet(
        id=pet_id,
        owner_id="user_123",
        name=f"pet-{pet_id}",
        species_id=species_id,
        life_stage_id=life_stage_id,
        date_of_birth=date_of_birth,
    )


@pytest.fixture
def mock_pet_repo():
    repo = MagicMock()
    repo.get_active_life_stages = AsyncMock(return_value=DOG_STAGES)
    repo.bulk_update_life_stages = AsyncMock(side_effect=lambda updates: len(updates))
    return repo


@pytest.mark.asyncio
class TestUpdatePetLifeStages:
    async def test_updates_only_mismatched_pets(self, mock_uow, mock_pet_repo):
        """
        Given: A puppy that turned one, an adult in the right stage,
               a pet without a birth date and a pet of an unknown species
        When: The life stage job runs
        Then: Only the grown-up puppy is updated
        """
        # Arrange
        mock_pet_repo.get_active_pets_batch = AsyncMock(
            return_value=[
                pet(1, date(2023, 6, 1), 1),
                pet(2, date(2020, 1, 1), 2),
                pet(3, None, None),
                pet(4, date(2010, 1, 1), None, species_id=9),
            ]
        )

        # Act
        result = await UpdatePetLifeStages(mock_uow, mock_pet_repo).execute(
            UpdatePetLifeStagesCommandDTO(today=TODAY, batch_size=500)
        )

        # Assert
        assert result.is_ok()
        assert result.value.updated_count == 1
        assert result.value.scanned_count == 4
        assert result.value.run_date == TODAY
        mock_pet_repo.bulk_update_life_stages.assert_called_once_with([(1, 2)])
        mock_pet_repo.get_active_pets_batch.assert_called_once_with(0, 500)
        mock_uow.commit.assert_called_once()

    async def test_second_run_updates_nothing(self, mock_uow, mock_pet_repo):
        mock_pet_repo.get_active_pets_batch = AsyncMock(
            return_value=[pet(1, date(2023, 6, 1), 2), pet(2, date(2010, 1, 1), 3)]
        )

        result = await UpdatePetLifeStages(mock_uow, mock_pet_repo).execute(
            UpdatePetLifeStagesCommandDTO(today=TODAY)
        )

        assert result.value.updated_count == 0
        mock_pet_repo.bulk_update_life_stages.assert_not_called()

    async def test_walks_pets_in_chunks(self, mock_uow, mock_pet_repo):
        """
        Given: Three pets and a chunk size of two
        When: The job runs
        Then: Pets are read after the last seen id, one commit per chunk
        """
        mock_pet_repo.get_active_pets_batch = AsyncMock(
            side_effect=[
                [pet(1, date(2023, 6, 1), 1), pet(5, date(2024, 1, 1), 1)],
                [pet(9, date(2015, 1, 1), 2)],
            ]
        )

        result = await UpdatePetLifeStages(mock_uow, mock_pet_repo).execute(
            UpdatePetLifeStagesCommandDTO(today=TODAY, batch_size=2)
        )

        assert result.value.updated_count == 2
        assert result.value.scanned_count == 3
        assert [c.args for c in mock_pet_repo.get_active_pets_batch.call_args_list] == [(0, 2), (5, 2)]
        assert mock_uow.commit.call_count == 2

    async def test_failure_rolls_back(self, mock_uow, mock_pet_repo):
        mock_pet_repo.get_active_pets_batch = AsyncMock(side_effect=Exception("connection lost"))

        result = await UpdatePetLifeStages(mock_uow, mock_pet_repo).execute()

        assert result.is_err()
        assert result.error.code == "UPDATE_PET_LIFE_STAGES_FAILED"
        assert result.error.reason == "connection lost"
        mock_uow.rollback.assert_called_once()
