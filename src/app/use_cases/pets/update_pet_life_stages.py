"""UpdatePetLifeStages Use Case

Recomputes every active pet's life stage from its age.
"""

import logging
import time
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.pet_repository import PetRepository
from src.domain.pet import LifeStage, age_in_months
from .dtos import UpdatePetLifeStagesCommandDTO, LifeStageUpdateResultDTO

logger = logging.getLogger(__name__)


class UpdatePetLifeStages:
    """
    Use Case: Reconcile pet life stages

    Business Rules:
    1. Age = completed calendar months between date_of_birth and today
    2. Target stage = first active stage of the species (ordered by
       min_age_months, NULL first) whose [min, max) range contains the age
    3. Pets without date_of_birth or without a matching stage are left alone
    4. Only mismatches are written; re-running the same day updates nothing
    5. Entitlements are not touched; they follow the life stage at the
       next lifecycle event

    Flow:
    1. Load active life stages grouped by species
    2. Walk active pets in id order, batch_size at a time
    3. Bulk update mismatches of the chunk and commit
    4. On failure, roll back the current chunk and return an error
    """

    def __init__(self, uow: UnitOfWork, pet_repo: PetRepository):
        self.uow = uow
        self.pet_repo = pet_repo

    async def execute(
        self, command: Optional[UpdatePetLifeStagesCommandDTO] = None
    ) -> Result[LifeStageUpdateResultDTO]:
        """
        Execute the life stage reconciliation

        Args:
            command: Optional run parameters (date, chunk size)

        Returns:
            Result[LifeStageUpdateResultDTO]: counts of scanned and updated pets
        """
        command = command or UpdatePetLifeStagesCommandDTO()
        started_at = datetime.utcnow()
        start_time = time.time()
        today = command.today or started_at.date()

        updated_count = 0
        scanned_count = 0

        try:
            logger.info(f"Starting pet life stage update for {today.isoformat()}")

            # Step 1: Stages per species, in match order
            stages_by_species: Dict[int, List[LifeStage]] = defaultdict(list)
            for stage in await self.pet_repo.get_active_life_stages():
                stages_by_species[stage.species_id].append(stage)

            # Step 2: Keyset pagination over active pets
            last_id = 0
            while True:
                pets = await self.pet_repo.get_active_pets_batch(last_id, command.batch_size)
                if not pets:
                    break

                last_id = pets[-1].id
                scanned_count += len(pets)

                updates = []
                for pet in pets:
                    if pet.date_of_birth is None:
                        continue

                    age = age_in_months(pet.date_of_birth, today)
                    target = next(
                        (s for s in stages_by_species.get(pet.species_id, []) if s.contains(age)),
                        None,
                    )
                    if target and target.id != pet.life_stage_id:
                        updates.append((pet.id, target.id))

                # Step 3: One bulk UPDATE and commit per chunk
                if updates:
                    updated_count += await self.pet_repo.bulk_update_life_stages(updates)
                await self.uow.commit()

                if len(pets) < command.batch_size:
                    break

            execution_time_ms = int((time.time() - start_time) * 1000)
            logger.info(
                f"Pet life stage update complete. Updated {updated_count} of "
                f"{scanned_count} pets in {execution_time_ms}ms"
            )

            return Return.ok(
                LifeStageUpdateResultDTO(
                    updated_count=updated_count,
                    scanned_count=scanned_count,
                    run_date=today,
                    started_at=started_at,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(
                f"Pet life stage update failed after {updated_count} updates: {e}"
            )
            return Return.err(
                Error(
                    code="UPDATE_PET_LIFE_STAGES_FAILED",
                    message="Failed to update pet life stages",
                    reason=str(e),
                )
            )
