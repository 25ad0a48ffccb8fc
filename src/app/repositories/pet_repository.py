"""Pet Repository Interface

Defines the contract for pet lookups and life stage maintenance.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple
from src.domain.pet import Pet, LifeStage


class PetRepository(ABC):
    """
    Repository interface for Pet persistence

    Pets are owned by the profile service. This service reads them for
    ownership checks and rewrites life_stage_id in bulk.
    """

    @abstractmethod
    async def get_owned_active(
        self, pet_id: int, owner_id: str, for_update: bool = False
    ) -> Optional[Pet]:
        """
        Retrieve an active pet owned by the given user

        CreateSubscription locks the pet row so concurrent subscribes for
        the same pet serialize on it.

        Returns:
            Pet if it exists, is active and belongs to owner_id; None otherwise
        """
        pass

    @abstractmethod
    async def get_by_id(self, pet_id: int) -> Optional[Pet]:
        pass

    @abstractmethod
    async def get_active_life_stages(self) -> List[LifeStage]:
        """
        Retrieve all active life stages

        Returns:
            Life stages ordered by species, then min_age_months (NULL first)
        """
        pass

    @abstractmethod
    async def get_active_pets_batch(self, after_id: int, limit: int) -> List[Pet]:
        """
        Retrieve a chunk of active pets for batch processing

        Keyset pagination: pets with id > after_id, ordered by id.

        Args:
            after_id: Last pet ID of the previous chunk (0 for the first chunk)
            limit: Maximum number of pets to return

        Returns:
            List of pets
        """
        pass

    @abstractmethod
    async def bulk_update_life_stages(self, updates: Sequence[Tuple[int, int]]) -> int:
        """
        Set life_stage_id for many pets in one statement

        Args:
            updates: (pet_id, new_life_stage_id) pairs

        Returns:
            Number of pets updated
        """
        pass
