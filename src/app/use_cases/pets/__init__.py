"""Pet use cases"""
from .update_pet_life_stages import UpdatePetLifeStages
from .dtos import UpdatePetLifeStagesCommandDTO, LifeStageUpdateResultDTO

__all__ = [
    "UpdatePetLifeStages",
    "UpdatePetLifeStagesCommandDTO",
    "LifeStageUpdateResultDTO",
]
