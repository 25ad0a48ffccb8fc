"""Pet and Life Stage Entities

Pets are owned by the pet profile service; this service reads them for
ownership checks and keeps life_stage_id in sync with the pet's age.
"""

from datetime import date, datetime
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import String
from src.domain.base import BaseModel, id_column


class LifeStage(BaseModel, table=True):
    """
    Life Stage - Age band of a species

    Domain Rules:
    - A pet belongs to the band where min_age_months <= age < max_age_months
    - A NULL bound is open-ended
    """

    __tablename__ = "life_stages"
    __table_args__ = (
        Index('ix_life_stages_species', 'species_id'),
    )

    id: int = Field(sa_column=id_column())
    species_id: int = Field(description="Species the band belongs to")
    life_stage_name: str = Field(sa_column=Column(String(100), nullable=False))
    min_age_months: Optional[int] = Field(default=None, description="Inclusive lower bound")
    max_age_months: Optional[int] = Field(default=None, description="Exclusive upper bound")
    is_active: bool = Field(default=True)

    def contains(self, age_months: int) -> bool:
        if self.min_age_months is not None and age_months < self.min_age_months:
            return False
        if self.max_age_months is not None and age_months >= self.max_age_months:
            return False
        return True


class Pet(BaseModel, table=True):
    """
    Pet - Subscribed animal

    life_stage_id is derived from date_of_birth and is recomputed nightly.
    It keys TierConfig lookups when entitlements are initialized.
    """

    __tablename__ = "pets"
    __table_args__ = (
        Index('ix_pets_owner_id', 'owner_id'),
    )

    id: int = Field(sa_column=id_column())
    owner_id: str = Field(description="Owning user")
    name: str = Field(sa_column=Column(String(100), nullable=False))
    species_id: int = Field(description="Species")
    life_stage_id: Optional[int] = Field(default=None, description="Current life stage")
    date_of_birth: Optional[date] = Field(default=None)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


def age_in_months(date_of_birth: date, today: date) -> int:
    """Completed calendar months between date_of_birth and today"""
    months = (today.year - date_of_birth.year) * 12 + (today.month - date_of_birth.month)
    if today.day < date_of_birth.day:
        months -= 1
    return max(months, 0)
