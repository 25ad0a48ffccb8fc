"""Tier Configuration Entity

What a subscriber at a given tier/species/life-stage is entitled to,
per service category.
"""

from typing import Optional
from sqlmodel import Field, Index
from sqlalchemy import UniqueConstraint
from src.domain.base import BaseModel, id_column


class TierConfig(BaseModel, table=True):
    """
    Tier Config - Quota definition per (tier, species, life stage, category)

    Domain Rules:
    - quota_monthly / quota_annual = None means unlimited
    - is_included = False means the category grants no entitlement
    """

    __tablename__ = "subscription_tier_configs"
    __table_args__ = (
        UniqueConstraint(
            "tier_id", "species_id", "life_stage_id", "category_id",
            name="uq_tier_config_key",
        ),
        Index("ix_tier_configs_lookup", "tier_id", "species_id", "life_stage_id"),
    )

    id: int = Field(sa_column=id_column())
    tier_id: int = Field(description="Subscription tier")
    species_id: int = Field(description="Pet species")
    life_stage_id: int = Field(description="Pet life stage")
    category_id: int = Field(description="Service category")
    quota_monthly: Optional[int] = Field(default=None, description="Quota per monthly cycle (None = unlimited)")
    quota_annual: Optional[int] = Field(default=None, description="Quota per annual cycle (None = unlimited)")
    is_included: bool = Field(default=True)
