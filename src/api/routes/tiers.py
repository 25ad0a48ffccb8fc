"""Tier Catalog API Routes

Public, read-only browsing of subscription tiers and their prices.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories import SqlAlchemyCatalogRepository
from src.api.error import ClientError
from src.app.use_cases.subscriptions import GetTierDetails, ListTiers
from src.app.use_cases.subscriptions.dtos import (
    TierCatalogQueryDTO,
    TierDetailsQueryDTO,
    TierDTO,
    TierListDTO,
)
from src.depends import get_session

router = APIRouter(prefix="/tiers", tags=["Tiers"])


@router.get("", response_model=TierListDTO, status_code=status.HTTP_200_OK)
async def list_tiers(
    species_id: Optional[int] = Query(default=None, gt=0),
    life_stage_id: Optional[int] = Query(default=None, gt=0),
    session: AsyncSession = Depends(get_session),
):
    """
    List active tiers with monthly and annual pricing.

    **Query parameters:**
    - `species_id`, `life_stage_id` (optional): when both are given, each
      tier lists the service categories and quotas it covers
    """
    use_case = ListTiers(SqlAlchemyCatalogRepository(session))
    result = await use_case.execute(
        TierCatalogQueryDTO(species_id=species_id, life_stage_id=life_stage_id)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{tier_id}", response_model=TierDTO, status_code=status.HTTP_200_OK)
async def get_tier_details(
    tier_id: int,
    species_id: Optional[int] = Query(default=None, gt=0),
    life_stage_id: Optional[int] = Query(default=None, gt=0),
    session: AsyncSession = Depends(get_session),
):
    use_case = GetTierDetails(SqlAlchemyCatalogRepository(session))
    result = await use_case.execute(
        TierDetailsQueryDTO(tier_id=tier_id, species_id=species_id, life_stage_id=life_stage_id)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value
