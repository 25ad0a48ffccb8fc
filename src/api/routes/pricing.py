"""Pricing API Routes

Price quotes and promo code checks. Nothing here writes to the database.
"""

from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api import factories
from src.api.error import ClientError
from src.api.schemas.subscription_request import (
    CalculatePriceRequestSchema,
    ValidatePromoRequestSchema,
)
from src.app.use_cases.subscriptions.dtos import (
    CalculatePriceCommandDTO,
    PriceBreakdownDTO,
    PromoDecisionDTO,
    ValidatePromoCommandDTO,
)
from src.depends import get_current_user_id, get_optional_user_id, get_session

router = APIRouter(prefix="/pricing", tags=["Pricing"])


@router.post(
    "/calculate",
    response_model=PriceBreakdownDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {
            "description": "Unknown tier or billing cycle",
            "content": {
                "application/json": {
                    "example": {"error": {"code": "INVALID_TIER", "message": "Invalid tier"}}
                }
            },
        }
    },
)
async def calculate_price(
    request: CalculatePriceRequestSchema,
    user_id: Optional[str] = Depends(get_optional_user_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Quote a tier for a billing cycle.

    A promo code is only applied when the X-User-Id header identifies the
    user, since per-user redemption limits apply.
    """
    command = CalculatePriceCommandDTO(
        tier_id=request.tier_id,
        billing_cycle_id=request.billing_cycle_id,
        promo_code=request.promo_code,
        user_id=user_id,
    )

    result = await factories.price_calculator(session).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/promo-codes/validate",
    response_model=PromoDecisionDTO,
    status_code=status.HTTP_200_OK,
)
async def validate_promo_code(
    request: ValidatePromoRequestSchema,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Check whether a promo code can be redeemed for a tier.

    **Returns:**
    - 200: Code accepted (usage is not recorded)
    - 400: INVALID_PROMO_CODE or PROMO_NOT_APPLICABLE
    - 422: PROMO_LIMIT_REACHED
    """
    command = ValidatePromoCommandDTO(
        promo_code=request.promo_code,
        user_id=user_id,
        tier_id=request.tier_id,
        billing_cycle_id=request.billing_cycle_id,
    )

    result = await factories.price_calculator(session).promo_validator.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
