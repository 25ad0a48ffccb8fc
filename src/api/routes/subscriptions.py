"""Subscription API Routes

FastAPI routes for the subscription lifecycle. The caller is identified
by the X-User-Id header; every subscription lookup is ownership-checked.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories import (
    SqlAlchemyCatalogRepository,
    SqlAlchemyEntitlementRepository,
    SqlAlchemySubscriptionHistoryRepository,
    SqlAlchemySubscriptionRepository,
)
from src.api import factories
from src.api.audit import record_audit
from src.api.error import ClientError
from src.api.schemas.subscription_request import (
    AutoRenewRequestSchema,
    CancelSubscriptionRequestSchema,
    ChangeTierRequestSchema,
    CreateSubscriptionRequestSchema,
    PauseSubscriptionRequestSchema,
)
from src.app.services.audit_service import AuditService
from src.app.use_cases.subscriptions import (
    GetSubscription,
    GetSubscriptionHistory,
    ListUserSubscriptions,
    PreviewRenewal,
)
from src.app.use_cases.subscriptions.dtos import (
    CancelSubscriptionCommandDTO,
    CancelSubscriptionResponseDTO,
    ChangeTierCommandDTO,
    CreateSubscriptionCommandDTO,
    CreateSubscriptionResponseDTO,
    DowngradeSubscriptionResponseDTO,
    ListUserSubscriptionsQueryDTO,
    PauseSubscriptionCommandDTO,
    RenewalPreviewDTO,
    SubscriptionDetailDTO,
    SubscriptionDTO,
    SubscriptionHistoryResponseDTO,
    SubscriptionListDTO,
    SubscriptionQueryDTO,
    ToggleAutoRenewalCommandDTO,
    UpgradeSubscriptionResponseDTO,
)
from src.domain.subscription import SubscriptionStatus
from src.depends import get_audit_service, get_current_user_id, get_session

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])
me_router = APIRouter(prefix="/me", tags=["Subscriptions"])


@me_router.get(
    "/subscriptions",
    response_model=SubscriptionListDTO,
    status_code=status.HTTP_200_OK,
)
async def list_my_subscriptions(
    status_filter: Optional[SubscriptionStatus] = Query(default=None, alias="status"),
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    """
    List the caller's subscriptions across all pets, newest first.

    **Query parameters:**
    - `status` (optional): trial, active, paused or cancelled
    """
    use_case = ListUserSubscriptions(SqlAlchemySubscriptionRepository(session))
    result = await use_case.execute(
        ListUserSubscriptionsQueryDTO(user_id=user_id, status=status_filter)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "",
    response_model=CreateSubscriptionResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "Pet already subscribed",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "ACTIVE_SUBSCRIPTION_EXISTS",
                            "message": "Pet already has an active subscription",
                        }
                    }
                }
            },
        },
        404: {"description": "PET_NOT_FOUND, INVALID_TIER or INVALID_BILLING_CYCLE"},
    },
)
async def create_subscription(
    request: CreateSubscriptionRequestSchema,
    http_request: Request,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
    audit_service: AuditService = Depends(get_audit_service),
):
    """
    Subscribe a pet to a tier.

    **Request body:**
    - `pet_id` (required): Pet owned by the caller
    - `tier_id` (required): Subscription tier
    - `billing_cycle_id` (required): Monthly or annual cycle
    - `promo_code` (optional): Promo code to redeem

    **Returns:**
    - 201: Subscription, pricing, entitlements and invoice
    - 404: Pet, tier or billing cycle not found
    - 409: Pet already has an active subscription
    - 400/422: Promo code rejected
    """
    command = CreateSubscriptionCommandDTO(
        user_id=user_id,
        pet_id=request.pet_id,
        tier_id=request.tier_id,
        billing_cycle_id=request.billing_cycle_id,
        promo_code=request.promo_code,
    )

    result = await factories.create_subscription(session).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    created = result.value
    await record_audit(
        audit_service,
        http_request,
        user_id,
        "subscription_created",
        created.subscription.subscription_id,
        new_value={
            "pet_id": request.pet_id,
            "tier_id": request.tier_id,
            "billing_cycle_id": request.billing_cycle_id,
            "final_price": str(created.pricing.final_price),
        },
        summary=f"Invoice {created.invoice_number}",
    )
    return created


@router.get(
    "/{subscription_id}",
    response_model=SubscriptionDetailDTO,
    status_code=status.HTTP_200_OK,
)
async def get_subscription(
    subscription_id: str,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    use_case = GetSubscription(
        SqlAlchemySubscriptionRepository(session),
        SqlAlchemyCatalogRepository(session),
        SqlAlchemyEntitlementRepository(session),
    )
    result = await use_case.execute(
        SubscriptionQueryDTO(subscription_id=subscription_id, user_id=user_id)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{subscription_id}/history",
    response_model=SubscriptionHistoryResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_subscription_history(
    subscription_id: str,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    use_case = GetSubscriptionHistory(
        SqlAlchemySubscriptionRepository(session),
        SqlAlchemySubscriptionHistoryRepository(session),
    )
    result = await use_case.execute(
        SubscriptionQueryDTO(subscription_id=subscription_id, user_id=user_id)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{subscription_id}/renewal-preview",
    response_model=RenewalPreviewDTO,
    status_code=status.HTTP_200_OK,
)
async def preview_renewal(
    subscription_id: str,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    use_case = PreviewRenewal(
        SqlAlchemySubscriptionRepository(session),
        factories.price_calculator(session),
    )
    result = await use_case.execute(
        SubscriptionQueryDTO(subscription_id=subscription_id, user_id=user_id)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{subscription_id}/upgrade",
    response_model=UpgradeSubscriptionResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def upgrade_subscription(
    subscription_id: str,
    request: ChangeTierRequestSchema,
    http_request: Request,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
    audit_service: AuditService = Depends(get_audit_service),
):
    """
    Upgrade to a higher tier now; the prorated difference is invoiced.

    **Returns:**
    - 200: Prorated charge and new price
    - 400: INVALID_UPGRADE or INVALID_SUBSCRIPTION_STATUS
    - 404: SUBSCRIPTION_NOT_FOUND
    """
    command = ChangeTierCommandDTO(
        subscription_id=subscription_id,
        user_id=user_id,
        new_tier_id=request.new_tier_id,
        new_billing_cycle_id=request.new_billing_cycle_id,
    )

    result = await factories.upgrade_subscription(session).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    await record_audit(
        audit_service,
        http_request,
        user_id,
        "subscription_upgraded",
        subscription_id,
        new_value={"tier_id": request.new_tier_id, "new_price": str(result.value.new_price)},
        summary=f"Prorated charge {result.value.prorated_charge}",
    )
    return result.value


@router.post(
    "/{subscription_id}/downgrade",
    response_model=DowngradeSubscriptionResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def downgrade_subscription(
    subscription_id: str,
    request: ChangeTierRequestSchema,
    http_request: Request,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
    audit_service: AuditService = Depends(get_audit_service),
):
    """Schedule a lower tier for the next billing date"""
    command = ChangeTierCommandDTO(
        subscription_id=subscription_id,
        user_id=user_id,
        new_tier_id=request.new_tier_id,
        new_billing_cycle_id=request.new_billing_cycle_id,
    )

    result = await factories.downgrade_subscription(session).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    await record_audit(
        audit_service,
        http_request,
        user_id,
        "subscription_downgraded",
        subscription_id,
        new_value={"tier_id": request.new_tier_id},
        summary=result.value.message,
    )
    return result.value


@router.post(
    "/{subscription_id}/pause",
    response_model=SubscriptionDTO,
    status_code=status.HTTP_200_OK,
)
async def pause_subscription(
    subscription_id: str,
    request: PauseSubscriptionRequestSchema,
    http_request: Request,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
    audit_service: AuditService = Depends(get_audit_service),
):
    """
    Pause an active subscription until `resume_date`.

    **Returns:**
    - 200: Paused subscription
    - 400: INVALID_RESUME_DATE or INVALID_SUBSCRIPTION_STATUS
    - 422: MAX_PAUSE_EXCEEDED
    """
    command = PauseSubscriptionCommandDTO(
        subscription_id=subscription_id,
        user_id=user_id,
        reason=request.reason,
        resume_date=request.resume_date,
    )

    result = await factories.pause_subscription(session).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    await record_audit(
        audit_service,
        http_request,
        user_id,
        "subscription_paused",
        subscription_id,
        summary=request.reason,
    )
    return result.value


@router.post(
    "/{subscription_id}/resume",
    response_model=SubscriptionDTO,
    status_code=status.HTTP_200_OK,
)
async def resume_subscription(
    subscription_id: str,
    http_request: Request,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
    audit_service: AuditService = Depends(get_audit_service),
):
    result = await factories.resume_subscription(session).execute(
        SubscriptionQueryDTO(subscription_id=subscription_id, user_id=user_id)
    )

    if result.is_err():
        raise ClientError(result.error)

    await record_audit(audit_service, http_request, user_id, "subscription_resumed", subscription_id)
    return result.value


@router.post(
    "/{subscription_id}/cancel",
    response_model=CancelSubscriptionResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def cancel_subscription(
    subscription_id: str,
    request: CancelSubscriptionRequestSchema,
    http_request: Request,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
    audit_service: AuditService = Depends(get_audit_service),
):
    """
    Cancel now (with a prorated refund) or at the end of the period.

    **Request body:**
    - `reason` (optional): Cancellation reason
    - `immediate` (optional, default false): End access now and refund
    """
    command = CancelSubscriptionCommandDTO(
        subscription_id=subscription_id,
        user_id=user_id,
        reason=request.reason,
        immediate=request.immediate,
    )

    result = await factories.cancel_subscription(session).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    await record_audit(
        audit_service,
        http_request,
        user_id,
        "subscription_cancelled",
        subscription_id,
        new_value={
            "immediate": request.immediate,
            "refund_amount": str(result.value.refund_amount),
        },
        summary=request.reason,
    )
    return result.value


@router.patch(
    "/{subscription_id}/auto-renew",
    response_model=SubscriptionDTO,
    status_code=status.HTTP_200_OK,
)
async def toggle_auto_renewal(
    subscription_id: str,
    request: AutoRenewRequestSchema,
    http_request: Request,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
    audit_service: AuditService = Depends(get_audit_service),
):
    command = ToggleAutoRenewalCommandDTO(
        subscription_id=subscription_id,
        user_id=user_id,
        auto_renew=request.auto_renew,
    )

    result = await factories.toggle_auto_renewal(session).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    await record_audit(
        audit_service,
        http_request,
        user_id,
        "auto_renew_changed",
        subscription_id,
        new_value={"auto_renew": request.auto_renew},
    )
    return result.value
