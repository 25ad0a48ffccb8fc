"""Entitlement API Routes

Quota listing for subscription owners plus check/use/release calls made
by the booking flow.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories import (
    SqlAlchemyEntitlementRepository,
    SqlAlchemySubscriptionRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.audit import record_audit
from src.api.error import ClientError
from src.api.schemas.subscription_request import EntitlementRequestSchema
from src.app.services.audit_service import AuditService
from src.app.use_cases.subscriptions import (
    CheckEntitlement,
    GetEntitlements,
    ReleaseEntitlement,
    UseEntitlement,
)
from src.app.use_cases.subscriptions.dtos import (
    EntitlementCheckDTO,
    EntitlementCommandDTO,
    EntitlementDTO,
    EntitlementListDTO,
    GetEntitlementsQueryDTO,
)
from src.depends import get_audit_service, get_current_user_id, get_session

router = APIRouter(prefix="/subscriptions/{subscription_id}/entitlements", tags=["Entitlements"])


@router.get("", response_model=EntitlementListDTO, status_code=status.HTTP_200_OK)
async def list_entitlements(
    subscription_id: str,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
):
    use_case = GetEntitlements(
        SqlAlchemySubscriptionRepository(session),
        SqlAlchemyEntitlementRepository(session),
    )
    result = await use_case.execute(
        GetEntitlementsQueryDTO(subscription_id=subscription_id, user_id=user_id)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/check", response_model=EntitlementCheckDTO, status_code=status.HTTP_200_OK)
async def check_entitlement(
    subscription_id: str,
    request: EntitlementRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """Read-only: can `quantity` units of the category be used?"""
    use_case = CheckEntitlement(SqlAlchemyEntitlementRepository(session))
    result = await use_case.execute(
        EntitlementCommandDTO(
            subscription_id=subscription_id,
            category_id=request.category_id,
            quantity=request.quantity,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/use",
    response_model=EntitlementDTO,
    status_code=status.HTTP_200_OK,
    responses={
        422: {
            "description": "Quota exhausted",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "QUOTA_EXCEEDED",
                            "message": "Insufficient quota remaining",
                        }
                    }
                }
            },
        }
    },
)
async def use_entitlement(
    subscription_id: str,
    request: EntitlementRequestSchema,
    http_request: Request,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
    audit_service: AuditService = Depends(get_audit_service),
):
    """
    Consume quota for a booked service.

    **Returns:**
    - 200: Updated entitlement
    - 404: SERVICE_NOT_INCLUDED
    - 422: QUOTA_EXCEEDED (nothing is consumed)
    """
    use_case = UseEntitlement(
        SqlAlchemyUnitOfWork(session), SqlAlchemyEntitlementRepository(session)
    )
    result = await use_case.execute(
        EntitlementCommandDTO(
            subscription_id=subscription_id,
            category_id=request.category_id,
            quantity=request.quantity,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    await record_audit(
        audit_service,
        http_request,
        user_id,
        "entitlement_used",
        subscription_id,
        new_value={"category_id": request.category_id, "quantity": request.quantity},
    )
    return result.value


@router.post("/release", response_model=EntitlementDTO, status_code=status.HTTP_200_OK)
async def release_entitlement(
    subscription_id: str,
    request: EntitlementRequestSchema,
    http_request: Request,
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_session),
    audit_service: AuditService = Depends(get_audit_service),
):
    """Give quota back when a booked service is cancelled"""
    use_case = ReleaseEntitlement(
        SqlAlchemyUnitOfWork(session), SqlAlchemyEntitlementRepository(session)
    )
    result = await use_case.execute(
        EntitlementCommandDTO(
            subscription_id=subscription_id,
            category_id=request.category_id,
            quantity=request.quantity,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    await record_audit(
        audit_service,
        http_request,
        user_id,
        "entitlement_released",
        subscription_id,
        new_value={"category_id": request.category_id, "quantity": request.quantity},
    )
    return result.value
