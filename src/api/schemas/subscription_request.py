"""Request schemas for Subscription API

Pydantic models for validating incoming HTTP requests. The caller's user
id comes from the X-User-Id header, never from the body.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class CalculatePriceRequestSchema(BaseModel):
    tier_id: int = Field(..., gt=0)
    billing_cycle_id: int = Field(..., gt=0)
    promo_code: Optional[str] = Field(default=None, max_length=50)


class ValidatePromoRequestSchema(BaseModel):
    promo_code: str = Field(..., min_length=1, max_length=50)
    tier_id: int = Field(..., gt=0)
    billing_cycle_id: int = Field(..., gt=0)


class CreateSubscriptionRequestSchema(BaseModel):
    """
    Request schema for creating a subscription

    Used for POST /subscriptions endpoint.
    """

    pet_id: int = Field(..., gt=0, description="Pet to subscribe")
    tier_id: int = Field(..., gt=0, description="Subscription tier")
    billing_cycle_id: int = Field(..., gt=0, description="Billing cycle")
    promo_code: Optional[str] = Field(default=None, max_length=50)

    @field_validator('promo_code')
    @classmethod
    def blank_promo_is_none(cls, v):
        """Treat an empty promo code as no promo code"""
        if v is not None and not v.strip():
            return None
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "pet_id": 42,
                "tier_id": 2,
                "billing_cycle_id": 1,
                "promo_code": "WELCOME10",
            }
        }


class ChangeTierRequestSchema(BaseModel):
    """Used for POST /subscriptions/{id}/upgrade and /downgrade"""

    new_tier_id: int = Field(..., gt=0)
    new_billing_cycle_id: Optional[int] = Field(default=None, gt=0)


class PauseSubscriptionRequestSchema(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=500)
    resume_date: datetime = Field(..., description="When the subscription resumes (max 90 days)")


class CancelSubscriptionRequestSchema(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=500)
    immediate: bool = False


class AutoRenewRequestSchema(BaseModel):
    auto_renew: bool


class EntitlementRequestSchema(BaseModel):
    """Used for entitlement check/use/release endpoints"""

    category_id: int = Field(..., gt=0)
    quantity: int = Field(default=1, ge=1, description="Units of the service (must be >= 1)")
