"""Data Transfer Objects for Subscription Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.subscription import SubscriptionStatus


# ---------------------------------------------------------------------------
# Pricing & promo
# ---------------------------------------------------------------------------


class CalculatePriceCommandDTO(BaseModel):
    """Command DTO for CalculatePrice"""

    tier_id: int = Field(..., description="Subscription tier")
    billing_cycle_id: int = Field(..., description="Billing cycle")
    promo_code: Optional[str] = Field(default=None, description="Optional promo code")
    user_id: Optional[str] = Field(
        default=None,
        description="Redeeming user (promo codes are only evaluated for a known user)"
    )


class PriceBreakdownDTO(BaseModel):
    """
    Response DTO for a price calculation

    final_price = subtotal - promo_discount
    total_amount = final_price + tax_amount
    """

    tier_id: int
    tier_name: str
    billing_cycle_id: int
    billing_cycle_name: str
    billing_cycle_months: int
    base_price: Decimal = Field(..., description="Tier price for the whole cycle")
    cycle_discount: Decimal = Field(..., description="Discount granted by the billing cycle")
    subtotal: Decimal = Field(..., description="base_price - cycle_discount")
    promo_code: Optional[str] = None
    promo_id: Optional[int] = None
    promo_discount: Decimal = Field(default=Decimal("0"))
    total_discount: Decimal = Field(..., description="cycle_discount + promo_discount")
    final_price: Decimal = Field(..., description="Pre-tax price")
    tax_percentage: Decimal
    tax_amount: Decimal
    total_amount: Decimal

    class Config:
        json_schema_extra = {
            "example": {
                "tier_id": 2,
                "tier_name": "Plus",
                "billing_cycle_id": 2,
                "billing_cycle_name": "Annual",
                "billing_cycle_months": 12,
                "base_price": "11988",
                "cycle_discount": "1198.8",
                "subtotal": "10789.2",
                "promo_code": None,
                "promo_id": None,
                "promo_discount": "0",
                "total_discount": "1198.8",
                "final_price": "10789.2",
                "tax_percentage": "18",
                "tax_amount": "1942.056",
                "total_amount": "12731.256",
            }
        }


class ValidatePromoCommandDTO(BaseModel):
    """Command DTO for ValidatePromoCode"""

    promo_code: str = Field(..., min_length=1)
    user_id: str
    tier_id: int
    billing_cycle_id: int


class PromoDecisionDTO(BaseModel):
    """A promo code accepted for a user and tier (usage is not recorded)"""

    is_valid: bool = True
    promo_id: int
    promo_code: str
    discount_type: str = Field(..., description="percentage or fixed")
    discount_value: Decimal
    max_discount_amount: Optional[Decimal] = None


# ---------------------------------------------------------------------------
# Tier catalog
# ---------------------------------------------------------------------------


class TierCatalogQueryDTO(BaseModel):
    """
    Query DTO for browsing tiers

    Category features are only listed when both species_id and
    life_stage_id are given.
    """

    species_id: Optional[int] = None
    life_stage_id: Optional[int] = None


class TierDetailsQueryDTO(TierCatalogQueryDTO):
    tier_id: int


class PricingOptionDTO(BaseModel):
    billing_cycle_id: int
    cycle_code: str
    cycle_name: str
    months: int
    discount_percentage: Decimal
    base_price: Decimal = Field(..., description="Tier price for the whole cycle")
    final_price: Decimal = Field(..., description="base_price after the cycle discount, before tax")


class TierFeatureDTO(BaseModel):
    category_id: int
    is_included: bool
    quota_monthly: Optional[int] = Field(default=None, description="None = unlimited")
    quota_annual: Optional[int] = Field(default=None, description="None = unlimited")


class TierDTO(BaseModel):
    tier_id: int
    tier_code: str
    tier_name: str
    base_price: Decimal = Field(..., description="Monthly base price")
    rank: int
    display_order: int
    pricing_options: List[PricingOptionDTO]
    features: Optional[List[TierFeatureDTO]] = None


class TierListDTO(BaseModel):
    tiers: List[TierDTO]

# ---------------------------------------------------------------------------
# Entitlements
# ---------------------------------------------------------------------------


class EntitlementCommandDTO(BaseModel):
    """
    Command DTO for checking, using or releasing an entitlement

    Used by CheckEntitlement, UseEntitlement and ReleaseEntitlement.
    """

    subscription_id: str
    category_id: int
    quantity: int = Field(default=1, ge=1, description="Units of the service (must be >= 1)")


class EntitlementCheckDTO(BaseModel):
    """Read-only answer to 'may this subscription use this service?'"""

    has_access: bool
    is_included: bool
    is_unlimited: bool = False
    quota_total: Optional[int] = None
    quota_used: Optional[int] = None
    quota_remaining: Optional[int] = None


class EntitlementDTO(BaseModel):
    entitlement_id: int
    subscription_id: str
    category_id: int
    quota_total: Optional[int] = Field(default=None, description="None = unlimited")
    quota_used: int
    quota_remaining: Optional[int] = None
    is_unlimited: bool
    reset_date: Optional[datetime] = None
    last_used_date: Optional[datetime] = None


class GetEntitlementsQueryDTO(BaseModel):
    subscription_id: str
    user_id: str


class EntitlementListDTO(BaseModel):
    subscription_id: str
    entitlements: List[EntitlementDTO]


# ---------------------------------------------------------------------------
# Subscription lifecycle
# ---------------------------------------------------------------------------


class SubscriptionDTO(BaseModel):
    """Snapshot of a subscription row"""

    subscription_id: str
    user_id: str
    pet_id: int
    tier_id: int
    billing_cycle_id: int
    status: str
    start_date: datetime
    end_date: datetime
    current_period_start: datetime
    current_period_end: datetime
    next_billing_date: datetime
    base_price: Decimal
    discount_applied: Decimal
    final_price: Decimal
    promo_code: Optional[str] = None
    auto_renew: bool
    pause_reason: Optional[str] = None
    paused_at: Optional[datetime] = None
    resume_date: Optional[datetime] = None
    cancellation_date: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    cancelled_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SubscriptionDetailDTO(BaseModel):
    """Subscription with catalog names and current entitlements"""

    subscription: SubscriptionDTO
    tier_name: Optional[str] = None
    billing_cycle_name: Optional[str] = None
    entitlements: List[EntitlementDTO] = Field(default_factory=list)


class SubscriptionQueryDTO(BaseModel):
    """Ownership-checked lookup of a single subscription"""

    subscription_id: str
    user_id: str


class CreateSubscriptionCommandDTO(BaseModel):
    """
    Command DTO for creating a subscription

    Used as input to CreateSubscription use case.
    """

    user_id: str = Field(..., description="Subscribing user")
    pet_id: int = Field(..., description="Pet to subscribe")
    tier_id: int = Field(..., description="Subscription tier")
    billing_cycle_id: int = Field(..., description="Billing cycle")
    promo_code: Optional[str] = Field(default=None, description="Optional promo code")

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_123",
                "pet_id": 42,
                "tier_id": 2,
                "billing_cycle_id": 1,
                "promo_code": "WELCOME10",
            }
        }


class CreateSubscriptionResponseDTO(BaseModel):
    subscription: SubscriptionDTO
    pricing: PriceBreakdownDTO
    entitlements: List[EntitlementDTO]
    invoice_id: int
    invoice_number: str


class ChangeTierCommandDTO(BaseModel):
    """
    Command DTO for upgrading or downgrading a subscription

    new_billing_cycle_id defaults to the subscription's current cycle.
    """

    subscription_id: str
    user_id: str
    new_tier_id: int
    new_billing_cycle_id: Optional[int] = None


class UpgradeSubscriptionResponseDTO(BaseModel):
    subscription_id: str
    prorated_charge: Decimal
    new_price: Decimal
    remaining_days: int
    invoice_id: Optional[int] = Field(
        default=None,
        description="Invoice raised for the prorated charge, if any"
    )
    message: str


class DowngradeSubscriptionResponseDTO(BaseModel):
    subscription_id: str
    effective_date: datetime
    new_price: Decimal
    message: str


class PauseSubscriptionCommandDTO(BaseModel):
    subscription_id: str
    user_id: str
    reason: Optional[str] = None
    resume_date: datetime = Field(..., description="When the subscription resumes")


class CancelSubscriptionCommandDTO(BaseModel):
    subscription_id: str
    user_id: str
    reason: Optional[str] = None
    immediate: bool = Field(
        default=False,
        description="Cancel now with a prorated refund instead of at period end"
    )


class CancelSubscriptionResponseDTO(BaseModel):
    subscription_id: str
    refund_amount: Decimal
    access_until: datetime
    message: str


class ToggleAutoRenewalCommandDTO(BaseModel):
    subscription_id: str
    user_id: str
    auto_renew: bool


class HistoryEntryDTO(BaseModel):
    history_id: int
    subscription_id: str
    action: str
    old_tier_id: Optional[int] = None
    new_tier_id: Optional[int] = None
    old_billing_cycle_id: Optional[int] = None
    new_billing_cycle_id: Optional[int] = None
    old_price: Optional[Decimal] = None
    new_price: Optional[Decimal] = None
    price_difference: Optional[Decimal] = None
    prorated_amount: Optional[Decimal] = None
    performed_by: str
    effective_date: datetime
    reason: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime


class SubscriptionHistoryResponseDTO(BaseModel):
    subscription_id: str
    history: List[HistoryEntryDTO]


class RenewalPreviewDTO(BaseModel):
    """
    Response DTO for PreviewRenewal

    Only will_renew and message are set when auto-renewal is disabled.
    """

    will_renew: bool
    message: Optional[str] = None
    renewal_date: Optional[datetime] = None
    tier_name: Optional[str] = None
    billing_cycle: Optional[str] = None
    amount_to_charge: Optional[Decimal] = None
    pricing_breakdown: Optional[PriceBreakdownDTO] = None


class ListUserSubscriptionsQueryDTO(BaseModel):
    user_id: str
    status: Optional[SubscriptionStatus] = Field(default=None, description="Optional status filter")


class SubscriptionListDTO(BaseModel):
    user_id: str
    subscriptions: List[SubscriptionDTO]
