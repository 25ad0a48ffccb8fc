"""Subscription Tier and Billing Cycle Reference Entities

Catalog rows read by the pricing calculator. Maintained by admin tooling
outside this service.
"""

from decimal import Decimal
from typing import Tuple
from sqlmodel import Field, Column
from sqlalchemy import Numeric, String
from src.domain.base import BaseModel, id_column

ANNUAL_MONTHS = 12
HUNDRED = Decimal("100")


class SubscriptionTier(BaseModel, table=True):
    """
    Subscription Tier - Named plan with a monthly base price

    Domain Rules:
    - base_price is the monthly unit price
    - rank orders tiers for upgrade/downgrade (higher rank = richer plan)
    - rank is independent from the primary key
    - Inactive tiers cannot be priced
    """

    __tablename__ = "subscription_tiers"

    id: int = Field(
        sa_column=id_column(),
        description="Tier identifier (auto-increment)"
    )

    tier_code: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Stable tier code (e.g., basic, plus, eternal)"
    )

    tier_name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Display name of the tier"
    )

    base_price: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Monthly base price"
    )

    rank: int = Field(
        description="Ordering for upgrade/downgrade comparison"
    )

    display_order: int = Field(
        default=0,
        description="Catalog display order"
    )

    is_active: bool = Field(
        default=True,
        description="Whether the tier can be sold"
    )


class BillingCycle(BaseModel, table=True):
    """
    Billing Cycle - Renewal period and its discount

    Domain Rules:
    - months is 1 (monthly) or 12 (annual)
    - discount_percentage applies to the cycle's base price
    """

    __tablename__ = "billing_cycles"

    id: int = Field(
        sa_column=id_column(),
        description="Billing cycle identifier (auto-increment)"
    )

    cycle_code: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Stable cycle code (monthly, annual)"
    )

    cycle_name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Display name of the cycle"
    )

    months: int = Field(
        description="Length of the cycle in months"
    )

    discount_percentage: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(5, 2), nullable=False, default=0),
        description="Discount applied for this cycle (0-100)"
    )

    @property
    def is_annual(self) -> bool:
        return self.months == ANNUAL_MONTHS


def cycle_pricing(monthly_price: Decimal, cycle: BillingCycle) -> Tuple[Decimal, Decimal]:
    """
    Price a monthly tier price for a billing cycle

    Returns:
        (base_price, cycle_discount): base_price is x12 for annual cycles,
        cycle_discount = base_price * discount_percentage / 100
    """
    base_price = Decimal(monthly_price)
    if cycle.is_annual:
        base_price = base_price * ANNUAL_MONTHS

    cycle_discount = base_price * Decimal(cycle.discount_percentage) / HUNDRED
    return base_price, cycle_discount
