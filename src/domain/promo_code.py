"""Promo Code Domain Entities

Promo codes constrain subscription pricing. Usage rows record each
redemption so per-user caps can be enforced.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, ForeignKey, JSON, Numeric, String
from src.domain.base import BaseModel, id_column


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class PromoCode(BaseModel, table=True):
    """
    Promo Code - Discount offer with validity window and usage caps

    Domain Rules:
    - promo_code is stored upper-case and is unique
    - Valid while valid_from <= now <= valid_until and is_active
    - current_uses only ever increases (one per subscription created with it)
    - max_uses_total = None means no global cap
    - tier_ids = None means applicable to every tier
    - Percentage discounts are capped by max_discount_amount when set
    """

    __tablename__ = "promo_codes"

    id: int = Field(
        sa_column=id_column(),
        description="Promo identifier (auto-increment)"
    )

    promo_code: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Redeemable code (upper-case)"
    )

    promo_name: Optional[str] = Field(default=None)

    discount_type: DiscountType = Field(description="percentage or fixed")

    discount_value: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Percentage (0-100) or flat amount"
    )

    max_discount_amount: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 6), nullable=True),
        description="Cap for percentage discounts"
    )

    valid_from: datetime = Field(description="Start of validity window")
    valid_until: datetime = Field(description="End of validity window")

    max_uses_total: Optional[int] = Field(default=None, description="Global cap (None = unlimited)")
    max_uses_per_user: int = Field(default=1, description="Redemptions allowed per user")
    current_uses: int = Field(default=0, description="Redemptions so far")

    tier_ids: Optional[List[int]] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Tiers the code applies to (None = all)"
    )

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class PromoCodeUsage(BaseModel, table=True):
    """Promo Code Usage - One redemption of a promo code by a user"""

    __tablename__ = "promo_code_usage"
    __table_args__ = (
        Index('ix_promo_code_usage_promo_user', 'promo_id', 'user_id'),
    )

    id: int = Field(sa_column=id_column())

    promo_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("promo_codes.id"), nullable=False),
    )

    user_id: str = Field(description="Redeeming user")

    subscription_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(36), nullable=True),
    )

    discount_applied: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
    )

    used_at: datetime = Field(default_factory=datetime.utcnow)
