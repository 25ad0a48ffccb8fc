"""Subscription Domain Entity

Tracks a pet's subscription plan, billing period and pricing snapshot.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Numeric, String, Text, or_
from src.domain.base import BaseModel, generate_uuid


class SubscriptionStatus(str, Enum):
    """Subscription status types"""
    TRIAL = "trial"
    ACTIVE = "active"
    PAUSED = "paused"
    CANCELLED = "cancelled"


# Statuses that count as "the pet's current subscription"
LIVE_STATUSES = (SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIAL)


class Subscription(BaseModel, table=True):
    """
    Subscription - A pet's plan at a tier and billing cycle

    Domain Rules:
    - At most one active/trial subscription per pet (CreateSubscription checks it,
      the uq_subscriptions_live_pet partial index backs it up)
    - current_period_end >= current_period_start
    - final_price = base_price - discount_applied, never negative
    - discount_applied holds the billing cycle discount plus any promo discount
    - Status transitions:
        trial/active -> paused | cancelled
        paused -> active | cancelled
        cancelled is terminal
    - Rows are never deleted; cancellation is a status change
    - A non-immediate cancellation keeps access until current_period_end
    """

    __tablename__ = "subscriptions"
    __table_args__ = (
        Index('ix_subscriptions_user_id', 'user_id'),
        Index('ix_subscriptions_pet_status', 'pet_id', 'status'),
        CheckConstraint('current_period_end >= current_period_start', name='period_ordered'),
        CheckConstraint('final_price >= 0', name='final_price_non_negative'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Opaque subscription identifier (UUID)"
    )

    user_id: str = Field(
        description="Subscribing user"
    )

    pet_id: int = Field(
        description="Subscribed pet"
    )

    tier_id: int = Field(
        description="Current subscription tier"
    )

    billing_cycle_id: int = Field(
        description="Current billing cycle"
    )

    status: SubscriptionStatus = Field(
        default=SubscriptionStatus.ACTIVE,
        description="Subscription status (trial, active, paused, cancelled)"
    )

    start_date: datetime = Field(description="Subscription start")
    end_date: datetime = Field(description="Subscription end (set to now on immediate cancel)")
    current_period_start: datetime = Field(description="Start of the current billing period")
    current_period_end: datetime = Field(description="End of the current billing period")
    next_billing_date: datetime = Field(description="Next renewal date")

    base_price: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Price before any discount for the billing cycle"
    )

    discount_applied: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 6), nullable=False, default=0),
        description="Cycle discount plus promo discount"
    )

    final_price: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="base_price - discount_applied (pre-tax)"
    )

    promo_code: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
    )

    auto_renew: bool = Field(default=True)

    pause_reason: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    paused_at: Optional[datetime] = Field(default=None)
    resume_date: Optional[datetime] = Field(default=None)

    cancellation_date: Optional[datetime] = Field(default=None)
    cancellation_reason: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    cancelled_by: Optional[str] = Field(default=None)

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Subscription creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    def has_access(self, now: datetime) -> bool:
        """Cancelled-at-period-end subscriptions keep access until the period ends"""
        if self.status in LIVE_STATUSES:
            return True
        if self.status == SubscriptionStatus.CANCELLED:
            return self.end_date > now and self.current_period_end > now
        return False

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "3f0c5d1e-8a2b-4c1d-9e7f-0a1b2c3d4e5f",
                "user_id": "user_123",
                "pet_id": 42,
                "tier_id": 2,
                "billing_cycle_id": 1,
                "status": "active",
                "base_price": "999.000000",
                "discount_applied": "0.000000",
                "final_price": "999.000000",
                "auto_renew": True,
            }
        }


# Partial unique index: one live subscription per pet under concurrent creates
_subscriptions = Subscription.__table__
_live_subscription = or_(
    _subscriptions.c.status == SubscriptionStatus.ACTIVE,
    _subscriptions.c.status == SubscriptionStatus.TRIAL,
)
Index(
    "uq_subscriptions_live_pet",
    _subscriptions.c.pet_id,
    unique=True,
    postgresql_where=_live_subscription,
    sqlite_where=_live_subscription,
)
