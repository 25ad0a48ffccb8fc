"""Subscription History Domain Entity

Immutable append-only ledger of lifecycle transitions. Used as the audit
trail for billing disputes.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, id_column


class HistoryAction(str, Enum):
    """Lifecycle transitions recorded in history"""
    CREATED = "created"
    UPGRADED = "upgraded"
    DOWNGRADED = "downgraded"          # Scheduled for next billing date
    PAUSED = "paused"
    RESUMED = "resumed"
    CANCELLED = "cancelled"
    AUTO_RENEW_CHANGED = "auto_renew_changed"


class SubscriptionHistory(BaseModel, table=True):
    """
    Subscription History - One row per lifecycle transition

    Domain Rules:
    - Rows are never updated or deleted
    - prorated_amount is the upgrade charge or the immediate-cancel refund
    - effective_date may be in the future (scheduled downgrade)
    """

    __tablename__ = "subscription_history"
    __table_args__ = (
        Index('ix_subscription_history_subscription', 'subscription_id', 'created_at'),
    )

    id: int = Field(
        sa_column=id_column(),
        description="History row identifier (auto-increment)"
    )

    subscription_id: str = Field(
        sa_column=Column(String(36), ForeignKey("subscriptions.id"), nullable=False),
    )

    action: HistoryAction = Field(description="Transition recorded")

    old_tier_id: Optional[int] = Field(default=None)
    new_tier_id: Optional[int] = Field(default=None)
    old_billing_cycle_id: Optional[int] = Field(default=None)
    new_billing_cycle_id: Optional[int] = Field(default=None)

    old_price: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(18, 6), nullable=True))
    new_price: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(18, 6), nullable=True))
    price_difference: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(18, 6), nullable=True))
    prorated_amount: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(18, 6), nullable=True))

    performed_by: str = Field(description="User who triggered the transition")
    effective_date: datetime = Field(description="When the transition takes effect")

    reason: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Row timestamp (immutable)"
    )
