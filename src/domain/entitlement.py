"""Entitlement Domain Entity

Per-subscription, per-category usage allowance.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, ForeignKey, String, UniqueConstraint
from src.domain.base import BaseModel, id_column


class Entitlement(BaseModel, table=True):
    """
    Entitlement - Usage quota for one service category of a subscription

    Domain Rules:
    - One row per (subscription, category)
    - quota_total = None means unlimited (only quota_used is tracked)
    - When bounded: quota_used + quota_remaining == quota_total
    - quota_remaining is never negative
    - No row means the category is not included
    - Rows are deleted and re-created when the subscription is upgraded
    """

    __tablename__ = "subscription_entitlements"
    __table_args__ = (
        UniqueConstraint('subscription_id', 'category_id', name='uq_entitlement_category'),
        Index('ix_entitlements_subscription_id', 'subscription_id'),
        CheckConstraint('quota_used >= 0', name='quota_used_non_negative'),
        CheckConstraint(
            'quota_total IS NULL OR (quota_remaining >= 0 AND quota_used + quota_remaining = quota_total)',
            name='quota_balanced',
        ),
    )

    id: int = Field(
        sa_column=id_column(),
        description="Entitlement identifier (auto-increment)"
    )

    subscription_id: str = Field(
        sa_column=Column(
            String(36),
            ForeignKey("subscriptions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        description="Owning subscription"
    )

    category_id: int = Field(
        description="Service category"
    )

    quota_total: Optional[int] = Field(
        default=None,
        description="Total quota for the period (None = unlimited)"
    )

    quota_used: int = Field(
        default=0,
        description="Units consumed in the period"
    )

    quota_remaining: Optional[int] = Field(
        default=None,
        description="Units left in the period (None when unlimited)"
    )

    reset_date: Optional[datetime] = Field(
        default=None,
        description="When the quota is due to reset"
    )

    last_used_date: Optional[datetime] = Field(
        default=None,
        description="Last consumption timestamp"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_unlimited(self) -> bool:
        return self.quota_total is None
