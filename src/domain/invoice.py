"""Invoice Domain Entity

Invoices raised for subscription charges. Created inside the caller's
transaction so they commit or roll back with the subscription change.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Numeric, String, Text
from src.domain.base import BaseModel, id_column


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class InvoiceType(str, Enum):
    SUBSCRIPTION = "subscription"
    UPGRADE = "upgrade"


class Invoice(BaseModel, table=True):
    """
    Invoice - Billing document for a subscription charge

    Domain Rules:
    - invoice_number must be unique (INV-YYYYMM-NNNNNN)
    - subtotal is the sum of line totals
    - tax is charged on subtotal - discount_amount
    - total_amount = subtotal - discount_amount + tax_amount
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_user_id', 'user_id'),
        Index('ix_invoices_subscription_id', 'subscription_id'),
        Index('ix_invoices_invoice_number', 'invoice_number', unique=True),
    )

    id: int = Field(
        sa_column=id_column(),
        description="Unique invoice identifier (auto-increment)"
    )

    user_id: str = Field(
        description="Billed user"
    )

    subscription_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(36), nullable=True),
        description="Subscription the invoice belongs to"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique invoice number (e.g., INV-202401-000001)"
    )

    invoice_type: InvoiceType = Field(
        description="What the invoice charges for"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.PENDING,
        description="Invoice status (pending, paid, cancelled)"
    )

    subtotal: Decimal = Field(sa_column=Column(Numeric(18, 6), nullable=False))
    tax_percentage: Decimal = Field(sa_column=Column(Numeric(5, 2), nullable=False))
    tax_amount: Decimal = Field(sa_column=Column(Numeric(18, 6), nullable=False))
    discount_amount: Decimal = Field(sa_column=Column(Numeric(18, 6), nullable=False, default=0))

    total_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Amount due"
    )

    currency: str = Field(
        default="INR",
        sa_column=Column(String(3), nullable=False),
        description="Currency code (ISO 4217)"
    )

    due_date: datetime = Field(description="Payment due date")

    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    paid_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp when invoice was paid"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )
