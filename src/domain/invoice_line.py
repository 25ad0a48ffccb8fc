"""Invoice Line Domain Entity

Tracks individual line items within an invoice.
"""

from datetime import datetime
from decimal import Decimal
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, ForeignKey, Numeric, String
from src.domain.base import BaseModel, id_column


class InvoiceLine(BaseModel, table=True):
    """
    Invoice Line - Individual line item within an invoice

    Domain Rules:
    - Each line item belongs to exactly one invoice
    - total_price = quantity * unit_price
    - Immutable once the invoice is created
    """

    __tablename__ = "invoice_lines"
    __table_args__ = (
        Index('ix_invoice_lines_invoice_id', 'invoice_id'),
    )

    id: int = Field(
        sa_column=id_column(),
        description="Unique invoice line identifier (auto-increment)"
    )

    invoice_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Invoice"
    )

    item_type: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Line category (e.g., 'subscription')"
    )

    description: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Line item description (e.g., 'Plus Plan - Monthly')"
    )

    quantity: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
    )

    total_price: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Total price (quantity * unit_price)"
    )

    tax_applicable: bool = Field(default=True)

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Line item creation timestamp"
    )
