"""Invoice Service Interface

Transactional collaborator: invoices are created inside the caller's open
transaction and commit or roll back together with the subscription change.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.invoice import Invoice, InvoiceType


class InvoiceLineItem(BaseModel):
    item_type: str = "subscription"
    description: str
    quantity: Decimal = Decimal("1")
    unit_price: Decimal
    tax_applicable: bool = True


class CreateInvoiceCommand(BaseModel):
    """Invoice request raised by a lifecycle operation"""

    user_id: str
    subscription_id: Optional[str] = None
    invoice_type: InvoiceType = InvoiceType.SUBSCRIPTION
    line_items: List[InvoiceLineItem] = Field(..., min_length=1)
    tax_percentage: Decimal
    discount_amount: Decimal = Decimal("0")
    due_date: datetime
    notes: Optional[str] = None


class InvoiceService(ABC):
    @abstractmethod
    async def create_invoice(self, command: CreateInvoiceCommand) -> Invoice:
        """
        Create an invoice with its line items without committing

        Args:
            command: Invoice details

        Returns:
            Created Invoice
        """
        pass
