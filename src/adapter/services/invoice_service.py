"""Invoice Service Implementation

Creates invoices and their line items on the caller's session.
"""

import logging
from decimal import Decimal
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.app.services.invoice_service import InvoiceService, CreateInvoiceCommand
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_line import InvoiceLine

logger = logging.getLogger(__name__)


class SqlAlchemyInvoiceService(InvoiceService):
    """
    Transactional invoice writer

    Business Rules:
    - subtotal = sum(quantity * unit_price) over all lines
    - tax is charged on (subtotal - discount) for tax-applicable lines
    - total = (subtotal - discount) + tax
    - Nothing is committed here; the calling use case owns the transaction
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
        currency: str = "INR",
    ):
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.currency = currency

    async def create_invoice(self, command: CreateInvoiceCommand) -> Invoice:
        subtotal = Decimal("0")
        taxable = Decimal("0")
        lines = []

        for item in command.line_items:
            line_total = item.quantity * item.unit_price
            subtotal += line_total
            if item.tax_applicable:
                taxable += line_total
            lines.append(
                InvoiceLine(
                    invoice_id=0,
                    item_type=item.item_type,
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total_price=line_total,
                    tax_applicable=item.tax_applicable,
                )
            )

        taxable_after_discount = max(taxable - command.discount_amount, Decimal("0"))
        tax_amount = taxable_after_discount * command.tax_percentage / Decimal("100")
        total_amount = subtotal - command.discount_amount + tax_amount

        invoice = Invoice(
            user_id=command.user_id,
            subscription_id=command.subscription_id,
            invoice_number=await self.invoice_repo.generate_invoice_number(),
            invoice_type=command.invoice_type,
            status=InvoiceStatus.PENDING,
            subtotal=subtotal,
            tax_percentage=command.tax_percentage,
            tax_amount=tax_amount,
            discount_amount=command.discount_amount,
            total_amount=total_amount,
            currency=self.currency,
            due_date=command.due_date,
            notes=command.notes,
        )
        invoice = await self.invoice_repo.create(invoice)
        await self.invoice_line_repo.add_lines(invoice.id, lines)

        logger.info(
            f"Invoice {invoice.invoice_number} created for user {command.user_id}: "
            f"{total_amount} {self.currency}"
        )
        return invoice
