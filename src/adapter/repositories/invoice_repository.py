"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Optional, List
from datetime import datetime
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import Invoice


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        statement = select(Invoice).where(Invoice.id == invoice_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list_by_subscription(self, subscription_id: str) -> List[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.subscription_id == subscription_id)
            .order_by(Invoice.created_at.desc(), Invoice.id.desc())
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def generate_invoice_number(self) -> str:
        """
        Generate the next invoice number of the current month

        Format: INV-YYYYMM-NNNNNN (e.g., INV-202401-000001)

        Returns:
            Unique invoice number string
        """
        prefix = f"INV-{datetime.utcnow():%Y%m}-"

        statement = (
            select(func.max(Invoice.invoice_number))
            .where(Invoice.invoice_number.like(f"{prefix}%"))
        )
        result = await self.session.execute(statement)
        max_number = result.scalar_one_or_none()

        sequence = int(max_number.split("-")[-1]) + 1 if max_number else 1

        return f"{prefix}{sequence:06d}"
