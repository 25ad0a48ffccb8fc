"""SQLAlchemy Invoice Line Repository Implementation"""

from typing import List, Sequence
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.invoice_line import InvoiceLine


class SqlAlchemyInvoiceLineRepository(InvoiceLineRepository):
    """SQLAlchemy implementation of InvoiceLineRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_lines(self, invoice_id: int, lines: Sequence[InvoiceLine]) -> List[InvoiceLine]:
        for line in lines:
            line.invoice_id = invoice_id
            self.session.add(line)

        await self.session.flush()
        return list(lines)

    async def get_by_invoice_id(self, invoice_id: int) -> List[InvoiceLine]:
        statement = (
            select(InvoiceLine)
            .where(InvoiceLine.invoice_id == invoice_id)
            .order_by(InvoiceLine.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
