"""Invoice Line Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Sequence
from src.domain.invoice_line import InvoiceLine


class InvoiceLineRepository(ABC):
    """Repository interface for invoice line items"""

    @abstractmethod
    async def add_lines(self, invoice_id: int, lines: Sequence[InvoiceLine]) -> List[InvoiceLine]:
        """
        Attach line items to an invoice

        Args:
            invoice_id: Invoice the lines belong to
            lines: InvoiceLine entities (invoice_id is set by the repository)

        Returns:
            Persisted InvoiceLine items
        """
        pass

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: int) -> List[InvoiceLine]:
        pass
