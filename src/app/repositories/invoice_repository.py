"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from src.domain.invoice import Invoice


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Provides access to invoice data for subscription billing.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_subscription(self, subscription_id: str) -> List[Invoice]:
        """
        Retrieve invoices raised for a subscription, newest first

        Args:
            subscription_id: Subscription identifier

        Returns:
            List of invoices
        """
        pass

    @abstractmethod
    async def generate_invoice_number(self) -> str:
        """
        Generate a unique invoice number

        Format: INV-YYYYMM-NNNNNN (e.g., INV-202401-000001)

        Returns:
            Unique invoice number string
        """
        pass
