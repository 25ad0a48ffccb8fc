from .unit_of_work import UnitOfWork
from .invoice_service import InvoiceService, CreateInvoiceCommand, InvoiceLineItem
from .audit_service import AuditService, AuditEntry

__all__ = [
    "UnitOfWork",
    "InvoiceService",
    "CreateInvoiceCommand",
    "InvoiceLineItem",
    "AuditService",
    "AuditEntry",
]
