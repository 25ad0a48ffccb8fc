from .unit_of_work import SqlAlchemyUnitOfWork
from .invoice_service import SqlAlchemyInvoiceService
from .audit_service import (
    LoggingAuditService,
    WebhookAuditService,
    CompositeAuditService,
    create_audit_service,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyInvoiceService",
    "LoggingAuditService",
    "WebhookAuditService",
    "CompositeAuditService",
    "create_audit_service",
]
