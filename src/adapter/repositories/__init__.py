from .catalog_repository import SqlAlchemyCatalogRepository
from .pet_repository import SqlAlchemyPetRepository
from .subscription_repository import SqlAlchemySubscriptionRepository
from .entitlement_repository import SqlAlchemyEntitlementRepository
from .subscription_history_repository import SqlAlchemySubscriptionHistoryRepository
from .promo_code_repository import SqlAlchemyPromoCodeRepository
from .invoice_repository import SqlAlchemyInvoiceRepository
from .invoice_line_repository import SqlAlchemyInvoiceLineRepository

__all__ = [
    "SqlAlchemyCatalogRepository",
    "SqlAlchemyPetRepository",
    "SqlAlchemySubscriptionRepository",
    "SqlAlchemyEntitlementRepository",
    "SqlAlchemySubscriptionHistoryRepository",
    "SqlAlchemyPromoCodeRepository",
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyInvoiceLineRepository",
]
