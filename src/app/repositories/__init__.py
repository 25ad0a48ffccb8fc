from .catalog_repository import CatalogRepository
from .pet_repository import PetRepository
from .subscription_repository import SubscriptionRepository
from .entitlement_repository import EntitlementRepository
from .subscription_history_repository import SubscriptionHistoryRepository
from .promo_code_repository import PromoCodeRepository
from .invoice_repository import InvoiceRepository
from .invoice_line_repository import InvoiceLineRepository

__all__ = [
    "CatalogRepository",
    "PetRepository",
    "SubscriptionRepository",
    "EntitlementRepository",
    "SubscriptionHistoryRepository",
    "PromoCodeRepository",
    "InvoiceRepository",
    "InvoiceLineRepository",
]
