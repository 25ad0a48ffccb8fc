from .base import BaseModel, generate_uuid
from .subscription_tier import SubscriptionTier, BillingCycle
from .tier_config import TierConfig
from .subscription import Subscription, SubscriptionStatus, LIVE_STATUSES
from .entitlement import Entitlement
from .subscription_history import SubscriptionHistory, HistoryAction
from .promo_code import PromoCode, PromoCodeUsage, DiscountType
from .pet import Pet, LifeStage
from .invoice import Invoice, InvoiceStatus, InvoiceType
from .invoice_line import InvoiceLine

__all__ = [
    "BaseModel",
    "generate_uuid",
    "SubscriptionTier",
    "BillingCycle",
    "TierConfig",
    "Subscription",
    "SubscriptionStatus",
    "LIVE_STATUSES",
    "Entitlement",
    "SubscriptionHistory",
    "HistoryAction",
    "PromoCode",
    "PromoCodeUsage",
    "DiscountType",
    "Pet",
    "LifeStage",
    "Invoice",
    "InvoiceStatus",
    "InvoiceType",
    "InvoiceLine",
]
