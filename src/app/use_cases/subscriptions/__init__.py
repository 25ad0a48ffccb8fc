"""Subscription domain use cases"""
from .calculate_price import CalculatePrice
from .validate_promo_code import ValidatePromoCode
from .initialize_entitlements import InitializeEntitlements
from .check_entitlement import CheckEntitlement
from .use_entitlement import UseEntitlement
from .release_entitlement import ReleaseEntitlement
from .get_entitlements import GetEntitlements
from .create_subscription import CreateSubscription
from .upgrade_subscription import UpgradeSubscription
from .downgrade_subscription import DowngradeSubscription
from .pause_subscription import PauseSubscription
from .resume_subscription import ResumeSubscription
from .cancel_subscription import CancelSubscription
from .toggle_auto_renewal import ToggleAutoRenewal
from .get_subscription import GetSubscription
from .get_subscription_history import GetSubscriptionHistory
from .preview_renewal import PreviewRenewal
from .list_tiers import ListTiers
from .get_tier_details import GetTierDetails
from .list_user_subscriptions import ListUserSubscriptions
from .dtos import (
    CalculatePriceCommandDTO,
    PriceBreakdownDTO,
    ValidatePromoCommandDTO,
    PromoDecisionDTO,
    TierCatalogQueryDTO,
    TierDetailsQueryDTO,
    PricingOptionDTO,
    TierFeatureDTO,
    TierDTO,
    TierListDTO,
    EntitlementCommandDTO,
    EntitlementCheckDTO,
    EntitlementDTO,
    GetEntitlementsQueryDTO,
    EntitlementListDTO,
    SubscriptionDTO,
    SubscriptionDetailDTO,
    SubscriptionQueryDTO,
    CreateSubscriptionCommandDTO,
    CreateSubscriptionResponseDTO,
    ChangeTierCommandDTO,
    UpgradeSubscriptionResponseDTO,
    DowngradeSubscriptionResponseDTO,
    PauseSubscriptionCommandDTO,
    CancelSubscriptionCommandDTO,
    CancelSubscriptionResponseDTO,
    ToggleAutoRenewalCommandDTO,
    HistoryEntryDTO,
    SubscriptionHistoryResponseDTO,
    RenewalPreviewDTO,
    ListUserSubscriptionsQueryDTO,
    SubscriptionListDTO,
)

__all__ = [
    "CalculatePrice",
    "ValidatePromoCode",
    "InitializeEntitlements",
    "CheckEntitlement",
    "UseEntitlement",
    "ReleaseEntitlement",
    "GetEntitlements",
    "CreateSubscription",
    "UpgradeSubscription",
    "DowngradeSubscription",
    "PauseSubscription",
    "ResumeSubscription",
    "CancelSubscription",
    "ToggleAutoRenewal",
    "GetSubscription",
    "GetSubscriptionHistory",
    "PreviewRenewal",
    "ListTiers",
    "GetTierDetails",
    "ListUserSubscriptions",
    "CalculatePriceCommandDTO",
    "PriceBreakdownDTO",
    "ValidatePromoCommandDTO",
    "PromoDecisionDTO",
    "TierCatalogQueryDTO",
    "TierDetailsQueryDTO",
    "PricingOptionDTO",
    "TierFeatureDTO",
    "TierDTO",
    "TierListDTO",
    "EntitlementCommandDTO",
    "EntitlementCheckDTO",
    "EntitlementDTO",
    "GetEntitlementsQueryDTO",
    "EntitlementListDTO",
    "SubscriptionDTO",
    "SubscriptionDetailDTO",
    "SubscriptionQueryDTO",
    "CreateSubscriptionCommandDTO",
    "CreateSubscriptionResponseDTO",
    "ChangeTierCommandDTO",
    "UpgradeSubscriptionResponseDTO",
    "DowngradeSubscriptionResponseDTO",
    "PauseSubscriptionCommandDTO",
    "CancelSubscriptionCommandDTO",
    "CancelSubscriptionResponseDTO",
    "ToggleAutoRenewalCommandDTO",
    "HistoryEntryDTO",
    "SubscriptionHistoryResponseDTO",
    "RenewalPreviewDTO",
    "ListUserSubscriptionsQueryDTO",
    "SubscriptionListDTO",
]
