"""Shared helpers for subscription use cases"""

from datetime import datetime, timezone
from typing import List, Optional, Sequence
from src.app.repositories.catalog_repository import CatalogRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.entitlement import Entitlement
from src.domain.errors import NotFoundError
from src.domain.subscription import Subscription, SubscriptionStatus
from src.domain.subscription_history import SubscriptionHistory, HistoryAction
from src.domain.subscription_tier import BillingCycle, SubscriptionTier, cycle_pricing
from .dtos import (
    EntitlementDTO,
    HistoryEntryDTO,
    PricingOptionDTO,
    SubscriptionDTO,
    TierCatalogQueryDTO,
    TierDTO,
    TierFeatureDTO,
)


async def load_owned_subscription(
    subscription_repo: SubscriptionRepository,
    subscription_id: str,
    user_id: str,
    for_update: bool = False,
) -> Subscription:
    """Load a subscription owned by user_id or raise SUBSCRIPTION_NOT_FOUND"""
    subscription = await subscription_repo.get_by_id_for_user(
        subscription_id, user_id, for_update=for_update
    )
    if not subscription:
        raise NotFoundError("SUBSCRIPTION_NOT_FOUND", "Subscription not found")
    return subscription


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_subscription_dto(subscription: Subscription) -> SubscriptionDTO:
    return SubscriptionDTO(
        subscription_id=subscription.id,
        user_id=subscription.user_id,
        pet_id=subscription.pet_id,
        tier_id=subscription.tier_id,
        billing_cycle_id=subscription.billing_cycle_id,
        status=SubscriptionStatus(subscription.status).value,
        start_date=subscription.start_date,
        end_date=subscription.end_date,
        current_period_start=subscription.current_period_start,
        current_period_end=subscription.current_period_end,
        next_billing_date=subscription.next_billing_date,
        base_price=subscription.base_price,
        discount_applied=subscription.discount_applied,
        final_price=subscription.final_price,
        promo_code=subscription.promo_code,
        auto_renew=subscription.auto_renew,
        pause_reason=subscription.pause_reason,
        paused_at=subscription.paused_at,
        resume_date=subscription.resume_date,
        cancellation_date=subscription.cancellation_date,
        cancellation_reason=subscription.cancellation_reason,
        cancelled_by=subscription.cancelled_by,
        created_at=subscription.created_at,
        updated_at=subscription.updated_at,
    )


def to_entitlement_dto(entitlement: Entitlement) -> EntitlementDTO:
    return EntitlementDTO(
        entitlement_id=entitlement.id,
        subscription_id=entitlement.subscription_id,
        category_id=entitlement.category_id,
        quota_total=entitlement.quota_total,
        quota_used=entitlement.quota_used,
        quota_remaining=entitlement.quota_remaining,
        is_unlimited=entitlement.is_unlimited,
        reset_date=entitlement.reset_date,
        last_used_date=entitlement.last_used_date,
    )


def to_history_dto(entry: SubscriptionHistory) -> HistoryEntryDTO:
    return HistoryEntryDTO(
        history_id=entry.id,
        subscription_id=entry.subscription_id,
        action=HistoryAction(entry.action).value,
        old_tier_id=entry.old_tier_id,
        new_tier_id=entry.new_tier_id,
        old_billing_cycle_id=entry.old_billing_cycle_id,
        new_billing_cycle_id=entry.new_billing_cycle_id,
        old_price=entry.old_price,
        new_price=entry.new_price,
        price_difference=entry.price_difference,
        prorated_amount=entry.prorated_amount,
        performed_by=entry.performed_by,
        effective_date=entry.effective_date,
        reason=entry.reason,
        notes=entry.notes,
        created_at=entry.created_at,
    )


async def load_tier_features(
    catalog_repo: CatalogRepository, tier_id: int, query: TierCatalogQueryDTO
) -> Optional[List[TierFeatureDTO]]:
    """Category quotas of a tier for a species and life stage; None unless both are given"""
    if query.species_id is None or query.life_stage_id is None:
        return None

    configs = await catalog_repo.get_tier_configs(tier_id, query.species_id, query.life_stage_id)
    return [
        TierFeatureDTO(
            category_id=config.category_id,
            is_included=config.is_included,
            quota_monthly=config.quota_monthly,
            quota_annual=config.quota_annual,
        )
        for config in configs
    ]


def to_tier_dto(
    tier: SubscriptionTier,
    cycles: Sequence[BillingCycle],
    features: Optional[List[TierFeatureDTO]] = None,
) -> TierDTO:
    options = []
    for cycle in cycles:
        base_price, cycle_discount = cycle_pricing(tier.base_price, cycle)
        options.append(
            PricingOptionDTO(
                billing_cycle_id=cycle.id,
                cycle_code=cycle.cycle_code,
                cycle_name=cycle.cycle_name,
                months=cycle.months,
                discount_percentage=cycle.discount_percentage,
                base_price=base_price,
                final_price=base_price - cycle_discount,
            )
        )

    return TierDTO(
        tier_id=tier.id,
        tier_code=tier.tier_code,
        tier_name=tier.tier_name,
        base_price=tier.base_price,
        rank=tier.rank,
        display_order=tier.display_order,
        pricing_options=options,
        features=features,
    )
