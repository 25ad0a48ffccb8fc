"""Integration tests for the subscription lifecycle against a real database"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from sqlmodel import select

from src.adapter.repositories import (
    SqlAlchemyEntitlementRepository,
    SqlAlchemyInvoiceLineRepository,
    SqlAlchemyInvoiceRepository,
    SqlAlchemySubscriptionHistoryRepository,
)
from src.adapter.services import SqlAlchemyUnitOfWork
from src.api import factories
from src.app.use_cases.subscriptions import UseEntitlement
from src.app.use_cases.subscriptions.dtos import (
    CancelSubscriptionCommandDTO,
    ChangeTierCommandDTO,
    CreateSubscriptionCommandDTO,
    EntitlementCommandDTO,
    PauseSubscriptionCommandDTO,
    SubscriptionQueryDTO,
)
from src.domain import Invoice, PromoCode, PromoCodeUsage, Subscription, SubscriptionStatus

USER_ID = "user_123"
GROOMING = 1
VET_CHAT = 2


async def subscribe(db_session, catalog, pet="dog", tier="plus", cycle="monthly", promo_code=None):
    result = await factories.create_subscription(db_session).execute(
        CreateSubscriptionCommandDTO(
            user_id=USER_ID,
            pet_id=catalog[pet],
            tier_id=catalog[tier],
            billing_cycle_id=catalog[cycle],
            promo_code=promo_code,
        )
    )
    return result


class TestCreateSubscriptionIntegration:
    @pytest.mark.asyncio
    async def test_create_persists_subscription_entitlements_history_and_invoice(
        self, db_session, catalog
    ):
        """Test annual Plus subscription is priced, invoiced and entitled"""
        # Act
        result = await subscribe(db_session, catalog, cycle="annual")

        # Assert
        assert result.is_ok()
        response = result.value
        subscription_id = response.subscription.subscription_id
        assert response.pricing.base_price == Decimal("11988")
        assert response.pricing.final_price == Decimal("10789.2")
        assert response.invoice_number.startswith("INV-")

        stored = await db_session.get(Subscription, subscription_id)
        assert stored.status == SubscriptionStatus.ACTIVE
        assert stored.final_price == Decimal("10789.2")
        assert stored.current_period_end - stored.current_period_start >= timedelta(days=365)

        entitlements = await SqlAlchemyEntitlementRepository(db_session).list_by_subscription(
            subscription_id
        )
        assert [e.category_id for e in entitlements] == [GROOMING, VET_CHAT]
        assert entitlements[0].quota_total == 24
        assert entitlements[0].quota_remaining == 24
        assert entitlements[1].is_unlimited

        history = await SqlAlchemySubscriptionHistoryRepository(db_session).list_by_subscription(
            subscription_id
        )
        assert [h.action for h in history] == ["created"]

        invoice = await SqlAlchemyInvoiceRepository(db_session).get_by_id(response.invoice_id)
        assert invoice.subtotal == Decimal("11988")
        assert invoice.discount_amount == Decimal("1198.8")
        assert invoice.tax_amount == Decimal("1942.056")
        assert invoice.total_amount == Decimal("12731.256")
        lines = await SqlAlchemyInvoiceLineRepository(db_session).get_by_invoice_id(invoice.id)
        assert [line.description for line in lines] == ["Plus Plan - Annual"]

    @pytest.mark.asyncio
    async def test_one_live_subscription_per_pet(self, db_session, catalog):
        """Test a second subscription for the same pet is rejected and nothing is written"""
        first = await subscribe(db_session, catalog)
        assert first.is_ok()

        second = await subscribe(db_session, catalog, tier="eternal")

        assert second.is_err()
        assert second.error.code == "ACTIVE_SUBSCRIPTION_EXISTS"
        rows = (await db_session.execute(
            select(Subscription).where(Subscription.pet_id == catalog["dog"])
        )).scalars().all()
        assert len(rows) == 1

    @pytest.mark.asyncio
    async def test_other_users_pet_is_not_found(self, db_session, catalog):
        result = await subscribe(db_session, catalog, pet="other_users_dog")

        assert result.error.code == "PET_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_promo_redemption_is_counted_and_limited_per_user(
        self, db_session, catalog, reload
    ):
        """Test promo usage is recorded once and a second redemption hits the per-user cap"""
        first = await subscribe(db_session, catalog, promo_code="welcome10")

        assert first.is_ok()
        assert first.value.pricing.promo_discount == Decimal("99.9")
        assert first.value.subscription.promo_code == "WELCOME10"
        promo = await reload(PromoCode, catalog["welcome"])
        assert promo.current_uses == 1
        usages = (await db_session.execute(select(PromoCodeUsage))).scalars().all()
        assert len(usages) == 1

        second = await subscribe(db_session, catalog, pet="second_dog", promo_code="WELCOME10")

        assert second.is_err()
        assert second.error.code == "PROMO_LIMIT_REACHED"
        promo = await reload(PromoCode, catalog["welcome"])
        assert promo.current_uses == 1

    @pytest.mark.asyncio
    async def test_fixed_promo_never_makes_price_negative(self, db_session, catalog):
        result = await subscribe(db_session, catalog, promo_code="FLAT5000")

        assert result.is_ok()
        assert result.value.subscription.final_price == Decimal("0")
        invoice = await db_session.get(Invoice, result.value.invoice_id)
        assert invoice.total_amount == Decimal("0")

    @pytest.mark.asyncio
    async def test_promo_not_applicable_to_tier(self, db_session, catalog):
        result = await subscribe(db_session, catalog, tier="eternal", promo_code="FLAT5000")

        assert result.error.code == "PROMO_NOT_APPLICABLE"
        rows = (await db_session.execute(select(Subscription))).scalars().all()
        assert rows == []


class TestEntitlementUsageIntegration:
    @pytest.mark.asyncio
    async def test_quota_exhaustion_leaves_state_unchanged(self, db_session, catalog):
        """Test using more than the quota fails and keeps used + remaining == total"""
        created = await subscribe(db_session, catalog)
        subscription_id = created.value.subscription.subscription_id
        entitlement_repo = SqlAlchemyEntitlementRepository(db_session)
        use_entitlement = UseEntitlement(SqlAlchemyUnitOfWork(db_session), entitlement_repo)
        command = EntitlementCommandDTO(subscription_id=subscription_id, category_id=GROOMING)

        first = await use_entitlement.execute(command)
        second = await use_entitlement.execute(command)
        third = await use_entitlement.execute(command)

        assert first.is_ok()
        assert second.value.quota_used == 2
        assert second.value.quota_remaining == 0
        assert third.is_err()
        assert third.error.code == "QUOTA_EXCEEDED"

        entitlement = await entitlement_repo.get(subscription_id, GROOMING)
        assert entitlement.quota_used == 2
        assert entitlement.quota_remaining == 0
        assert entitlement.quota_used + entitlement.quota_remaining == entitlement.quota_total

    @pytest.mark.asyncio
    async def test_unlimited_entitlement_tracks_usage(self, db_session, catalog):
        created = await subscribe(db_session, catalog)
        subscription_id = created.value.subscription.subscription_id
        use_entitlement = UseEntitlement(
            SqlAlchemyUnitOfWork(db_session), SqlAlchemyEntitlementRepository(db_session)
        )

        result = await use_entitlement.execute(
            EntitlementCommandDTO(subscription_id=subscription_id, category_id=VET_CHAT, quantity=25)
        )

        assert result.is_ok()
        assert result.value.quota_used == 25
        assert result.value.quota_remaining is None


class TestTierChangeIntegration:
    @pytest.mark.asyncio
    async def test_upgrade_resets_entitlements_for_new_tier(self, db_session, catalog):
        """Test upgrade replaces entitlements with the new tier's quotas"""
        created = await subscribe(db_session, catalog)
        subscription_id = created.value.subscription.subscription_id
        entitlement_repo = SqlAlchemyEntitlementRepository(db_session)
        await UseEntitlement(SqlAlchemyUnitOfWork(db_session), entitlement_repo).execute(
            EntitlementCommandDTO(subscription_id=subscription_id, category_id=GROOMING)
        )

        result = await factories.upgrade_subscription(db_session).execute(
            ChangeTierCommandDTO(
                subscription_id=subscription_id, user_id=USER_ID, new_tier_id=catalog["eternal"]
            )
        )

        assert result.is_ok()
        assert result.value.new_price == Decimal("1899")
        assert result.value.prorated_charge > Decimal("0")
        assert result.value.invoice_id is not None

        entitlements = await entitlement_repo.list_by_subscription(subscription_id)
        assert len(entitlements) == 3
        grooming = next(e for e in entitlements if e.category_id == GROOMING)
        assert grooming.quota_total == 5
        assert grooming.quota_used == 0

        stored = await db_session.get(Subscription, subscription_id)
        assert stored.tier_id == catalog["eternal"]

        invoices = await SqlAlchemyInvoiceRepository(db_session).list_by_subscription(subscription_id)
        assert [i.id for i in invoices][0] == result.value.invoice_id
        assert len(invoices) == 2

    @pytest.mark.asyncio
    async def test_invalid_upgrade_leaves_subscription_untouched(self, db_session, catalog, reload):
        created = await subscribe(db_session, catalog)
        subscription_id = created.value.subscription.subscription_id

        result = await factories.upgrade_subscription(db_session).execute(
            ChangeTierCommandDTO(
                subscription_id=subscription_id, user_id=USER_ID, new_tier_id=catalog["basic"]
            )
        )

        assert result.error.code == "INVALID_UPGRADE"
        stored = await reload(Subscription, subscription_id)
        assert stored.tier_id == catalog["plus"]
        assert stored.final_price == Decimal("999")

    @pytest.mark.asyncio
    async def test_downgrade_only_records_history(self, db_session, catalog, reload):
        created = await subscribe(db_session, catalog)
        subscription_id = created.value.subscription.subscription_id

        result = await factories.downgrade_subscription(db_session).execute(
            ChangeTierCommandDTO(
                subscription_id=subscription_id, user_id=USER_ID, new_tier_id=catalog["basic"]
            )
        )

        assert result.is_ok()
        stored = await reload(Subscription, subscription_id)
        assert stored.tier_id == catalog["plus"]
        assert result.value.effective_date == stored.next_billing_date
        history = await SqlAlchemySubscriptionHistoryRepository(db_session).list_by_subscription(
            subscription_id
        )
        assert history[0].action == "downgraded"
        assert history[0].notes == "Scheduled for next billing cycle"


class TestPauseCancelIntegration:
    @pytest.mark.asyncio
    async def test_pause_resume_cancel_flow(self, db_session, catalog, reload):
        """Test pause, resume and end-of-period cancel each write a history row"""
        created = await subscribe(db_session, catalog)
        subscription_id = created.value.subscription.subscription_id
        query = SubscriptionQueryDTO(subscription_id=subscription_id, user_id=USER_ID)

        paused = await factories.pause_subscription(db_session).execute(
            PauseSubscriptionCommandDTO(
                subscription_id=subscription_id,
                user_id=USER_ID,
                reason="Travelling",
                resume_date=datetime.utcnow() + timedelta(days=14),
            )
        )
        assert paused.value.status == "paused"

        too_long = await factories.pause_subscription(db_session).execute(
            PauseSubscriptionCommandDTO(
                subscription_id=subscription_id,
                user_id=USER_ID,
                resume_date=datetime.utcnow() + timedelta(days=14),
            )
        )
        assert too_long.error.code == "INVALID_SUBSCRIPTION_STATUS"

        resumed = await factories.resume_subscription(db_session).execute(query)
        assert resumed.value.status == "active"
        assert resumed.value.pause_reason is None

        cancelled = await factories.cancel_subscription(db_session).execute(
            CancelSubscriptionCommandDTO(
                subscription_id=subscription_id, user_id=USER_ID, reason="Moving"
            )
        )
        assert cancelled.is_ok()
        assert cancelled.value.refund_amount == Decimal("0")

        stored = await reload(Subscription, subscription_id)
        assert stored.status == SubscriptionStatus.CANCELLED
        assert stored.auto_renew is False
        assert stored.has_access(datetime.utcnow())

        history = await SqlAlchemySubscriptionHistoryRepository(db_session).list_by_subscription(
            subscription_id
        )
        assert sorted(h.action for h in history) == ["cancelled", "created", "paused", "resumed"]

        # A new subscription is allowed once the previous one is cancelled
        again = await subscribe(db_session, catalog)
        assert again.is_ok()

    @pytest.mark.asyncio
    async def test_immediate_cancel_refunds_and_ends_access(self, db_session, catalog, reload):
        created = await subscribe(db_session, catalog)
        subscription_id = created.value.subscription.subscription_id

        result = await factories.cancel_subscription(db_session).execute(
            CancelSubscriptionCommandDTO(
                subscription_id=subscription_id, user_id=USER_ID, immediate=True
            )
        )

        assert result.is_ok()
        assert result.value.refund_amount > Decimal("0")
        assert result.value.refund_amount <= Decimal("999")
        stored = await reload(Subscription, subscription_id)
        assert not stored.has_access(datetime.utcnow() + timedelta(seconds=1))
