"""Use case wiring for the HTTP layer

Every request gets repositories and a Unit of Work over its own session.
"""

from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.repositories import (
    SqlAlchemyCatalogRepository,
    SqlAlchemyEntitlementRepository,
    SqlAlchemyInvoiceLineRepository,
    SqlAlchemyInvoiceRepository,
    SqlAlchemyPetRepository,
    SqlAlchemyPromoCodeRepository,
    SqlAlchemySubscriptionHistoryRepository,
    SqlAlchemySubscriptionRepository,
)
from src.adapter.services import SqlAlchemyInvoiceService, SqlAlchemyUnitOfWork
from src.app.use_cases.subscriptions import (
    CalculatePrice,
    CancelSubscription,
    CreateSubscription,
    DowngradeSubscription,
    InitializeEntitlements,
    PauseSubscription,
    ResumeSubscription,
    ToggleAutoRenewal,
    UpgradeSubscription,
    ValidatePromoCode,
)


def price_calculator(session: AsyncSession) -> CalculatePrice:
    return CalculatePrice(
        catalog_repo=SqlAlchemyCatalogRepository(session),
        promo_validator=ValidatePromoCode(SqlAlchemyPromoCodeRepository(session)),
        tax_percentage=ApplicationConfig.TAX_PERCENTAGE,
    )


def entitlement_initializer(session: AsyncSession) -> InitializeEntitlements:
    return InitializeEntitlements(
        catalog_repo=SqlAlchemyCatalogRepository(session),
        entitlement_repo=SqlAlchemyEntitlementRepository(session),
    )


def invoice_service(session: AsyncSession) -> SqlAlchemyInvoiceService:
    return SqlAlchemyInvoiceService(
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        invoice_line_repo=SqlAlchemyInvoiceLineRepository(session),
        currency=ApplicationConfig.CURRENCY,
    )


def create_subscription(session: AsyncSession) -> CreateSubscription:
    return CreateSubscription(
        uow=SqlAlchemyUnitOfWork(session),
        pet_repo=SqlAlchemyPetRepository(session),
        subscription_repo=SqlAlchemySubscriptionRepository(session),
        catalog_repo=SqlAlchemyCatalogRepository(session),
        promo_repo=SqlAlchemyPromoCodeRepository(session),
        history_repo=SqlAlchemySubscriptionHistoryRepository(session),
        price_calculator=price_calculator(session),
        entitlement_initializer=entitlement_initializer(session),
        invoice_service=invoice_service(session),
    )


def upgrade_subscription(session: AsyncSession) -> UpgradeSubscription:
    return UpgradeSubscription(
        uow=SqlAlchemyUnitOfWork(session),
        subscription_repo=SqlAlchemySubscriptionRepository(session),
        catalog_repo=SqlAlchemyCatalogRepository(session),
        pet_repo=SqlAlchemyPetRepository(session),
        entitlement_repo=SqlAlchemyEntitlementRepository(session),
        history_repo=SqlAlchemySubscriptionHistoryRepository(session),
        price_calculator=price_calculator(session),
        entitlement_initializer=entitlement_initializer(session),
        invoice_service=invoice_service(session),
    )


def downgrade_subscription(session: AsyncSession) -> DowngradeSubscription:
    return DowngradeSubscription(
        uow=SqlAlchemyUnitOfWork(session),
        subscription_repo=SqlAlchemySubscriptionRepository(session),
        catalog_repo=SqlAlchemyCatalogRepository(session),
        history_repo=SqlAlchemySubscriptionHistoryRepository(session),
        price_calculator=price_calculator(session),
    )


def pause_subscription(session: AsyncSession) -> PauseSubscription:
    return PauseSubscription(
        uow=SqlAlchemyUnitOfWork(session),
        subscription_repo=SqlAlchemySubscriptionRepository(session),
        history_repo=SqlAlchemySubscriptionHistoryRepository(session),
        max_pause_days=ApplicationConfig.MAX_PAUSE_DAYS,
    )


def resume_subscription(session: AsyncSession) -> ResumeSubscription:
    return ResumeSubscription(
        uow=SqlAlchemyUnitOfWork(session),
        subscription_repo=SqlAlchemySubscriptionRepository(session),
        history_repo=SqlAlchemySubscriptionHistoryRepository(session),
    )


def cancel_subscription(session: AsyncSession) -> CancelSubscription:
    return CancelSubscription(
        uow=SqlAlchemyUnitOfWork(session),
        subscription_repo=SqlAlchemySubscriptionRepository(session),
        history_repo=SqlAlchemySubscriptionHistoryRepository(session),
    )


def toggle_auto_renewal(session: AsyncSession) -> ToggleAutoRenewal:
    return ToggleAutoRenewal(
        uow=SqlAlchemyUnitOfWork(session),
        subscription_repo=SqlAlchemySubscriptionRepository(session),
        history_repo=SqlAlchemySubscriptionHistoryRepository(session),
    )
