"""UpgradeSubscription Use Case

Moves an active subscription to a higher tier immediately, with proration.
"""

import logging
from datetime import datetime
from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.invoice_service import InvoiceService, CreateInvoiceCommand, InvoiceLineItem
from src.app.repositories.catalog_repository import CatalogRepository
from src.app.repositories.pet_repository import PetRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.entitlement_repository import EntitlementRepository
from src.app.repositories.subscription_history_repository import SubscriptionHistoryRepository
from src.domain.errors import (
    DomainError,
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
)
from src.domain.invoice import InvoiceType
from src.domain.proration import period_fraction, upgrade_charge
from src.domain.subscription import SubscriptionStatus
from src.domain.subscription_history import SubscriptionHistory, HistoryAction
from .calculate_price import CalculatePrice
from .initialize_entitlements import InitializeEntitlements
from .dtos import ChangeTierCommandDTO, UpgradeSubscriptionResponseDTO
from .mappers import load_owned_subscription

logger = logging.getLogger(__name__)


class UpgradeSubscription:
    """
    Use Case: Upgrade subscription tier

    Business Rules:
    1. Only active subscriptions can be upgraded
    2. The new tier's rank must be strictly higher than the current one
    3. New price = CalculatePrice(new tier, cycle) without promo
    4. Prorated charge = max(0, new price share - unused current price share)
       over the remaining days of the current period
    5. Entitlements are deleted and re-created for the new tier (usage resets)
    6. A failed validation leaves the subscription untouched

    Flow:
    1. Lock subscription (SELECT FOR UPDATE)
    2. Validate status and tier ranks
    3. Price the new tier and compute proration
    4. Update subscription in place
    5. Re-initialize entitlements until current_period_end
    6. Append 'upgraded' history
    7. Invoice the prorated charge (when > 0)
    8. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        catalog_repo: CatalogRepository,
        pet_repo: PetRepository,
        entitlement_repo: EntitlementRepository,
        history_repo: SubscriptionHistoryRepository,
        price_calculator: CalculatePrice,
        entitlement_initializer: InitializeEntitlements,
        invoice_service: InvoiceService,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.catalog_repo = catalog_repo
        self.pet_repo = pet_repo
        self.entitlement_repo = entitlement_repo
        self.history_repo = history_repo
        self.price_calculator = price_calculator
        self.entitlement_initializer = entitlement_initializer
        self.invoice_service = invoice_service

    async def execute(self, command: ChangeTierCommandDTO) -> Result[UpgradeSubscriptionResponseDTO]:
        try:
            # Step 1: Lock subscription
            subscription = await load_owned_subscription(
                self.subscription_repo, command.subscription_id, command.user_id, for_update=True
            )

            # Step 2: Validate status and direction
            if subscription.status != SubscriptionStatus.ACTIVE:
                raise InvalidStateError(
                    "INVALID_SUBSCRIPTION_STATUS", "Can only upgrade active subscriptions"
                )

            current_tier = await self.catalog_repo.get_tier(subscription.tier_id, active_only=False)
            new_tier = await self.catalog_repo.get_tier(command.new_tier_id)
            if not new_tier or not current_tier:
                raise NotFoundError("INVALID_TIER", "Invalid tier")

            if new_tier.rank <= current_tier.rank:
                raise InvalidTransitionError(
                    "INVALID_UPGRADE", "New tier must be higher than current tier"
                )

            # Step 3: Price and proration
            billing_cycle_id = command.new_billing_cycle_id or subscription.billing_cycle_id
            pricing = await self.price_calculator.calculate(new_tier.id, billing_cycle_id)
            cycle = await self.catalog_repo.get_billing_cycle(billing_cycle_id)

            now = datetime.utcnow()
            remaining_days, total_days = period_fraction(
                subscription.current_period_start, subscription.current_period_end, now
            )
            old_price = subscription.final_price
            prorated_charge = upgrade_charge(
                old_price, pricing.final_price, remaining_days, total_days
            )

            old_tier_id = subscription.tier_id
            old_billing_cycle_id = subscription.billing_cycle_id

            # Step 4: Update in place
            subscription.tier_id = new_tier.id
            subscription.billing_cycle_id = billing_cycle_id
            subscription.base_price = pricing.base_price
            subscription.discount_applied = pricing.total_discount
            subscription.final_price = pricing.final_price
            subscription = await self.subscription_repo.update(subscription)

            # Step 5: Reset entitlements for the new tier
            pet = await self.pet_repo.get_by_id(subscription.pet_id)
            if not pet or pet.life_stage_id is None:
                raise NotFoundError("PET_NOT_FOUND", "Pet not found")

            await self.entitlement_repo.delete_by_subscription(subscription.id)
            await self.entitlement_initializer.initialize(
                subscription.id,
                new_tier.id,
                pet.species_id,
                pet.life_stage_id,
                cycle,
                subscription.current_period_end,
            )

            # Step 6: History
            await self.history_repo.append(
                SubscriptionHistory(
                    subscription_id=subscription.id,
                    action=HistoryAction.UPGRADED,
                    old_tier_id=old_tier_id,
                    new_tier_id=new_tier.id,
                    old_billing_cycle_id=old_billing_cycle_id,
                    new_billing_cycle_id=billing_cycle_id,
                    old_price=old_price,
                    new_price=pricing.final_price,
                    price_difference=pricing.final_price - old_price,
                    prorated_amount=prorated_charge,
                    performed_by=command.user_id,
                    effective_date=now,
                )
            )

            # Step 7: Invoice the prorated difference
            invoice_id = None
            if prorated_charge > Decimal("0"):
                invoice = await self.invoice_service.create_invoice(
                    CreateInvoiceCommand(
                        user_id=command.user_id,
                        subscription_id=subscription.id,
                        invoice_type=InvoiceType.UPGRADE,
                        line_items=[
                            InvoiceLineItem(
                                item_type="upgrade",
                                description=(
                                    f"Upgrade to {pricing.tier_name} - "
                                    f"{remaining_days} of {total_days} days"
                                ),
                                unit_price=prorated_charge,
                            )
                        ],
                        tax_percentage=pricing.tax_percentage,
                        due_date=now,
                    )
                )
                invoice_id = invoice.id

            # Step 8: Commit
            await self.uow.commit()

            logger.info(
                f"Subscription {subscription.id} upgraded from tier {old_tier_id} "
                f"to {new_tier.id}, prorated charge {prorated_charge}"
            )
            return Return.ok(
                UpgradeSubscriptionResponseDTO(
                    subscription_id=subscription.id,
                    prorated_charge=prorated_charge,
                    new_price=pricing.final_price,
                    remaining_days=remaining_days,
                    invoice_id=invoice_id,
                    message="Subscription upgraded successfully. Prorated amount will be charged.",
                )
            )

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Upgrade failed for subscription {command.subscription_id}: {e}")
            return Return.err(
                Error(
                    code="UPGRADE_SUBSCRIPTION_FAILED",
                    message="Failed to upgrade subscription",
                    reason=str(e),
                )
            )
