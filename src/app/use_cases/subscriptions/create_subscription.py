"""CreateSubscription Use Case

Subscribes a pet to a tier and billing cycle in a single transaction.
"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.invoice_service import InvoiceService, CreateInvoiceCommand, InvoiceLineItem
from src.app.repositories.catalog_repository import CatalogRepository
from src.app.repositories.pet_repository import PetRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.promo_code_repository import PromoCodeRepository
from src.app.repositories.subscription_history_repository import SubscriptionHistoryRepository
from src.domain.errors import DomainError, ConflictError, NotFoundError, ValidationFailureError
from src.domain.invoice import InvoiceType
from src.domain.promo_code import PromoCodeUsage
from src.domain.proration import add_months
from src.domain.subscription import Subscription, SubscriptionStatus
from src.domain.subscription_history import SubscriptionHistory, HistoryAction
from .calculate_price import CalculatePrice
from .initialize_entitlements import InitializeEntitlements
from .dtos import CreateSubscriptionCommandDTO, CreateSubscriptionResponseDTO
from .mappers import to_entitlement_dto, to_subscription_dto

logger = logging.getLogger(__name__)


class CreateSubscription:
    """
    Use Case: Create a subscription for a pet

    Business Rules:
    1. The pet must belong to the user, be active and have a life stage
    2. A pet has at most one active/trial subscription
    3. Price comes from CalculatePrice (promo validated there)
    4. The first period runs for cycle.months calendar months from now
    5. Entitlements are sized for the pet's species and life stage
    6. Promo redemption increments current_uses with a guarded UPDATE
    7. Subscription, entitlements, promo usage, history and invoice are
       committed together or not at all

    Flow:
    1. Validate and lock the pet
    2. Reject if the pet already has a live subscription
    3. Calculate price
    4. Insert subscription
    5. Initialize entitlements
    6. Record promo usage
    7. Append 'created' history
    8. Raise invoice
    9. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        pet_repo: PetRepository,
        subscription_repo: SubscriptionRepository,
        catalog_repo: CatalogRepository,
        promo_repo: PromoCodeRepository,
        history_repo: SubscriptionHistoryRepository,
        price_calculator: CalculatePrice,
        entitlement_initializer: InitializeEntitlements,
        invoice_service: InvoiceService,
    ):
        self.uow = uow
        self.pet_repo = pet_repo
        self.subscription_repo = subscription_repo
        self.catalog_repo = catalog_repo
        self.promo_repo = promo_repo
        self.history_repo = history_repo
        self.price_calculator = price_calculator
        self.entitlement_initializer = entitlement_initializer
        self.invoice_service = invoice_service

    async def execute(
        self, command: CreateSubscriptionCommandDTO
    ) -> Result[CreateSubscriptionResponseDTO]:
        """
        Execute subscription creation

        Args:
            command: CreateSubscriptionCommandDTO

        Returns:
            Result[CreateSubscriptionResponseDTO]: Success with subscription,
            pricing, entitlements and invoice, or error
        """
        try:
            # Step 1: Pet must be owned by the user, active and staged; the row
            # lock serializes concurrent subscribes for the same pet
            pet = await self.pet_repo.get_owned_active(
                command.pet_id, command.user_id, for_update=True
            )
            if not pet or pet.life_stage_id is None:
                raise NotFoundError("PET_NOT_FOUND", "Pet not found")

            # Step 2: One live subscription per pet
            existing = await self.subscription_repo.get_live_for_pet(pet.id)
            if existing:
                raise ConflictError(
                    "ACTIVE_SUBSCRIPTION_EXISTS", "Pet already has an active subscription"
                )

            # Step 3: Price (validates tier, cycle and promo)
            pricing = await self.price_calculator.calculate(
                command.tier_id,
                command.billing_cycle_id,
                command.promo_code,
                command.user_id,
            )
            cycle = await self.catalog_repo.get_billing_cycle(command.billing_cycle_id)

            # Step 4: Insert subscription
            now = datetime.utcnow()
            period_end = add_months(now, cycle.months)

            subscription = Subscription(
                user_id=command.user_id,
                pet_id=pet.id,
                tier_id=command.tier_id,
                billing_cycle_id=command.billing_cycle_id,
                status=SubscriptionStatus.ACTIVE,
                start_date=now,
                end_date=period_end,
                current_period_start=now,
                current_period_end=period_end,
                next_billing_date=period_end,
                base_price=pricing.base_price,
                discount_applied=pricing.total_discount,
                final_price=pricing.final_price,
                promo_code=pricing.promo_code,
                auto_renew=True,
            )
            subscription = await self.subscription_repo.create(subscription)

            # Step 5: Entitlements for the pet's current species and life stage
            entitlements = await self.entitlement_initializer.initialize(
                subscription.id,
                command.tier_id,
                pet.species_id,
                pet.life_stage_id,
                cycle,
                period_end,
            )

            # Step 6: Promo redemption
            if pricing.promo_id is not None:
                await self.promo_repo.record_usage(
                    PromoCodeUsage(
                        promo_id=pricing.promo_id,
                        user_id=command.user_id,
                        subscription_id=subscription.id,
                        discount_applied=pricing.promo_discount,
                        used_at=now,
                    )
                )
                if not await self.promo_repo.increment_uses(pricing.promo_id):
                    raise ValidationFailureError(
                        "INVALID_PROMO_CODE", "Invalid or expired promo code"
                    )

            # Step 7: History
            await self.history_repo.append(
                SubscriptionHistory(
                    subscription_id=subscription.id,
                    action=HistoryAction.CREATED,
                    new_tier_id=command.tier_id,
                    new_billing_cycle_id=command.billing_cycle_id,
                    new_price=pricing.final_price,
                    performed_by=command.user_id,
                    effective_date=now,
                )
            )

            # Step 8: Invoice on the same transaction
            invoice = await self.invoice_service.create_invoice(
                CreateInvoiceCommand(
                    user_id=command.user_id,
                    subscription_id=subscription.id,
                    invoice_type=InvoiceType.SUBSCRIPTION,
                    line_items=[
                        InvoiceLineItem(
                            item_type="subscription",
                            description=f"{pricing.tier_name} Plan - {pricing.billing_cycle_name}",
                            unit_price=pricing.base_price,
                        )
                    ],
                    tax_percentage=pricing.tax_percentage,
                    discount_amount=pricing.total_discount,
                    due_date=now,
                )
            )

            response = CreateSubscriptionResponseDTO(
                subscription=to_subscription_dto(subscription),
                pricing=pricing,
                entitlements=[to_entitlement_dto(e) for e in entitlements],
                invoice_id=invoice.id,
                invoice_number=invoice.invoice_number,
            )

            # Step 9: Commit everything at once
            await self.uow.commit()

            logger.info(
                f"Subscription {subscription.id} created for pet {pet.id} "
                f"(tier={command.tier_id}, cycle={command.billing_cycle_id})"
            )
            return Return.ok(response)

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Subscription creation failed for pet {command.pet_id}: {e}")
            return Return.err(
                Error(
                    code="CREATE_SUBSCRIPTION_FAILED",
                    message="Failed to create subscription",
                    reason=str(e),
                )
            )
