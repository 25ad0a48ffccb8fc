"""CalculatePrice Use Case

Prices a tier for a billing cycle, optionally applying a promo code.
"""

from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.catalog_repository import CatalogRepository
from src.domain.errors import DomainError, NotFoundError
from src.domain.promo_code import DiscountType
from src.domain.subscription_tier import HUNDRED, cycle_pricing
from .dtos import CalculatePriceCommandDTO, PriceBreakdownDTO, PromoDecisionDTO
from .validate_promo_code import ValidatePromoCode


class CalculatePrice:
    """
    Use Case: Calculate subscription price

    Business Rules:
    1. base_price = tier monthly price, x12 for annual cycles
    2. cycle_discount = base_price * discount_percentage / 100
    3. Promo discount (percentage of subtotal, capped by max_discount_amount,
       or a fixed amount) is clamped so final_price never goes below zero
    4. tax_amount = final_price * tax_percentage / 100
    5. Amounts keep full Decimal precision

    Flow:
    1. Load billing cycle (INVALID_BILLING_CYCLE)
    2. Load active tier (INVALID_TIER)
    3. Apply cycle multiplier and discount
    4. Validate and apply promo code (only when a user is known)
    5. Apply tax
    """

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        promo_validator: ValidatePromoCode,
        tax_percentage: Decimal = Decimal("18"),
    ):
        self.catalog_repo = catalog_repo
        self.promo_validator = promo_validator
        self.tax_percentage = Decimal(str(tax_percentage))

    async def calculate(
        self,
        tier_id: int,
        billing_cycle_id: int,
        promo_code: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> PriceBreakdownDTO:
        """
        Calculate the price breakdown, raising DomainError on failure

        Args:
            tier_id: Subscription tier
            billing_cycle_id: Billing cycle
            promo_code: Optional promo code
            user_id: Redeeming user, required for the promo code to apply

        Returns:
            PriceBreakdownDTO
        """
        # Step 1: Billing cycle first, then the tier
        cycle = await self.catalog_repo.get_billing_cycle(billing_cycle_id)
        if not cycle:
            raise NotFoundError("INVALID_BILLING_CYCLE", "Invalid billing cycle")

        tier = await self.catalog_repo.get_tier(tier_id)
        if not tier:
            raise NotFoundError("INVALID_TIER", "Invalid tier")

        # Step 2: Cycle multiplier and discount
        base_price, cycle_discount = cycle_pricing(tier.base_price, cycle)
        subtotal = base_price - cycle_discount

        # Step 3: Promo code
        promo_discount = Decimal("0")
        decision = None
        if promo_code and user_id:
            decision = await self.promo_validator.validate(
                promo_code, user_id, tier_id, billing_cycle_id
            )
            promo_discount = self._promo_discount(decision, subtotal)

        # Step 4: Tax
        final_price = subtotal - promo_discount
        tax_amount = final_price * self.tax_percentage / HUNDRED

        return PriceBreakdownDTO(
            tier_id=tier.id,
            tier_name=tier.tier_name,
            billing_cycle_id=cycle.id,
            billing_cycle_name=cycle.cycle_name,
            billing_cycle_months=cycle.months,
            base_price=base_price,
            cycle_discount=cycle_discount,
            subtotal=subtotal,
            promo_code=decision.promo_code if decision else None,
            promo_id=decision.promo_id if decision else None,
            promo_discount=promo_discount,
            total_discount=cycle_discount + promo_discount,
            final_price=final_price,
            tax_percentage=self.tax_percentage,
            tax_amount=tax_amount,
            total_amount=final_price + tax_amount,
        )

    async def execute(self, command: CalculatePriceCommandDTO) -> Result[PriceBreakdownDTO]:
        """
        Execute price calculation (read-only)

        Args:
            command: CalculatePriceCommandDTO

        Returns:
            Result[PriceBreakdownDTO]: Success with breakdown or error
        """
        try:
            breakdown = await self.calculate(
                command.tier_id,
                command.billing_cycle_id,
                command.promo_code,
                command.user_id,
            )
            return Return.ok(breakdown)
        except DomainError as e:
            return Return.err(e.to_error())
        except Exception as e:
            return Return.err(
                Error(
                    code="CALCULATE_PRICE_FAILED",
                    message="Failed to calculate price",
                    reason=str(e),
                )
            )

    @staticmethod
    def _promo_discount(decision: PromoDecisionDTO, subtotal: Decimal) -> Decimal:
        if decision.discount_type == DiscountType.PERCENTAGE.value:
            discount = subtotal * decision.discount_value / HUNDRED
            if decision.max_discount_amount:
                discount = min(discount, decision.max_discount_amount)
        else:
            discount = decision.discount_value

        # A fixed discount larger than the subtotal only brings the price to zero
        return min(discount, subtotal)
