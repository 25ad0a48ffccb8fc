"""ValidatePromoCode Use Case

Decides whether a promo code may be redeemed by a user for a tier.
"""

from datetime import datetime
from libs.result import Result, Return, Error
from src.app.repositories.promo_code_repository import PromoCodeRepository
from src.domain.errors import DomainError, LimitExceededError, ValidationFailureError
from src.domain.promo_code import DiscountType
from .dtos import ValidatePromoCommandDTO, PromoDecisionDTO


def normalize_promo_code(promo_code: str) -> str:
    return promo_code.strip().upper()


class ValidatePromoCode:
    """
    Use Case: Validate a promo code

    Business Rules:
    1. Codes are matched case-insensitively (stored upper-case)
    2. Only active codes inside [valid_from, valid_until] with global uses left
    3. A user may redeem a code at most max_uses_per_user times,
       regardless of how many global uses remain
    4. tier_ids restricts the code to the listed tiers (None = any tier)
    5. Validation never records a usage; CreateSubscription does that
    """

    def __init__(self, promo_repo: PromoCodeRepository):
        self.promo_repo = promo_repo

    async def validate(
        self, promo_code: str, user_id: str, tier_id: int, billing_cycle_id: int
    ) -> PromoDecisionDTO:
        """
        Validate a promo code, raising DomainError on rejection

        Args:
            promo_code: Code as typed by the user
            user_id: Redeeming user
            tier_id: Tier the code is applied to
            billing_cycle_id: Billing cycle (currently no cycle restrictions)

        Returns:
            PromoDecisionDTO with the discount terms

        Raises:
            ValidationFailureError: INVALID_PROMO_CODE, PROMO_NOT_APPLICABLE
            LimitExceededError: PROMO_LIMIT_REACHED
        """
        code = normalize_promo_code(promo_code)

        promo = await self.promo_repo.get_valid_by_code(code, datetime.utcnow()) if code else None
        if not promo:
            raise ValidationFailureError("INVALID_PROMO_CODE", "Invalid or expired promo code")

        usage_count = await self.promo_repo.count_user_usage(promo.id, user_id)
        if usage_count >= promo.max_uses_per_user:
            raise LimitExceededError("PROMO_LIMIT_REACHED", "Promo code usage limit reached")

        if promo.tier_ids is not None and tier_id not in promo.tier_ids:
            raise ValidationFailureError(
                "PROMO_NOT_APPLICABLE", "Promo code not applicable to this tier"
            )

        return PromoDecisionDTO(
            promo_id=promo.id,
            promo_code=promo.promo_code,
            discount_type=DiscountType(promo.discount_type).value,
            discount_value=promo.discount_value,
            max_discount_amount=promo.max_discount_amount,
        )

    async def execute(self, command: ValidatePromoCommandDTO) -> Result[PromoDecisionDTO]:
        try:
            decision = await self.validate(
                command.promo_code, command.user_id, command.tier_id, command.billing_cycle_id
            )
            return Return.ok(decision)
        except DomainError as e:
            return Return.err(e.to_error())
        except Exception as e:
            return Return.err(
                Error(
                    code="VALIDATE_PROMO_CODE_FAILED",
                    message="Failed to validate promo code",
                    reason=str(e),
                )
            )
