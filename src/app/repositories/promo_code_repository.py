"""Promo Code Repository Interface

Defines the contract for promo code lookups and redemption bookkeeping.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from src.domain.promo_code import PromoCode, PromoCodeUsage


class PromoCodeRepository(ABC):
    """Repository interface for PromoCode persistence"""

    @abstractmethod
    async def get_valid_by_code(self, promo_code: str, now: datetime) -> Optional[PromoCode]:
        """
        Retrieve a redeemable promo code

        Matches only active codes inside their validity window that are
        still under max_uses_total.

        Args:
            promo_code: Upper-case promo code
            now: Reference time for the validity window

        Returns:
            PromoCode if redeemable, None otherwise
        """
        pass

    @abstractmethod
    async def count_user_usage(self, promo_id: int, user_id: str) -> int:
        """
        Count how many times a user redeemed a promo code

        Returns:
            Number of PromoCodeUsage rows for (promo_id, user_id)
        """
        pass

    @abstractmethod
    async def record_usage(self, usage: PromoCodeUsage) -> PromoCodeUsage:
        pass

    @abstractmethod
    async def increment_uses(self, promo_id: int) -> bool:
        """
        Increment current_uses by one in a single guarded UPDATE

        Returns:
            True if incremented, False if max_uses_total was already reached
        """
        pass
