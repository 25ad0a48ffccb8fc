"""Unit tests for billing period arithmetic"""

from datetime import datetime, timedelta
from decimal import Decimal

from src.domain.proration import (
    add_months,
    cancellation_refund,
    days_between,
    period_fraction,
    to_money,
    upgrade_charge,
)


class TestAddMonths:
    """Test calendar month addition"""

    def test_adds_one_month(self):
        assert add_months(datetime(2024, 3, 15, 10, 30), 1) == datetime(2024, 4, 15, 10, 30)

    def test_rolls_over_year(self):
        assert add_months(datetime(2024, 11, 5), 3) == datetime(2025, 2, 5)

    def test_adds_twelve_months(self):
        assert add_months(datetime(2024, 6, 1), 12) == datetime(2025, 6, 1)

    def test_clamps_day_to_end_of_short_month(self):
        """
        Given: January 31st
        When: One month is added
        Then: Lands on the last day of February (leap year aware)
        """
        assert add_months(datetime(2024, 1, 31), 1) == datetime(2024, 2, 29)
        assert add_months(datetime(2023, 1, 31), 1) == datetime(2023, 2, 28)


class TestPeriodFraction:
    """Test remaining/total day computation"""

    def test_ten_days_into_thirty_day_period(self):
        start = datetime(2024, 4, 1)
        end = start + timedelta(days=30)
        now = start + timedelta(days=10)

        assert period_fraction(start, end, now) == (20, 30)

    def test_partial_days_round_up(self):
        start = datetime(2024, 4, 1)
        end = start + timedelta(days=30)
        now = start + timedelta(days=10, hours=6)

        assert period_fraction(start, end, now) == (20, 30)

    def test_after_period_end_has_no_remaining_days(self):
        start = datetime(2024, 4, 1)
        end = start + timedelta(days=30)

        assert period_fraction(start, end, end + timedelta(days=3)) == (0, 30)

    def test_remaining_never_exceeds_total(self):
        start = datetime(2024, 4, 1)
        end = start + timedelta(days=30)

        assert period_fraction(start, end, start - timedelta(days=5)) == (30, 30)

    def test_days_between_is_never_negative(self):
        assert days_between(datetime(2024, 5, 1), datetime(2024, 4, 1)) == 0


class TestRefundAndUpgradeCharge:
    """Test money computations"""

    def test_immediate_cancel_refund(self):
        """
        Given: final_price 900, 20 of 30 days left
        When: Refund is computed
        Then: 600.00
        """
        assert cancellation_refund(Decimal("900"), 20, 30) == Decimal("600.00")

    def test_refund_rounds_half_up_to_cents(self):
        assert cancellation_refund(Decimal("100"), 1, 3) == Decimal("33.33")
        assert cancellation_refund(Decimal("100"), 2, 3) == Decimal("66.67")

    def test_upgrade_charge_is_price_difference_share(self):
        assert upgrade_charge(Decimal("999"), Decimal("1999"), 15, 30) == Decimal("500.00")

    def test_upgrade_charge_never_negative(self):
        assert upgrade_charge(Decimal("1999"), Decimal("999"), 15, 30) == Decimal("0.00")

    def test_to_money(self):
        assert to_money(Decimal("1942.056")) == Decimal("1942.06")
