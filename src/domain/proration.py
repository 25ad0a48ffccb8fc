"""Billing period arithmetic

Pure functions shared by upgrade proration and immediate-cancel refunds.
"""

import math
from calendar import monthrange
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP

DAY = timedelta(days=1)
CENT = Decimal("0.01")


def to_money(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def add_months(value: datetime, months: int) -> datetime:
    """Calendar month addition; the day is clamped to the target month's length"""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def days_between(start: datetime, end: datetime) -> int:
    """Whole days from start to end, rounded up; never negative"""
    return max(math.ceil((end - start) / DAY), 0)


def period_fraction(period_start: datetime, period_end: datetime, now: datetime) -> tuple[int, int]:
    """(remaining_days, total_days) of the current period at `now`"""
    total_days = max(days_between(period_start, period_end), 1)
    remaining_days = min(days_between(now, period_end), total_days)
    return remaining_days, total_days


def unused_amount(price: Decimal, remaining_days: int, total_days: int) -> Decimal:
    return Decimal(price) * remaining_days / total_days


def upgrade_charge(
    current_price: Decimal,
    new_price: Decimal,
    remaining_days: int,
    total_days: int,
) -> Decimal:
    """Charge for the rest of the period at the new price, minus the unused old price"""
    charge = unused_amount(new_price, remaining_days, total_days) - unused_amount(
        current_price, remaining_days, total_days
    )
    return to_money(max(charge, Decimal("0")))


def cancellation_refund(final_price: Decimal, remaining_days: int, total_days: int) -> Decimal:
    return to_money(unused_amount(final_price, remaining_days, total_days))
