import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def subscription_factory():
    """Build Subscription rows ten days into a thirty day period"""
    from datetime import datetime, timedelta
    from decimal import Decimal
    from src.domain.subscription import Subscription, SubscriptionStatus

    def _make(**overrides):
        now = datetime.utcnow()
        period_start = now - timedelta(days=10)
        period_end = period_start + timedelta(days=30)
        values = dict(
            id="sub_123",
            user_id="user_123",
            pet_id=42,
            tier_id=2,
            billing_cycle_id=1,
            status=SubscriptionStatus.ACTIVE,
            start_date=period_start,
            end_date=period_end,
            current_period_start=period_start,
            current_period_end=period_end,
            next_billing_date=period_end,
            base_price=Decimal("999"),
            discount_applied=Decimal("0"),
            final_price=Decimal("999"),
            auto_renew=True,
        )
        values.update(overrides)
        return Subscription(**values)

    return _make
