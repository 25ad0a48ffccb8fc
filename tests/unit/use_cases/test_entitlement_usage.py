"""Unit tests for entitlement use cases

Tests cover:
- CheckEntitlement (read-only)
- UseEntitlement guarded consumption
- ReleaseEntitlement
- GetEntitlements ownership check
- InitializeEntitlements quota sizing
"""

import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.subscriptions.check_entitlement import CheckEntitlement
from src.app.use_cases.subscriptions.dtos import EntitlementCommandDTO, GetEntitlementsQueryDTO
from src.app.use_cases.subscriptions.get_entitlements import GetEntitlements
from src.app.use_cases.subscriptions.initialize_entitlements import InitializeEntitlements
from src.app.use_cases.subscriptions.release_entitlement import ReleaseEntitlement
from src.app.use_cases.subscriptions.use_entitlement import UseEntitlement
from src.domain.entitlement import Entitlement
from src.domain.subscription_tier import BillingCycle
from src.domain.tier_config import TierConfig


def bounded(used: int, total: int = 5) -> Entitlement:
    return Entitlement(
        id=11,
        subscription_id="sub_123",
        category_id=3,
        quota_total=total,
        quota_used=used,
        quota_remaining=total - used,
    )


def unlimited(used: int = 0) -> Entitlement:
    return Entitlement(
        id=12,
        subscription_id="sub_123",
        category_id=4,
        quota_total=None,
        quota_used=used,
        quota_remaining=None,
    )


@pytest.fixture
def mock_entitlement_repo():
    return MagicMock()


@pytest.mark.asyncio
class TestCheckEntitlement:
    async def test_bounded_with_remaining_quota(self, mock_entitlement_repo):
        mock_entitlement_repo.get = AsyncMock(return_value=bounded(used=3))

        result = await CheckEntitlement(mock_entitlement_repo).execute(
            EntitlementCommandDTO(subscription_id="sub_123", category_id=3, quantity=2)
        )

        assert result.is_ok()
        assert result.value.has_access is True
        assert result.value.quota_remaining == 2

    async def test_bounded_without_enough_quota(self, mock_entitlement_repo):
        mock_entitlement_repo.get = AsyncMock(return_value=bounded(used=4))

        result = await CheckEntitlement(mock_entitlement_repo).execute(
            EntitlementCommandDTO(subscription_id="sub_123", category_id=3, quantity=2)
        )

        assert result.value.has_access is False
        assert result.value.is_included is True

    async def test_unlimited(self, mock_entitlement_repo):
        mock_entitlement_repo.get = AsyncMock(return_value=unlimited(used=40))

        result = await CheckEntitlement(mock_entitlement_repo).execute(
            EntitlementCommandDTO(subscription_id="sub_123", category_id=4, quantity=100)
        )

        assert result.value.has_access is True
        assert result.value.is_unlimited is True
        assert result.value.quota_used == 40

    async def test_not_included(self, mock_entitlement_repo):
        mock_entitlement_repo.get = AsyncMock(return_value=None)

        result = await CheckEntitlement(mock_entitlement_repo).execute(
            EntitlementCommandDTO(subscription_id="sub_123", category_id=9)
        )

        assert result.is_ok()
        assert result.value.has_access is False
        assert result.value.is_included is False


@pytest.mark.asyncio
class TestUseEntitlement:
    async def test_consumes_bounded_quota(self, mock_uow, mock_entitlement_repo):
        """
        Given: Entitlement with 5 total, 1 used
        When: 1 unit is used
        Then: Guarded decrement runs, updated row returned, committed
        """
        # Arrange
        mock_entitlement_repo.get = AsyncMock(side_effect=[bounded(used=1), bounded(used=2)])
        mock_entitlement_repo.consume = AsyncMock(return_value=True)

        # Act
        result = await UseEntitlement(mock_uow, mock_entitlement_repo).execute(
            EntitlementCommandDTO(subscription_id="sub_123", category_id=3)
        )

        # Assert
        assert result.is_ok()
        assert result.value.quota_used == 2
        assert result.value.quota_remaining == 3
        assert result.value.quota_used + result.value.quota_remaining == result.value.quota_total

        args, kwargs = mock_entitlement_repo.consume.call_args
        assert args == (11, 1)
        assert kwargs["bounded"] is True
        assert isinstance(kwargs["used_at"], datetime)
        mock_entitlement_repo.get.assert_any_call("sub_123", 3, for_update=True)
        mock_uow.commit.assert_called_once()

    async def test_quota_exceeded_leaves_state_unchanged(self, mock_uow, mock_entitlement_repo):
        """
        Given: quota_total=5, quota_used=5, quota_remaining=0
        When: 1 unit is used
        Then: QUOTA_EXCEEDED, rolled back, nothing committed
        """
        mock_entitlement_repo.get = AsyncMock(return_value=bounded(used=5))
        mock_entitlement_repo.consume = AsyncMock(return_value=False)

        result = await UseEntitlement(mock_uow, mock_entitlement_repo).execute(
            EntitlementCommandDTO(subscription_id="sub_123", category_id=3)
        )

        assert result.is_err()
        assert result.error.code == "QUOTA_EXCEEDED"
        assert result.error.kind == "limit_exceeded"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()

    async def test_unlimited_only_tracks_usage(self, mock_uow, mock_entitlement_repo):
        mock_entitlement_repo.get = AsyncMock(side_effect=[unlimited(used=0), unlimited(used=3)])
        mock_entitlement_repo.consume = AsyncMock(return_value=True)

        result = await UseEntitlement(mock_uow, mock_entitlement_repo).execute(
            EntitlementCommandDTO(subscription_id="sub_123", category_id=4, quantity=3)
        )

        assert result.is_ok()
        assert result.value.is_unlimited is True
        assert result.value.quota_remaining is None
        assert mock_entitlement_repo.consume.call_args.kwargs["bounded"] is False

    async def test_service_not_included(self, mock_uow, mock_entitlement_repo):
        mock_entitlement_repo.get = AsyncMock(return_value=None)
        mock_entitlement_repo.consume = AsyncMock()

        result = await UseEntitlement(mock_uow, mock_entitlement_repo).execute(
            EntitlementCommandDTO(subscription_id="sub_123", category_id=9)
        )

        assert result.error.code == "SERVICE_NOT_INCLUDED"
        mock_entitlement_repo.consume.assert_not_called()

    async def test_unexpected_error_rolls_back(self, mock_uow, mock_entitlement_repo):
        mock_entitlement_repo.get = AsyncMock(side_effect=Exception("deadlock"))

        result = await UseEntitlement(mock_uow, mock_entitlement_repo).execute(
            EntitlementCommandDTO(subscription_id="sub_123", category_id=3)
        )

        assert result.error.code == "USE_ENTITLEMENT_FAILED"
        mock_uow.rollback.assert_called_once()


@pytest.mark.asyncio
class TestReleaseEntitlement:
    async def test_releases_quota(self, mock_uow, mock_entitlement_repo):
        mock_entitlement_repo.get = AsyncMock(side_effect=[bounded(used=2), bounded(used=1)])
        mock_entitlement_repo.release = AsyncMock(return_value=True)

        result = await ReleaseEntitlement(mock_uow, mock_entitlement_repo).execute(
            EntitlementCommandDTO(subscription_id="sub_123", category_id=3)
        )

        assert result.is_ok()
        assert result.value.quota_remaining == 4
        mock_entitlement_repo.release.assert_called_once_with(11, 1, bounded=True)
        mock_uow.commit.assert_called_once()

    async def test_cannot_release_more_than_used(self, mock_uow, mock_entitlement_repo):
        mock_entitlement_repo.get = AsyncMock(return_value=bounded(used=1))
        mock_entitlement_repo.release = AsyncMock(return_value=False)

        result = await ReleaseEntitlement(mock_uow, mock_entitlement_repo).execute(
            EntitlementCommandDTO(subscription_id="sub_123", category_id=3, quantity=2)
        )

        assert result.error.code == "INVALID_QUOTA_RELEASE"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
class TestGetEntitlements:
    async def test_lists_owned_subscription_entitlements(
        self, mock_entitlement_repo, subscription_factory
    ):
        subscription_repo = MagicMock()
        subscription_repo.get_by_id_for_user = AsyncMock(return_value=subscription_factory())
        mock_entitlement_repo.list_by_subscription = AsyncMock(
            return_value=[bounded(used=0), unlimited()]
        )

        result = await GetEntitlements(subscription_repo, mock_entitlement_repo).execute(
            GetEntitlementsQueryDTO(subscription_id="sub_123", user_id="user_123")
        )

        assert result.is_ok()
        assert [e.category_id for e in result.value.entitlements] == [3, 4]

    async def test_other_users_subscription_is_not_found(self, mock_entitlement_repo):
        subscription_repo = MagicMock()
        subscription_repo.get_by_id_for_user = AsyncMock(return_value=None)

        result = await GetEntitlements(subscription_repo, mock_entitlement_repo).execute(
            GetEntitlementsQueryDTO(subscription_id="sub_123", user_id="intruder")
        )

        assert result.error.code == "SUBSCRIPTION_NOT_FOUND"
        assert result.error.kind == "not_found"


@pytest.mark.asyncio
class TestInitializeEntitlements:
    async def test_sizes_quota_by_cycle_and_skips_excluded(self, mock_entitlement_repo):
        """
        Given: Three tier configs, one excluded, one unlimited
        When: Entitlements are initialized for an annual cycle
        Then: Two rows created with annual quotas
        """
        catalog_repo = MagicMock()
        catalog_repo.get_tier_configs = AsyncMock(
            return_value=[
                TierConfig(tier_id=2, species_id=1, life_stage_id=2, category_id=1,
                           quota_monthly=2, quota_annual=24, is_included=True),
                TierConfig(tier_id=2, species_id=1, life_stage_id=2, category_id=2,
                           quota_monthly=None, quota_annual=None, is_included=True),
                TierConfig(tier_id=2, species_id=1, life_stage_id=2, category_id=3,
                           quota_monthly=1, quota_annual=12, is_included=False),
            ]
        )
        mock_entitlement_repo.create = AsyncMock(side_effect=lambda e: e)
        annual = BillingCycle(id=2, cycle_code="annual", cycle_name="Annual", months=12)
        reset = datetime(2025, 6, 1)

        entitlements = await InitializeEntitlements(catalog_repo, mock_entitlement_repo).initialize(
            "sub_123", 2, 1, 2, annual, reset
        )

        assert len(entitlements) == 2
        assert entitlements[0].quota_total == 24
        assert entitlements[0].quota_remaining == 24
        assert entitlements[0].quota_used == 0
        assert entitlements[0].reset_date == reset
        assert entitlements[1].is_unlimited
        catalog_repo.get_tier_configs.assert_called_once_with(2, 1, 2)
