from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.audit_service import LoggingAuditService
from src.depends import get_audit_service, get_session
from src.domain import (
    BillingCycle,
    DiscountType,
    LifeStage,
    Pet,
    PromoCode,
    SubscriptionTier,
    TierConfig,
)

USER_ID = "user_123"
OTHER_USER_ID = "user_456"

# Service categories used by the seeded tier configs
GROOMING = 1
VET_CHAT = 2
DENTAL = 3


@pytest_asyncio.fixture(scope="function")
async def engine():
    """In-memory SQLite database shared by every connection of a test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_audit_service] = lambda: LoggingAuditService()

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def reload(db_session):
    """Re-read a row from the database, bypassing stale identity map state"""

    async def _reload(model, row_id):
        stmt = select(model).where(model.id == row_id).execution_options(populate_existing=True)
        result = await db_session.execute(stmt)
        return result.scalar_one_or_none()

    return _reload


async def seed_catalog(db_session):
    """
    Seed tiers, billing cycles, dog life stages, pets, tier configs and promo codes

    Returns plain ids so tests never touch expired ORM instances.
    """
    now = datetime.utcnow()
    today = now.date()

    basic = SubscriptionTier(tier_code="basic", tier_name="Basic", base_price=Decimal("499"),
                             rank=1, display_order=1)
    plus = SubscriptionTier(tier_code="plus", tier_name="Plus", base_price=Decimal("999"),
                            rank=2, display_order=2)
    eternal = SubscriptionTier(tier_code="eternal", tier_name="Eternal", base_price=Decimal("1899"),
                               rank=3, display_order=3)
    monthly = BillingCycle(cycle_code="monthly", cycle_name="Monthly", months=1,
                           discount_percentage=Decimal("0"))
    annual = BillingCycle(cycle_code="annual", cycle_name="Annual", months=12,
                          discount_percentage=Decimal("10"))
    db_session.add_all([basic, plus, eternal, monthly, annual])

    puppy = LifeStage(species_id=1, life_stage_name="Puppy", min_age_months=None, max_age_months=12)
    adult = LifeStage(species_id=1, life_stage_name="Adult", min_age_months=12, max_age_months=84)
    senior = LifeStage(species_id=1, life_stage_name="Senior", min_age_months=84, max_age_months=None)
    db_session.add_all([puppy, adult, senior])
    await db_session.flush()

    dog = Pet(owner_id=USER_ID, name="Bruno", species_id=1, life_stage_id=adult.id,
              date_of_birth=date(today.year - 3, 1, 1))
    second_dog = Pet(owner_id=USER_ID, name="Luna", species_id=1, life_stage_id=adult.id,
                     date_of_birth=date(today.year - 4, 1, 1))
    other_users_dog = Pet(owner_id=OTHER_USER_ID, name="Rex", species_id=1, life_stage_id=adult.id,
                          date_of_birth=date(today.year - 2, 1, 1))
    db_session.add_all([dog, second_dog, other_users_dog])

    db_session.add_all([
        TierConfig(tier_id=plus.id, species_id=1, life_stage_id=adult.id, category_id=GROOMING,
                   quota_monthly=2, quota_annual=24),
        TierConfig(tier_id=plus.id, species_id=1, life_stage_id=adult.id, category_id=VET_CHAT,
                   quota_monthly=None, quota_annual=None),
        TierConfig(tier_id=plus.id, species_id=1, life_stage_id=adult.id, category_id=DENTAL,
                   quota_monthly=1, quota_annual=12, is_included=False),
        TierConfig(tier_id=eternal.id, species_id=1, life_stage_id=adult.id, category_id=GROOMING,
                   quota_monthly=5, quota_annual=60),
        TierConfig(tier_id=eternal.id, species_id=1, life_stage_id=adult.id, category_id=VET_CHAT,
                   quota_monthly=None, quota_annual=None),
        TierConfig(tier_id=eternal.id, species_id=1, life_stage_id=adult.id, category_id=DENTAL,
                   quota_monthly=1, quota_annual=12),
    ])

    welcome = PromoCode(
        promo_code="WELCOME10",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=Decimal("10"),
        valid_from=now - timedelta(days=1),
        valid_until=now + timedelta(days=30),
        max_uses_total=100,
        max_uses_per_user=1,
        current_uses=0,
    )
    flat = PromoCode(
        promo_code="FLAT5000",
        discount_type=DiscountType.FIXED,
        discount_value=Decimal("5000"),
        valid_from=now - timedelta(days=1),
        valid_until=now + timedelta(days=30),
        max_uses_total=None,
        max_uses_per_user=5,
        tier_ids=[plus.id],
    )
    db_session.add_all([welcome, flat])
    await db_session.commit()

    return {
        "basic": basic.id,
        "plus": plus.id,
        "eternal": eternal.id,
        "monthly": monthly.id,
        "annual": annual.id,
        "puppy": puppy.id,
        "adult": adult.id,
        "senior": senior.id,
        "dog": dog.id,
        "second_dog": second_dog.id,
        "other_users_dog": other_users_dog.id,
        "welcome": welcome.id,
        "flat": flat.id,
    }


@pytest_asyncio.fixture
async def catalog(db_session):
    return await seed_catalog(db_session)


@pytest_asyncio.fixture
async def file_engine(tmp_path):
    """File-backed SQLite database: every session gets its own connection"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'concurrency.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(file_engine):
    return sessionmaker(file_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def file_catalog(session_factory):
    async with session_factory() as session:
        return await seed_catalog(session)
