from typing import Optional
from fastapi import Header
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.audit_service import create_audit_service
from src.app.services.audit_service import AuditService

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

audit_service = create_audit_service(ApplicationConfig.AUDIT_WEBHOOK_URL)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_audit_service() -> AuditService:
    return audit_service


async def get_current_user_id(x_user_id: str = Header(..., min_length=1)) -> str:
    """Authenticated user id, set by the gateway in front of this service"""
    return x_user_id


async def get_optional_user_id(x_user_id: Optional[str] = Header(default=None)) -> Optional[str]:
    return x_user_id
