"""Best-effort audit logging for HTTP handlers"""

import logging
from typing import Any, Dict, Optional
from fastapi import Request
from src.app.services.audit_service import AuditService, AuditEntry

logger = logging.getLogger(__name__)


async def record_audit(
    audit_service: AuditService,
    request: Request,
    user_id: str,
    action: str,
    entity_id: str,
    new_value: Optional[Dict[str, Any]] = None,
    summary: Optional[str] = None,
    entity_type: str = "subscription",
) -> None:
    """Write an audit entry after the transaction committed; failures are only logged"""
    entry = AuditEntry(
        user_id=user_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        new_value=new_value,
        changes_summary=summary,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    try:
        if not await audit_service.log(entry):
            logger.warning(f"Audit entry {action} for {entity_type}/{entity_id} was not recorded")
    except Exception as e:
        logger.error(f"Audit logging failed for {action} on {entity_type}/{entity_id}: {e}")
