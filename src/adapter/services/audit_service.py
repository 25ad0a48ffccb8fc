"""Audit Service Implementations

Audit writes happen after the core transaction and are best effort:
every implementation logs failures and returns False instead of raising.
"""

import logging
from typing import Optional
import httpx
from src.app.services.audit_service import AuditService, AuditEntry

logger = logging.getLogger(__name__)


class LoggingAuditService(AuditService):
    """Audit service that writes entries to the application log"""

    async def log(self, entry: AuditEntry) -> bool:
        logger.info(
            f"[AUDIT] User: {entry.user_id}, Action: {entry.action}, "
            f"Entity: {entry.entity_type}/{entry.entity_id}, "
            f"Summary: {entry.changes_summary}"
        )
        return True


class WebhookAuditService(AuditService):
    """
    Audit service that POSTs entries to an HTTP endpoint

    Sends the AuditEntry as a JSON payload.
    """

    def __init__(self, webhook_url: str, timeout: float = 5.0):
        """
        Initialize webhook audit service

        Args:
            webhook_url: URL to POST entries to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def log(self, entry: AuditEntry) -> bool:
        payload = {"type": "audit_log", **entry.model_dump(mode="json")}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.webhook_url, json=payload)
                response.raise_for_status()
                return True
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to send audit entry {entry.action} for {entry.entity_id}: {e}"
            )
            return False
        except Exception as e:
            logger.error(
                f"Unexpected error sending audit entry {entry.action} for {entry.entity_id}: {e}"
            )
            return False


class CompositeAuditService(AuditService):
    """Fans an entry out to several audit services"""

    def __init__(self, services: list[AuditService]):
        self.services = services

    async def log(self, entry: AuditEntry) -> bool:
        """
        Record the entry with every configured service

        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.log(entry):
                    success = True
            except Exception as e:
                logger.error(f"Audit service {type(service).__name__} failed: {e}")
        return success


def create_audit_service(webhook_url: Optional[str] = None) -> AuditService:
    """
    Factory function to create the audit service

    Args:
        webhook_url: Optional webhook URL. If provided, entries go to both
                     the log and the webhook.

    Returns:
        AuditService instance
    """
    logging_service = LoggingAuditService()

    if webhook_url:
        return CompositeAuditService([logging_service, WebhookAuditService(webhook_url)])

    return logging_service
