"""Audit Service Interface

Best-effort collaborator: audit entries are written after the core
transaction has committed. Failures must never fail the operation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from pydantic import BaseModel


class AuditEntry(BaseModel):
    user_id: str
    action: str
    entity_type: str
    entity_id: str
    old_value: Optional[Dict[str, Any]] = None
    new_value: Optional[Dict[str, Any]] = None
    changes_summary: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class AuditService(ABC):
    """
    Abstract audit trail writer

    Implementations can write to:
    - The application log
    - A webhook (HTTP POST)
    """

    @abstractmethod
    async def log(self, entry: AuditEntry) -> bool:
        """
        Record an audit entry

        Args:
            entry: AuditEntry to record

        Returns:
            True if recorded, False otherwise (never raises)
        """
        pass
