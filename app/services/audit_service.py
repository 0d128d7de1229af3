"""
Audit logger.

Appends activity_logs rows. Writes are best-effort: a failed audit write is
logged and swallowed so it never turns a successful operation into a failure.
Records are never updated; age-based purging is the cleanup action in
activity_log_service.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import ActivityLog

logger = logging.getLogger(__name__)


@dataclass
class AuditEntry:
    action: str
    entity_type: Optional[str] = None
    entity_id: Optional[Union[int, str]] = None
    details: Dict[str, Any] = field(default_factory=dict)
    actor_id: Optional[int] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class AuditService:
    """Append-only writer for the activity log"""

    async def record(self, db: AsyncSession, entry: AuditEntry) -> bool:
        """
        Persist one audit record in its own commit.

        Returns True when written, False when the write failed.
        """
        try:
            db.add(
                ActivityLog(
                    user_id=entry.actor_id,
                    action=entry.action,
                    entity_type=entry.entity_type,
                    entity_id=str(entry.entity_id) if entry.entity_id is not None else None,
                    details=entry.details or {},
                    ip_address=entry.ip_address,
                    user_agent=entry.user_agent,
                )
            )
            await db.commit()
            return True
        except Exception as e:
            logger.error(f"Error writing audit log '{entry.action}': {e}")
            await db.rollback()
            return False


# Global audit service instance
audit_service = AuditService()
