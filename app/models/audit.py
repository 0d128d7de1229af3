"""
Activity (audit) log
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, JSON

from app.models.base import Base


class ActivityLog(Base):
    """
    Append-only audit trail of privileged state changes.
    Rows are only ever inserted, or purged by age through the cleanup action.
    """
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Action details
    action = Column(String(100), nullable=False, index=True)  # issue_published, api_key_created, ...
    entity_type = Column(String(100), nullable=True, index=True)  # issue, api_key, settings, ...
    entity_id = Column(String(100), nullable=True)

    details = Column(JSON, nullable=True)

    # Request metadata
    ip_address = Column(String(50), nullable=True)
    user_agent = Column(String(500), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
