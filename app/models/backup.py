"""
Backup history.

The backups table is optional: deployments without it run with the
backups capability turned off (see app.core.capabilities).
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, BigInteger

from app.models.base import Base


class Backup(Base):
    __tablename__ = "backups"

    id = Column(Integer, primary_key=True, index=True)
    backup_type = Column(String(20), default="full", nullable=False)  # full | incremental
    description = Column(Text, nullable=True)
    status = Column(String(20), default="completed", nullable=False)
    file_size = Column(BigInteger, nullable=True)
    file_url = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
