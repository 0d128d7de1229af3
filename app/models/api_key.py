"""
API key model
"""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, JSON

from app.models.base import Base, TimestampMixin


class ApiKey(Base, TimestampMixin):
    """
    Secret token tied to a user.
    Only a SHA-256 digest of the secret is stored. The plaintext is handed out
    once on create/regenerate; reads show key_prefix followed by an ellipsis.
    """
    __tablename__ = "api_keys"

    id = Column(Integer, primary_key=True, index=True)
    key_name = Column(String(255), nullable=False)
    key_hash = Column(String(64), unique=True, nullable=False)
    key_prefix = Column(String(20), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    permissions = Column(JSON, nullable=False, default=dict)
    last_used = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=True)
    enabled = Column(Boolean, default=True, nullable=False)
