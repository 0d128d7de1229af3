"""
Declarative base and shared column mixins
"""
from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models"""
    pass


class TimestampMixin:
    """Adds created_at / updated_at columns (naive UTC)"""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


def enum_values(enum_cls):
    """Persist enum values ("super_admin") rather than member names ("SUPER_ADMIN")"""
    return [member.value for member in enum_cls]
