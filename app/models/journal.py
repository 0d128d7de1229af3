"""
Journal, Issue and Article models
"""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Enum as SQLEnum, DateTime, Text
import enum

from app.models.base import Base, TimestampMixin, enum_values


class JournalStatus(str, enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    ARCHIVED = "archived"


class AccessStatus(str, enum.Enum):
    OPEN = "open"
    SUBSCRIPTION = "subscription"
    RESTRICTED = "restricted"


class Journal(Base, TimestampMixin):
    """Journal hosted by a tenant"""
    __tablename__ = "journals"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    path = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    abbreviation = Column(String(100), nullable=True)
    issn = Column(String(9), nullable=True)
    e_issn = Column(String(9), nullable=True)
    publisher = Column(String(255), nullable=True)
    language = Column(String(2), default="en", nullable=False)

    # Contact
    contact_name = Column(String(255), nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)

    status = Column(
        SQLEnum(JournalStatus, name="journal_status", values_callable=enum_values),
        default=JournalStatus.ACTIVE,
        nullable=False,
    )
    is_active = Column(Boolean, default=True, nullable=False)


class Issue(Base, TimestampMixin):
    """
    Journal issue. Status is derived:
    published if is_published, scheduled if only published_date is set, draft otherwise.
    """
    __tablename__ = "issues"

    id = Column(Integer, primary_key=True, index=True)
    journal_id = Column(Integer, ForeignKey("journals.id", ondelete="CASCADE"), nullable=False, index=True)
    volume = Column(Integer, nullable=True)
    number = Column(String(50), nullable=True)
    year = Column(Integer, nullable=False)
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)

    published_date = Column(DateTime, nullable=True)
    is_published = Column(Boolean, default=False, nullable=False)
    access_status = Column(
        SQLEnum(AccessStatus, name="access_status", values_callable=enum_values),
        default=AccessStatus.OPEN,
        nullable=False,
    )

    cover_image_url = Column(Text, nullable=True)
    cover_image_alt_text = Column(String(255), nullable=True)

    @property
    def status(self) -> str:
        if self.is_published:
            return "published"
        if self.published_date:
            return "scheduled"
        return "draft"


class Article(Base, TimestampMixin):
    """Published article, created from an accepted submission"""
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, index=True)
    journal_id = Column(Integer, ForeignKey("journals.id", ondelete="CASCADE"), nullable=False, index=True)
    # Issues with articles cannot be deleted; the guard lives in issue_service
    issue_id = Column(Integer, ForeignKey("issues.id"), nullable=True, index=True)
    submission_id = Column(Integer, ForeignKey("submissions.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(500), nullable=False)
    abstract = Column(Text, nullable=True)
    doi = Column(String(255), nullable=True)
    pages = Column(String(50), nullable=True)
    published_date = Column(DateTime, nullable=True)
