"""
Tenant, User and role assignment models
"""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Enum as SQLEnum, DateTime, Text, UniqueConstraint
from sqlalchemy.orm import relationship
import enum

from app.models.base import Base, TimestampMixin, enum_values


class RoleKey(str, enum.Enum):
    """User roles for RBAC"""
    SUPER_ADMIN = "super_admin"  # Cross-tenant administration
    SITE_ADMIN = "site_admin"
    JOURNAL_MANAGER = "journal_manager"
    EDITOR = "editor"
    SECTION_EDITOR = "section_editor"
    REVIEWER = "reviewer"
    AUTHOR = "author"
    READER = "reader"
    COPYEDITOR = "copyeditor"
    PROOFREADER = "proofreader"
    PRODUCTION_EDITOR = "production_editor"


EDITORIAL_ROLES = (RoleKey.EDITOR, RoleKey.SECTION_EDITOR, RoleKey.SUPER_ADMIN)


class Tenant(Base, TimestampMixin):
    """Isolated organizational unit hosting one or more journals"""
    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)


class User(Base, TimestampMixin):
    """
    User identity. Credentials are issued by the authentication provider;
    password_hash is only kept for accounts created from the admin panel.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    role_assignments = relationship(
        "RoleAssignment",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class RoleAssignment(Base, TimestampMixin):
    """
    A role held by a user, optionally scoped to a tenant and/or journal.
    No tenant and no journal means the assignment is global.
    """
    __tablename__ = "role_assignments"
    __table_args__ = (
        UniqueConstraint("user_id", "role", "tenant_id", "journal_id", name="uq_role_assignment"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(SQLEnum(RoleKey, name="role_key", values_callable=enum_values), nullable=False)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True)
    journal_id = Column(Integer, ForeignKey("journals.id", ondelete="CASCADE"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    user = relationship("User", back_populates="role_assignments")
