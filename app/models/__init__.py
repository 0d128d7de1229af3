"""
SQLAlchemy models - Import all for Alembic autogenerate
"""
from app.models.base import Base, TimestampMixin

# Import all models
from app.models.user import Tenant, User, RoleAssignment, RoleKey, EDITORIAL_ROLES
from app.models.journal import Journal, JournalStatus, Issue, AccessStatus, Article
from app.models.submission import (
    Submission,
    SubmissionStatus,
    ReviewAssignment,
    ReviewStatus,
    ReviewRecommendation,
    EditorialDecision,
    DecisionType,
)
from app.models.api_key import ApiKey
from app.models.audit import ActivityLog
from app.models.site import (
    SiteSetting,
    SettingType,
    SettingGroup,
    NavigationMenu,
    MenuType,
    MenuPosition,
    EmailTemplate,
    PluginSetting,
    Announcement,
    AnnouncementType,
)
from app.models.backup import Backup
from app.models.task import SystemTask, TaskLog, TaskStatus

# Export all for easy imports
__all__ = [
    "Base",
    "TimestampMixin",
    "Tenant",
    "User",
    "RoleAssignment",
    "RoleKey",
    "EDITORIAL_ROLES",
    "Journal",
    "JournalStatus",
    "Issue",
    "AccessStatus",
    "Article",
    "Submission",
    "SubmissionStatus",
    "ReviewAssignment",
    "ReviewStatus",
    "ReviewRecommendation",
    "EditorialDecision",
    "DecisionType",
    "ApiKey",
    "ActivityLog",
    "SiteSetting",
    "SettingType",
    "SettingGroup",
    "NavigationMenu",
    "MenuType",
    "MenuPosition",
    "EmailTemplate",
    "PluginSetting",
    "Announcement",
    "AnnouncementType",
    "Backup",
    "SystemTask",
    "TaskLog",
    "TaskStatus",
]
