"""
Site-wide configuration rows: settings, navigation, email templates,
plugin settings and announcements
"""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Enum as SQLEnum, DateTime, Text, UniqueConstraint
import enum

from app.models.base import Base, TimestampMixin, enum_values


class SettingType(str, enum.Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"


class SettingGroup(str, enum.Enum):
    GENERAL = "general"
    EMAIL = "email"
    SECURITY = "security"
    APPEARANCE = "appearance"
    LOCALIZATION = "localization"


class MenuType(str, enum.Enum):
    CUSTOM = "custom"
    JOURNAL = "journal"
    ARTICLE = "article"
    ISSUE = "issue"


class MenuPosition(str, enum.Enum):
    HEADER = "header"
    FOOTER = "footer"


class AnnouncementType(str, enum.Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"


class SiteSetting(Base, TimestampMixin):
    """
    System-wide settings (key-value store)
    """
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True, index=True)
    setting_name = Column(String(255), unique=True, nullable=False, index=True)
    setting_value = Column(Text, nullable=True)
    setting_type = Column(
        SQLEnum(SettingType, name="setting_type", values_callable=enum_values),
        default=SettingType.STRING,
        nullable=False,
    )
    setting_group = Column(
        SQLEnum(SettingGroup, name="setting_group", values_callable=enum_values),
        default=SettingGroup.GENERAL,
        nullable=False,
    )
    description = Column(String(500), nullable=True)


class NavigationMenu(Base, TimestampMixin):
    """Hierarchical menu entry; deleting a parent cascades to its children in the database"""
    __tablename__ = "navigation_menus"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    title = Column(String(255), nullable=False)
    url = Column(String(500), nullable=True)
    menu_type = Column(
        SQLEnum(MenuType, name="menu_type", values_callable=enum_values),
        default=MenuType.CUSTOM,
        nullable=False,
    )
    parent_id = Column(Integer, ForeignKey("navigation_menus.id", ondelete="CASCADE"), nullable=True, index=True)
    sequence = Column(Integer, default=0, nullable=False)
    enabled = Column(Boolean, default=True, nullable=False)
    target_blank = Column(Boolean, default=False, nullable=False)
    position = Column(
        SQLEnum(MenuPosition, name="menu_position", values_callable=enum_values),
        default=MenuPosition.HEADER,
        nullable=False,
    )


class EmailTemplate(Base, TimestampMixin):
    """Outbound email template (delivery happens elsewhere)"""
    __tablename__ = "email_templates"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    subject = Column(String(500), nullable=False)
    body = Column(Text, nullable=False)
    enabled = Column(Boolean, default=True, nullable=False)


class PluginSetting(Base, TimestampMixin):
    """Plugin configuration row, global (journal_id NULL) or per journal"""
    __tablename__ = "plugin_settings"
    __table_args__ = (
        UniqueConstraint("plugin_name", "journal_id", "setting_name", name="uq_plugin_setting"),
    )

    id = Column(Integer, primary_key=True, index=True)
    plugin_name = Column(String(255), nullable=False, index=True)
    journal_id = Column(Integer, ForeignKey("journals.id", ondelete="CASCADE"), nullable=True)
    setting_name = Column(String(255), nullable=False)
    setting_value = Column(Text, nullable=True)
    setting_type = Column(String(20), default="string", nullable=False)


class Announcement(Base, TimestampMixin):
    """Site announcement"""
    __tablename__ = "announcements"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    short_description = Column(String(500), nullable=True)
    type = Column(
        SQLEnum(AnnouncementType, name="announcement_type", values_callable=enum_values),
        default=AnnouncementType.INFO,
        nullable=False,
    )
    enabled = Column(Boolean, default=True, nullable=False)
    date_posted = Column(DateTime, nullable=True)
    date_expire = Column(DateTime, nullable=True)
