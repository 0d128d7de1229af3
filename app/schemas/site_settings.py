"""
Site settings schemas
"""
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.site import SettingGroup, SettingType


class SiteSettingUpsert(BaseModel):
    """Create or replace one setting, keyed by setting_name"""
    setting_name: str = Field(..., min_length=1, max_length=255, pattern=r"^[A-Za-z0-9_.-]+$")
    setting_value: Any = None
    setting_type: SettingType = SettingType.STRING
    setting_group: SettingGroup = SettingGroup.GENERAL
    description: Optional[str] = Field(None, max_length=500)

    class Config:
        extra = "forbid"

    @field_validator("setting_value")
    @classmethod
    def check_value(cls, v: Any) -> Any:
        if v is not None and not isinstance(v, (str, int, float, bool, dict, list)):
            raise ValueError("Unsupported setting value")
        return v


class SiteSettingsBulk(BaseModel):
    settings: List[SiteSettingUpsert] = Field(..., min_length=1)

    class Config:
        extra = "forbid"


class SiteSettingsQuery(BaseModel):
    setting_group: Optional[SettingGroup] = None


class SiteSettingResponse(BaseModel):
    id: int
    setting_name: str
    setting_value: Optional[str] = None
    setting_type: SettingType
    setting_group: SettingGroup
    description: Optional[str] = None
    updated_at: datetime

    class Config:
        from_attributes = True
