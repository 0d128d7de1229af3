"""
Plugin settings schemas
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

PLUGIN_NAME_PATTERN = r"^[A-Za-z0-9_-]+$"


class PluginUpdate(BaseModel):
    """Enable/disable a plugin and upsert its settings, globally or for one journal"""
    plugin_name: str = Field(..., min_length=1, max_length=255, pattern=PLUGIN_NAME_PATTERN)
    journal_id: Optional[int] = Field(None, ge=1)
    enabled: Optional[bool] = None
    settings: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = "forbid"


class PluginRef(BaseModel):
    plugin_name: str = Field(..., min_length=1, max_length=255, pattern=PLUGIN_NAME_PATTERN)
    journal_id: Optional[int] = Field(None, ge=1)

    class Config:
        extra = "forbid"


class PluginQuery(BaseModel):
    journal_id: Optional[int] = Field(None, ge=1)


class PluginResponse(BaseModel):
    plugin_name: str
    journal_id: Optional[int] = None
    enabled: bool = False
    settings: Dict[str, Any] = {}


class PluginList(BaseModel):
    plugins: List[PluginResponse]
