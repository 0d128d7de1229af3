"""
Activity log schemas
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from app.core.config import settings
from app.schemas.common import PageQuery


class ActivityLogQuery(PageQuery):
    action: Optional[str] = Field(None, max_length=100)
    entity_type: Optional[str] = Field(None, max_length=100)
    user_id: Optional[int] = Field(None, ge=1)
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None

    @model_validator(mode="after")
    def check_range(self):
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("date_from must be before date_to")
        return self


class ActivityLogCleanup(BaseModel):
    """Purge records older than `days` days"""
    days: int = Field(settings.ACTIVITY_LOG_DEFAULT_RETENTION_DAYS, ge=1, le=3650)

    class Config:
        extra = "forbid"


class ActivityLogResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    user_email: Optional[str] = None
    action: str
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class CleanupResult(BaseModel):
    deleted: int
    cutoff_date: datetime


class ActionCount(BaseModel):
    action: str
    count: int


class ActivityLogStats(BaseModel):
    total: int
    by_entity_type: Dict[str, int] = {}
    top_actions: List[ActionCount] = []
