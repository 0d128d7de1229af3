"""
Announcement schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.site import AnnouncementType
from app.schemas.common import PageQuery
from app.utils.sanitization import sanitize_html, strip_tags


class AnnouncementBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=500)
    type: AnnouncementType = AnnouncementType.INFO
    enabled: bool = True
    date_posted: Optional[datetime] = None
    date_expire: Optional[datetime] = None


class AnnouncementCreate(AnnouncementBase):
    class Config:
        extra = "forbid"

    @field_validator("title", "short_description")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return strip_tags(v)

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_html(v)

    @model_validator(mode="after")
    def check_dates(self):
        if self.date_posted and self.date_expire and self.date_expire < self.date_posted:
            raise ValueError("date_expire must be after date_posted")
        return self


class AnnouncementUpdate(BaseModel):
    id: int = Field(..., ge=1)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=500)
    type: Optional[AnnouncementType] = None
    enabled: Optional[bool] = None
    date_posted: Optional[datetime] = None
    date_expire: Optional[datetime] = None

    class Config:
        extra = "forbid"

    @field_validator("title", "short_description")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return strip_tags(v)

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_html(v)


class AnnouncementQuery(PageQuery):
    enabled: Optional[bool] = None


class AnnouncementResponse(AnnouncementBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
