"""
Issue Schemas
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.journal import AccessStatus
from app.schemas.common import PageQuery
from app.utils.sanitization import sanitize_html, strip_tags

IssueStatusValue = Literal["draft", "scheduled", "published"]


class IssueCreate(BaseModel):
    """
    Schema for creating an issue.

    status maps onto is_published / published_date:
    draft clears both, scheduled needs a date, published defaults the date to now.
    """
    journal_id: int = Field(..., ge=1)
    volume: Optional[int] = Field(None, ge=1)
    number: Optional[str] = Field(None, max_length=50)
    year: int = Field(..., ge=1000, le=9999)
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    status: IssueStatusValue = "draft"
    published_date: Optional[datetime] = None
    access_status: AccessStatus = AccessStatus.OPEN
    cover_image_url: Optional[str] = None
    cover_image_alt_text: Optional[str] = Field(None, max_length=255)

    class Config:
        extra = "forbid"

    @field_validator("title", "number", "cover_image_alt_text")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return strip_tags(v)

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_html(v)

    @model_validator(mode="after")
    def check_schedule(self):
        if self.status == "scheduled" and self.published_date is None:
            raise ValueError("published_date is required for scheduled status")
        return self


class IssueUpdate(BaseModel):
    """Schema for updating an issue; status follows the same mapping as create"""
    id: int = Field(..., ge=1)
    volume: Optional[int] = Field(None, ge=1)
    number: Optional[str] = Field(None, max_length=50)
    year: Optional[int] = Field(None, ge=1000, le=9999)
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    status: Optional[IssueStatusValue] = None
    published_date: Optional[datetime] = None
    access_status: Optional[AccessStatus] = None
    cover_image_url: Optional[str] = None
    cover_image_alt_text: Optional[str] = Field(None, max_length=255)

    class Config:
        extra = "forbid"

    @field_validator("title", "number", "cover_image_alt_text")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return strip_tags(v)

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_html(v)


class IssueQuery(PageQuery):
    """future: unpublished issues, back: published ones"""
    type: Literal["future", "back", "all"] = "all"
    journal_id: Optional[int] = Field(None, ge=1)
    search: Optional[str] = Field(None, max_length=255)


class IssueResponse(BaseModel):
    id: int
    journal_id: int
    journal_title: Optional[str] = None
    volume: Optional[int] = None
    number: Optional[str] = None
    year: int
    title: Optional[str] = None
    description: Optional[str] = None
    status: str
    is_published: bool
    published_date: Optional[datetime] = None
    access_status: AccessStatus
    cover_image_url: Optional[str] = None
    cover_image_alt_text: Optional[str] = None
    item_count: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
