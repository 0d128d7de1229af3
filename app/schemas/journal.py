"""
Journal Schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.journal import JournalStatus
from app.schemas.common import PageQuery
from app.utils.sanitization import sanitize_html, strip_tags

PATH_PATTERN = r"^[a-z0-9-]+$"
ISSN_PATTERN = r"^\d{4}-\d{4}$"


class JournalBase(BaseModel):
    """Base journal schema"""
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    abbreviation: Optional[str] = Field(None, max_length=100)
    issn: Optional[str] = Field(None, pattern=ISSN_PATTERN)
    e_issn: Optional[str] = Field(None, pattern=ISSN_PATTERN)
    publisher: Optional[str] = Field(None, max_length=255)
    language: str = Field("en", min_length=2, max_length=2)
    contact_name: Optional[str] = Field(None, max_length=255)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=50)


class JournalCreate(JournalBase):
    """Schema for creating a journal"""
    tenant_id: int = Field(..., ge=1)
    path: str = Field(..., min_length=1, max_length=100, pattern=PATH_PATTERN)
    is_active: bool = True

    class Config:
        extra = "forbid"

    @field_validator("title", "abbreviation", "publisher", "contact_name")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return strip_tags(v)

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_html(v)


class JournalUpdate(BaseModel):
    """Schema for updating a journal; every field optional"""
    id: int = Field(..., ge=1)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    path: Optional[str] = Field(None, min_length=1, max_length=100, pattern=PATH_PATTERN)
    description: Optional[str] = None
    abbreviation: Optional[str] = Field(None, max_length=100)
    issn: Optional[str] = Field(None, pattern=ISSN_PATTERN)
    e_issn: Optional[str] = Field(None, pattern=ISSN_PATTERN)
    publisher: Optional[str] = Field(None, max_length=255)
    language: Optional[str] = Field(None, min_length=2, max_length=2)
    contact_name: Optional[str] = Field(None, max_length=255)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=50)
    status: Optional[JournalStatus] = None
    is_active: Optional[bool] = None

    class Config:
        extra = "forbid"

    @field_validator("title", "abbreviation", "publisher", "contact_name")
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return strip_tags(v)

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_html(v)


class JournalQuery(PageQuery):
    search: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None


class JournalResponse(JournalBase):
    """Schema for journal response"""
    id: int
    tenant_id: int
    path: str
    contact_email: Optional[str] = None
    status: JournalStatus
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
