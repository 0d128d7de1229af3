"""
Email template schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.utils.sanitization import sanitize_html, strip_tags


class EmailTemplateUpdate(BaseModel):
    id: int = Field(..., ge=1)
    subject: Optional[str] = Field(None, min_length=1, max_length=500)
    body: Optional[str] = Field(None, min_length=1)
    enabled: Optional[bool] = None

    class Config:
        extra = "forbid"

    @field_validator("subject")
    @classmethod
    def clean_subject(cls, v: Optional[str]) -> Optional[str]:
        return strip_tags(v)

    @field_validator("body")
    @classmethod
    def clean_body(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_html(v)


class EmailTemplateResponse(BaseModel):
    id: int
    key: str
    name: str
    subject: str
    body: str
    enabled: bool
    updated_at: datetime

    class Config:
        from_attributes = True
