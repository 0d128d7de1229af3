"""
API key schemas.

ApiKeyResponse always carries the masked key. The plaintext secret only
travels in ApiKeyIssued, returned by create and regenerate.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import PageQuery
from app.utils.sanitization import strip_tags


class ApiKeyCreate(BaseModel):
    key_name: str = Field(..., min_length=1, max_length=255)
    user_id: int = Field(..., ge=1)
    permissions: Dict[str, Any] = Field(default_factory=dict)
    expires_at: Optional[datetime] = None
    enabled: bool = True

    class Config:
        extra = "forbid"

    @field_validator("key_name")
    @classmethod
    def clean_name(cls, v: str) -> str:
        return strip_tags(v)


class ApiKeyUpdate(BaseModel):
    id: int = Field(..., ge=1)
    key_name: Optional[str] = Field(None, min_length=1, max_length=255)
    permissions: Optional[Dict[str, Any]] = None
    expires_at: Optional[datetime] = None
    enabled: Optional[bool] = None

    class Config:
        extra = "forbid"

    @field_validator("key_name")
    @classmethod
    def clean_name(cls, v: Optional[str]) -> Optional[str]:
        return strip_tags(v)


class ApiKeyQuery(PageQuery):
    user_id: Optional[int] = Field(None, ge=1)
    enabled: Optional[bool] = None


class ApiKeyResponse(BaseModel):
    id: int
    key_name: str
    api_key: str  # masked
    user_id: int
    permissions: Dict[str, Any] = {}
    last_used: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    enabled: bool
    created_at: datetime
    updated_at: datetime


class ApiKeyIssued(BaseModel):
    """Create / regenerate result. full_key is shown once."""
    api_key: ApiKeyResponse
    full_key: str
