"""
Pydantic schemas for User and role assignment endpoints
"""
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import List, Optional
from datetime import datetime

from app.models.user import RoleKey
from app.schemas.common import PageQuery
from app.utils.sanitization import strip_tags


def ensure_global_super_admin(role: RoleKey, tenant_id: Optional[int], journal_id: Optional[int]) -> None:
    if role == RoleKey.SUPER_ADMIN and (tenant_id or journal_id):
        raise ValueError("super_admin can only be assigned globally")


class UserBase(BaseModel):
    """Base schema for users"""
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)


class UserCreate(UserBase):
    """Schema for creating a user from the admin panel"""
    password: str = Field(min_length=8, description="Password must be at least 8 characters")
    role: RoleKey = RoleKey.READER
    tenant_id: Optional[int] = Field(None, ge=1)
    journal_id: Optional[int] = Field(None, ge=1)
    is_active: bool = True

    class Config:
        extra = "forbid"

    @field_validator("full_name")
    @classmethod
    def clean_name(cls, v: str) -> str:
        return strip_tags(v)

    @model_validator(mode="after")
    def check_global_roles(self):
        ensure_global_super_admin(self.role, self.tenant_id, self.journal_id)
        return self


class UserUpdate(BaseModel):
    """Schema for updating a user"""
    id: int = Field(..., ge=1)
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    password: Optional[str] = Field(None, min_length=8)
    is_active: Optional[bool] = None

    class Config:
        extra = "forbid"

    @field_validator("full_name")
    @classmethod
    def clean_name(cls, v: Optional[str]) -> Optional[str]:
        return strip_tags(v)


class UserQuery(PageQuery):
    search: Optional[str] = Field(None, max_length=255)
    role: Optional[RoleKey] = None
    is_active: Optional[bool] = None


class RoleAssignmentPayload(BaseModel):
    """Schema for granting or revoking a role"""
    user_id: int = Field(..., ge=1)
    role: RoleKey
    tenant_id: Optional[int] = Field(None, ge=1)
    journal_id: Optional[int] = Field(None, ge=1)

    class Config:
        extra = "forbid"

    @model_validator(mode="after")
    def check_global_roles(self):
        ensure_global_super_admin(self.role, self.tenant_id, self.journal_id)
        return self


class RoleAssignmentResponse(BaseModel):
    id: int
    user_id: int
    role: RoleKey
    tenant_id: Optional[int] = None
    journal_id: Optional[int] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UserResponse(UserBase):
    """Response schema for users"""
    id: int
    is_active: bool
    last_login: Optional[datetime] = None
    roles: List[RoleAssignmentResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PasswordReset(BaseModel):
    """Schema for an administrator setting a user's password"""
    user_id: int = Field(..., ge=1)
    new_password: str = Field(min_length=8, description="Password must be at least 8 characters")

    class Config:
        extra = "forbid"
