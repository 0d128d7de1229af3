"""
Backup schemas
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from app.utils.sanitization import strip_tags


class BackupCreate(BaseModel):
    backup_type: Literal["full", "incremental"] = "full"
    description: Optional[str] = Field(None, max_length=1000)

    class Config:
        extra = "forbid"

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return strip_tags(v)


class BackupResponse(BaseModel):
    id: int
    backup_type: str
    description: Optional[str] = None
    status: str
    file_size: Optional[int] = None
    file_url: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class BackupInfo(BaseModel):
    """Backup history; empty when the backups table is not deployed"""
    available: bool
    backups: List[BackupResponse] = []
    total_backups: int = 0
    total_size: int = 0
    last_backup: Optional[datetime] = None
