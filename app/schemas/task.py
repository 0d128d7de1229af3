"""
System task schemas
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.task import TaskStatus
from app.utils.sanitization import strip_tags

# Handlers a task can be bound to
TaskClass = Literal[
    "clear_cache",
    "optimize_database",
    "cleanup_old_data",
    "rebuild_indexes",
    "publish_scheduled_issues",
]


class TaskCreate(BaseModel):
    task_name: str = Field(..., min_length=1, max_length=255)
    task_class: TaskClass
    enabled: bool = True
    run_interval: int = Field(86400, ge=1)  # seconds

    class Config:
        extra = "forbid"

    @field_validator("task_name")
    @classmethod
    def clean_name(cls, v: str) -> str:
        return strip_tags(v)


class TaskUpdate(BaseModel):
    id: int = Field(..., ge=1)
    enabled: Optional[bool] = None
    run_interval: Optional[int] = Field(None, ge=1)
    task_class: Optional[TaskClass] = None

    class Config:
        extra = "forbid"


class TaskQuery(BaseModel):
    include_logs: bool = False


class TaskGet(TaskQuery):
    id: int = Field(..., ge=1)


class TaskLogResponse(BaseModel):
    id: int
    task_id: int
    status: str
    message: Optional[str] = None
    execution_time: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    created_at: datetime

    class Config:
        from_attributes = True


class TaskResponse(BaseModel):
    id: int
    task_name: str
    task_class: str
    enabled: bool
    run_interval: int
    last_run: Optional[datetime] = None
    next_run: Optional[datetime] = None
    last_status: TaskStatus
    last_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    logs: Optional[List[TaskLogResponse]] = None

    class Config:
        from_attributes = True


class TaskRunResult(BaseModel):
    task_id: int
    status: TaskStatus
    execution_time: int  # milliseconds
    message: str
    result: Dict[str, Any] = {}
