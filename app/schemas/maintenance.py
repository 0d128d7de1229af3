"""
Maintenance schemas
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel

MaintenanceTaskId = Literal["clear_cache", "optimize_database", "cleanup_old_data", "rebuild_indexes"]


class MaintenanceTaskRun(BaseModel):
    task_id: MaintenanceTaskId

    class Config:
        extra = "forbid"


class MaintenanceTaskInfo(BaseModel):
    id: str
    name: str
    description: str
    status: str = "ready"


class CacheStatus(BaseModel):
    backend: str
    stale_entries: Optional[int] = None  # unknown for backends that do not keep state


class MaintenanceInfo(BaseModel):
    maintenance_tasks: List[MaintenanceTaskInfo]
    cache_status: CacheStatus


class MaintenanceRunResult(BaseModel):
    message: str
    task_id: str
    result: Dict[str, Any]
