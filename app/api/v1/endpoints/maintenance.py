"""
Maintenance Endpoints - super_admin
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.maintenance_service import maintenance_service

router = APIRouter()


@router.get("/")
async def get_maintenance_tasks(
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await maintenance_service.get_maintenance_tasks(db, credentials))


@router.post("/run")
async def run_maintenance_task(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """
    Body: {"task_id": clear_cache | optimize_database | cleanup_old_data | rebuild_indexes}
    """
    task_id = (payload or {}).get("task_id")
    return envelope_response(await maintenance_service.run_maintenance_task(db, credentials, task_id))
