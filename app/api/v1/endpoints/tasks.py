"""
System Task Endpoints - super_admin
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials, query_params
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.task_service import task_service

router = APIRouter()


@router.get("/")
async def list_tasks(
    params: Dict[str, Any] = Depends(query_params),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """All tasks by name. ?include_logs=true adds the most recent runs."""
    return envelope_response(await task_service.list_tasks(db, credentials, params))


@router.get("/{task_id}")
async def get_task(
    task_id: int,
    params: Dict[str, Any] = Depends(query_params),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await task_service.get_task(db, credentials, task_id, params.get("include_logs", False))
    return envelope_response(result)


@router.post("/")
async def create_task(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await task_service.create_task(db, credentials, payload or {})
    return envelope_response(result, status.HTTP_201_CREATED)


@router.put("/{task_id}")
async def update_task(
    task_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await task_service.update_task(db, credentials, {**(payload or {}), "id": task_id})
    return envelope_response(result)


@router.post("/{task_id}/run")
async def run_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Run a task now, whether or not it is enabled"""
    return envelope_response(await task_service.run_task(db, credentials, task_id))
