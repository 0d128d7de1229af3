"""
Activity Log Endpoints - super_admin
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials, query_params
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.activity_log_service import activity_log_service

router = APIRouter()


@router.get("/")
async def list_activity_logs(
    params: Dict[str, Any] = Depends(query_params),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """
    Query params: action, entity_type, user_id, date_from, date_to, page, limit
    """
    return envelope_response(await activity_log_service.list_activity_logs(db, credentials, params))


@router.get("/stats")
async def get_activity_log_stats(
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Total records, counts per entity type and the ten most frequent actions"""
    return envelope_response(await activity_log_service.get_activity_log_stats(db, credentials))


@router.post("/cleanup")
async def cleanup_activity_logs(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Purge records older than `days` days (default 90)"""
    return envelope_response(await activity_log_service.cleanup_activity_logs(db, credentials, payload or {}))
