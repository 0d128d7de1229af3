"""
Site Settings Endpoints - super_admin
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials, query_params
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.site_settings_service import site_settings_service

router = APIRouter()


@router.get("/")
async def list_settings(
    params: Dict[str, Any] = Depends(query_params),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await site_settings_service.list_settings(db, credentials, params))


@router.put("/")
async def update_setting(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Upsert one setting by setting_name"""
    return envelope_response(await site_settings_service.update_setting(db, credentials, payload or {}))


@router.put("/bulk")
async def update_settings(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Body: {"settings": [{setting_name, setting_value, ...}, ...]}"""
    return envelope_response(await site_settings_service.update_settings(db, credentials, payload or {}))
