"""
Plugin Settings Endpoints - super_admin
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials, query_params
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.plugin_service import plugin_service

router = APIRouter()


@router.get("/")
async def list_plugins(
    params: Dict[str, Any] = Depends(query_params),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Global plugin settings, or one journal's with ?journal_id="""
    return envelope_response(await plugin_service.list_plugins(db, credentials, params))


@router.put("/{plugin_name}")
async def update_plugin(
    plugin_name: str,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Body: {"enabled": bool, "settings": {...}, "journal_id": optional}"""
    result = await plugin_service.update_plugin(db, credentials, {**(payload or {}), "plugin_name": plugin_name})
    return envelope_response(result)


@router.delete("/{plugin_name}")
async def delete_plugin(
    plugin_name: str,
    journal_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    payload = {"plugin_name": plugin_name, "journal_id": journal_id}
    return envelope_response(await plugin_service.delete_plugin(db, credentials, payload))
