"""
Language Settings Endpoints - super_admin
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.language_service import language_service

router = APIRouter()


@router.get("/")
async def get_language_settings(
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Default and supported languages plus the list of languages to choose from"""
    return envelope_response(await language_service.get_language_settings(db, credentials))


@router.put("/")
async def update_language_settings(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await language_service.update_language_settings(db, credentials, payload or {}))
