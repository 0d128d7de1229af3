"""
Announcement Endpoints - super_admin
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials, query_params
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.announcement_service import announcement_service

router = APIRouter()


@router.get("/")
async def list_announcements(
    params: Dict[str, Any] = Depends(query_params),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await announcement_service.list_announcements(db, credentials, params))


@router.post("/")
async def create_announcement(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await announcement_service.create_announcement(db, credentials, payload or {})
    return envelope_response(result, status.HTTP_201_CREATED)


@router.put("/{announcement_id}")
async def update_announcement(
    announcement_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await announcement_service.update_announcement(
        db, credentials, {**(payload or {}), "id": announcement_id}
    )
    return envelope_response(result)


@router.delete("/{announcement_id}")
async def delete_announcement(
    announcement_id: int,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await announcement_service.delete_announcement(db, credentials, announcement_id))
