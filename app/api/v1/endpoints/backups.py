"""
Backup Endpoints - super_admin
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.backup_service import backup_service

router = APIRouter()


@router.get("/")
async def get_backup_info(
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Backup history; empty when backups are not available in this deployment"""
    return envelope_response(await backup_service.get_backup_info(db, credentials))


@router.post("/")
async def create_backup(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await backup_service.create_backup(db, credentials, payload or {})
    return envelope_response(result, status.HTTP_201_CREATED)


@router.delete("/{backup_id}")
async def delete_backup(
    backup_id: int,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await backup_service.delete_backup(db, credentials, backup_id))
