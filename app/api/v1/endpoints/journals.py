"""
Journal API Endpoints - super_admin
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials, query_params
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.journal_service import journal_service

router = APIRouter()


@router.get("/")
async def list_journals(
    params: Dict[str, Any] = Depends(query_params),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """
    List journals with pagination.

    Query params: page, limit, search, is_active
    """
    return envelope_response(await journal_service.list_journals(db, credentials, params))


@router.get("/{journal_id}")
async def get_journal(
    journal_id: int,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await journal_service.get_journal(db, credentials, journal_id))


@router.post("/")
async def create_journal(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Create a journal under a tenant. The path must be unique."""
    result = await journal_service.create_journal(db, credentials, payload or {})
    return envelope_response(result, status.HTTP_201_CREATED)


@router.put("/{journal_id}")
async def update_journal(
    journal_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await journal_service.update_journal(db, credentials, {**(payload or {}), "id": journal_id})
    return envelope_response(result)


@router.delete("/{journal_id}")
async def delete_journal(
    journal_id: int,
    hard: bool = False,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """
    Archive a journal (status archived, inactive).
    With ?hard=true the journal row is removed instead.
    """
    if hard:
        result = await journal_service.hard_delete_journal(db, credentials, journal_id)
    else:
        result = await journal_service.delete_journal(db, credentials, journal_id)
    return envelope_response(result)
