"""
API Key Endpoints - super_admin

Only POST / and POST /{id}/regenerate ever return the full key.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials, query_params
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.api_key_service import api_key_service

router = APIRouter()


@router.get("/")
async def list_api_keys(
    params: Dict[str, Any] = Depends(query_params),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await api_key_service.list_api_keys(db, credentials, params))


@router.get("/{key_id}")
async def get_api_key(
    key_id: int,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await api_key_service.get_api_key(db, credentials, key_id))


@router.post("/")
async def create_api_key(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await api_key_service.create_api_key(db, credentials, payload or {})
    return envelope_response(result, status.HTTP_201_CREATED)


@router.put("/{key_id}")
async def update_api_key(
    key_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await api_key_service.update_api_key(db, credentials, {**(payload or {}), "id": key_id})
    return envelope_response(result)


@router.post("/{key_id}/regenerate")
async def regenerate_api_key(
    key_id: int,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await api_key_service.regenerate_api_key(db, credentials, key_id))


@router.delete("/{key_id}")
async def delete_api_key(
    key_id: int,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await api_key_service.delete_api_key(db, credentials, key_id))
