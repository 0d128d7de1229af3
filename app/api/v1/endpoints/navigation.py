"""
Navigation Menu Endpoints - super_admin
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials, query_params
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.navigation_service import navigation_service

router = APIRouter()


@router.get("/")
async def list_menus(
    params: Dict[str, Any] = Depends(query_params),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Menu entries ordered by sequence; optional ?position=header|footer"""
    return envelope_response(await navigation_service.list_menus(db, credentials, params))


@router.post("/")
async def create_menu(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await navigation_service.create_menu(db, credentials, payload or {})
    return envelope_response(result, status.HTTP_201_CREATED)


# Registered before /{menu_id} so "reorder" is not read as an id
@router.put("/reorder")
async def reorder_menus(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Body: {"items": [{"id": 1, "sequence": 0}, ...]}"""
    return envelope_response(await navigation_service.reorder_menus(db, credentials, payload or {}))


@router.put("/{menu_id}")
async def update_menu(
    menu_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await navigation_service.update_menu(db, credentials, {**(payload or {}), "id": menu_id})
    return envelope_response(result)


@router.delete("/{menu_id}")
async def delete_menu(
    menu_id: int,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Delete an entry; its children are removed with it"""
    return envelope_response(await navigation_service.delete_menu(db, credentials, menu_id))
