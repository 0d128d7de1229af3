"""
User Management Endpoints - super_admin
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials, query_params
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.user_service import user_service

router = APIRouter()


# ==================== USERS ====================

@router.get("/")
async def list_users(
    params: Dict[str, Any] = Depends(query_params),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """
    List users with their active role assignments.

    Query params: search, role, is_active, page, limit
    """
    return envelope_response(await user_service.list_users(db, credentials, params))


@router.get("/{user_id}")
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await user_service.get_user(db, credentials, user_id))


@router.post("/")
async def create_user(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Create a user with an initial role assignment"""
    result = await user_service.create_user(db, credentials, payload or {})
    return envelope_response(result, status.HTTP_201_CREATED)


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await user_service.update_user(db, credentials, {**(payload or {}), "id": user_id})
    return envelope_response(result)


@router.post("/{user_id}/password")
async def reset_user_password(
    user_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await user_service.reset_user_password(db, credentials, {**(payload or {}), "user_id": user_id})
    return envelope_response(result)


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    hard: bool = False,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """
    Deactivate a user and their role assignments.
    With ?hard=true the user row is removed instead.
    """
    if hard:
        result = await user_service.hard_delete_user(db, credentials, user_id)
    else:
        result = await user_service.delete_user(db, credentials, user_id)
    return envelope_response(result)


# ==================== ROLES ====================

@router.post("/{user_id}/roles")
async def assign_role(
    user_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Grant a role, globally or scoped to a tenant / journal"""
    result = await user_service.assign_role(db, credentials, {**(payload or {}), "user_id": user_id})
    return envelope_response(result)


@router.post("/{user_id}/roles/revoke")
async def revoke_role(
    user_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await user_service.revoke_role(db, credentials, {**(payload or {}), "user_id": user_id})
    return envelope_response(result)
