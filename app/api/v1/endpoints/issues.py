"""
Issue API Endpoints - super_admin
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials, query_params
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.issue_service import issue_service

router = APIRouter()


@router.get("/")
async def list_issues(
    params: Dict[str, Any] = Depends(query_params),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """
    List issues.

    Query params: type (future | back | all), journal_id, search, page, limit
    """
    return envelope_response(await issue_service.list_issues(db, credentials, params))


@router.post("/")
async def create_issue(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await issue_service.create_issue(db, credentials, payload or {})
    return envelope_response(result, status.HTTP_201_CREATED)


@router.put("/{issue_id}")
async def update_issue(
    issue_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await issue_service.update_issue(db, credentials, {**(payload or {}), "id": issue_id})
    return envelope_response(result)


@router.post("/{issue_id}/publish")
async def publish_issue(
    issue_id: int,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Publish an issue. Fails if it is already published."""
    return envelope_response(await issue_service.publish_issue(db, credentials, issue_id))


@router.delete("/{issue_id}")
async def delete_issue(
    issue_id: int,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Delete an issue. Rejected while the issue still contains articles."""
    return envelope_response(await issue_service.delete_issue(db, credentials, issue_id))
