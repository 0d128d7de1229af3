"""
Email Template Endpoints - super_admin
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.email_template_service import email_template_service

router = APIRouter()


@router.get("/")
async def list_templates(
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await email_template_service.list_templates(db, credentials))


@router.put("/{template_id}")
async def update_template(
    template_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await email_template_service.update_template(db, credentials, {**(payload or {}), "id": template_id})
    return envelope_response(result)
