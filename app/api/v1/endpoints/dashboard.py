"""
Admin Dashboard Endpoint - super_admin
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials, query_params
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.dashboard_service import dashboard_service

router = APIRouter()


@router.get("/")
async def get_dashboard(
    params: Dict[str, Any] = Depends(query_params),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Platform counters plus the most recent activity (?limit=, default 10)"""
    return envelope_response(await dashboard_service.get_dashboard(db, credentials, params))
