"""
Statistics and System Info Endpoints - super_admin
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials, query_params
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.statistics_service import statistics_service
from app.services.system_info_service import system_info_service

router = APIRouter()
system_info_router = APIRouter()


@router.get("/")
async def get_statistics(
    params: Dict[str, Any] = Depends(query_params),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Query params: period (all | day | week | month | year)"""
    return envelope_response(await statistics_service.get_statistics(db, credentials, params))


@system_info_router.get("/")
async def get_system_info(
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await system_info_service.get_system_info(db, credentials))


@system_info_router.get("/database-health")
async def get_database_health(
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await system_info_service.get_database_health(db, credentials))
