"""
Dashboard schemas
"""
from typing import List

from pydantic import BaseModel, Field

from app.schemas.activity_log import ActivityLogResponse


class DashboardStats(BaseModel):
    total_users: int = 0
    active_journals: int = 0
    total_editors: int = 0
    submissions_this_month: int = 0
    total_articles: int = 0
    total_issues: int = 0
    active_tenants: int = 0


class RecentActivityQuery(BaseModel):
    limit: int = Field(10, ge=1, le=50)


class DashboardOverview(BaseModel):
    stats: DashboardStats
    recent_activity: List[ActivityLogResponse] = []
