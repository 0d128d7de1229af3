"""
Platform statistics and system information schemas
"""
from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel

StatisticsPeriod = Literal["all", "day", "week", "month", "year"]


class StatisticsQuery(BaseModel):
    period: StatisticsPeriod = "all"


class UserStatistics(BaseModel):
    total: int
    editors: int
    reviewers: int


class JournalStatistics(BaseModel):
    total: int
    tenants: int


class PeriodCount(BaseModel):
    total: int
    period: int


class SubmissionStatistics(PeriodCount):
    by_status: Dict[str, int] = {}


class ContentStatistics(BaseModel):
    articles: PeriodCount
    submissions: SubmissionStatistics
    issues: int


class PlatformStatistics(BaseModel):
    users: UserStatistics
    journals: JournalStatistics
    content: ContentStatistics
    journals_with_articles: int


class StatisticsReport(BaseModel):
    period: StatisticsPeriod
    start_date: Optional[datetime] = None
    end_date: datetime
    statistics: PlatformStatistics


class RuntimeInfo(BaseModel):
    python_version: str
    implementation: str
    platform: str
    architecture: str
    hostname: str
    app_version: str
    environment: str
    uptime_seconds: float
    timestamp: datetime


class DatabaseInfo(BaseModel):
    dialect: str
    driver: str
    url: str  # password hidden
    status: str  # connected | error
    version: Optional[str] = None


class DatabaseStats(BaseModel):
    total_tables: int
    total_users: int
    total_journals: int
    total_articles: int
    total_issues: int


class SystemInfo(BaseModel):
    runtime: RuntimeInfo
    database: DatabaseInfo
    database_stats: Optional[DatabaseStats] = None
    capabilities: Dict[str, bool] = {}
    cache_backend: str
    tables: List[str] = []


class DatabaseHealth(BaseModel):
    status: str  # healthy | unhealthy
    response_time: int  # milliseconds
    timestamp: datetime
