"""
Journal Admin API - Main Application
"""
import logging
from logging.handlers import RotatingFileHandler
import os
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.capabilities import capabilities, resolve_capabilities
from app.core.config import settings
from app.core.exceptions import ErrorCode
from app.api.responses import envelope_response
from app.api.v1.api import api_router
from app.db.session import engine, get_db
from app.models import Base
from app.schemas.common import ActionResult, format_validation_errors
from app.services.cache_service import cache_invalidator

SERVICE_NAME = "journal-admin-api"
SERVICE_VERSION = settings.VERSION
QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "passlib", "httpx")


def setup_logging():
    """Root logger writes to a rotating file under LOG_DIR and to the console"""
    os.makedirs(settings.LOG_DIR, exist_ok=True)

    file_handler = RotatingFileHandler(
        os.path.join(settings.LOG_DIR, settings.LOG_FILE),
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    development = settings.ENVIRONMENT == "development"

    logging.basicConfig(
        level=logging.DEBUG if development else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[file_handler, logging.StreamHandler()],
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the schema, feature flags and cache channel; release them on shutdown"""
    logger.info(f"Starting {SERVICE_NAME} ({settings.ENVIRONMENT}), API prefix {settings.API_V1_STR}")

    if settings.ENVIRONMENT == "development":
        # Production schemas are managed by Alembic
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Development schema ensured")

    await resolve_capabilities(engine)
    await cache_invalidator.connect()
    logger.info("Startup complete")

    yield

    await cache_invalidator.disconnect()
    await engine.dispose()
    logger.info(f"{SERVICE_NAME} stopped, database pool disposed")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Administrative and editorial backend for multi-tenant journal hosting",
    version=SERVICE_VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Forwarded-For"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed path/query/body: same envelope as a failed schema validation"""
    result = ActionResult.fail("Validation failed", ErrorCode.VALIDATION, format_validation_errors(exc))
    return envelope_response(result)


app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Service status, database reachability and resolved feature flags"""
    try:
        await db.execute(text("SELECT 1"))
        database = "connected"
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Health check database error: {e}")
        database = "unavailable"

    healthy = database == "connected"
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if healthy else "degraded",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "database": database,
            "capabilities": {"backups": capabilities.backups},
        },
    )


@app.get("/")
async def root():
    return {
        "service": settings.PROJECT_NAME,
        "docs": f"{settings.API_V1_STR}/docs",
        "health": "/health",
    }
