"""
Async engine and session factory.

One AsyncSession per request (get_db) or per script (get_db_session).
Services commit their own unit of work; get_db commits whatever is left.
"""
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from app.core.config import settings


def _engine_options(url: str) -> dict:
    # SQLite (tests, local tooling) does not accept pool sizing arguments
    if url.startswith("sqlite"):
        return {}
    return {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    **_engine_options(settings.DATABASE_URL),
)

# ORM objects stay readable after commit; results are built from them
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: request-scoped session, rolled back on error"""
    session = AsyncSessionLocal()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


def get_db_session() -> AsyncSession:
    """Session for scripts: `async with get_db_session() as db: ...`"""
    return AsyncSessionLocal()
