"""
PyTest configuration and fixtures for Journal Admin API tests
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.capabilities import capabilities
from app.main import app
from app.db.session import get_db
from app.models.base import Base
from app.models.journal import Journal, Issue
from app.models.user import User, Tenant, RoleAssignment, RoleKey
from app.services.auth_service import auth_service
from app.services.cache_service import cache_invalidator


# Test database setup - Using async SQLite with aiosqlite
SQLALCHEMY_TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def _enable_foreign_keys(dbapi_connection, connection_record):
    # SQLite only enforces ON DELETE CASCADE with this pragma
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """
    Fresh in-memory database for each test.
    """
    engine = create_async_engine(
        SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    TestingSessionLocal = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    async with TestingSessionLocal() as session:
        yield session

    await engine.dispose()


@pytest.fixture(autouse=True)
def reset_side_effects():
    """Clear recorded cache invalidations and capability flags between tests"""
    cache_invalidator.reset()
    capabilities.backups = False
    yield
    cache_invalidator.reset()
    capabilities.backups = False


@pytest_asyncio.fixture(scope="function")
async def client(db_session):
    """
    Async HTTP client with the database dependency overridden.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


async def create_user(db_session, email, roles=(), full_name="Test User", is_active=True):
    """
    Create a user holding the given roles.

    roles: iterable of RoleKey or (RoleKey, tenant_id, journal_id) tuples
    """
    user = User(
        email=email,
        password_hash=auth_service.hash_password("Test123!@#"),
        full_name=full_name,
        is_active=is_active,
    )
    db_session.add(user)
    await db_session.flush()

    for role in roles:
        if isinstance(role, tuple):
            role_key, tenant_id, journal_id = role
        else:
            role_key, tenant_id, journal_id = role, None, None
        db_session.add(
            RoleAssignment(
                user_id=user.id,
                role=role_key,
                tenant_id=tenant_id,
                journal_id=journal_id,
                is_active=True,
            )
        )
    await db_session.commit()
    await db_session.refresh(user)
    return user


def token_for(user) -> str:
    return auth_service.issue_token(user.id)


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def tenant(db_session):
    tenant = Tenant(name="Default Press", slug="default", is_active=True)
    db_session.add(tenant)
    await db_session.commit()
    await db_session.refresh(tenant)
    return tenant


@pytest_asyncio.fixture
async def journal(db_session, tenant):
    journal = Journal(
        tenant_id=tenant.id,
        title="Journal of Testing",
        path="testing",
        issn="1234-5678",
        is_active=True,
    )
    db_session.add(journal)
    await db_session.commit()
    await db_session.refresh(journal)
    return journal


@pytest_asyncio.fixture
async def issue(db_session, journal):
    issue = Issue(journal_id=journal.id, volume=1, number="1", year=2024, title="Spring")
    db_session.add(issue)
    await db_session.commit()
    await db_session.refresh(issue)
    return issue


@pytest_asyncio.fixture
async def super_admin(db_session):
    return await create_user(db_session, "admin@example.com", [RoleKey.SUPER_ADMIN], "Super Admin")


@pytest_asyncio.fixture
async def reader(db_session):
    return await create_user(db_session, "reader@example.com", [RoleKey.READER], "Plain Reader")


@pytest_asyncio.fixture
async def admin_token(super_admin):
    return token_for(super_admin)


@pytest_asyncio.fixture
async def reader_token(reader):
    return token_for(reader)


@pytest_asyncio.fixture
async def admin_headers(admin_token):
    return bearer(admin_token)


@pytest_asyncio.fixture
async def reader_headers(reader_token):
    return bearer(reader_token)
