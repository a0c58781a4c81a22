"""
Test infrastructure for the Blog API.

Strategy
--------
- SQLite in-memory via aiosqlite; StaticPool keeps every session on the
  same connection, since an in-memory database is connection-scoped.
- The app's get_db dependency is overridden so every request uses the test
  session factory.
- Tables are created before each test and dropped after it.
- BCRYPT_ROUNDS is lowered before the app is imported so password hashing
  does not dominate the run time.
"""
import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from blog_api.database import Base, get_db
from blog_api.main import app
from blog_api.middleware import install_query_counter
from helpers import bearer, register_and_login

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """Live session for tests that call services or inspect ORM state directly."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def auth_headers(async_client: AsyncClient) -> dict:
    """Authorization header for a freshly registered and logged-in user."""
    return bearer(await register_and_login(async_client))
