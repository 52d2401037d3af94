"""Pytest configuration and fixtures.

Provides an isolated SQLite database file per test.

Environment variables must be set BEFORE importing app code, because the
engine is created when app.db.session is imported. App imports are
therefore deferred to inside fixtures.
"""

import os
import tempfile

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

if "USERAUTH_DATABASE_URL" not in os.environ:
    _test_base_dir = tempfile.mkdtemp(prefix="userauth_test_")
    os.environ["USERAUTH_DATABASE_URL"] = f"sqlite+aiosqlite:///{_test_base_dir}/test.db"
os.environ.setdefault("USERAUTH_SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")

TEST_SECRET = os.environ["USERAUTH_SECRET_KEY"]


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Create the schema in a fresh database file for each test.

    Yields:
        async_sessionmaker: Session factory bound to the test database
    """
    import app.models  # noqa: F401
    from app.db.base import Base

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    await engine.dispose()


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def token_issuer():
    from app.core.security import JWTTokenIssuer

    return JWTTokenIssuer(secret_key=TEST_SECRET, algorithm="HS256", expire_minutes=5)


@pytest_asyncio.fixture
async def client(session_factory, token_issuer):
    """HTTP client against the API with the test database wired in."""
    from app.core.dependencies import get_db, get_token_issuer
    from app.main import app as api

    async def _get_test_db():
        async with session_factory() as session:
            yield session

    api.dependency_overrides[get_db] = _get_test_db
    api.dependency_overrides[get_token_issuer] = lambda: token_issuer

    async with AsyncClient(transport=ASGITransport(app=api), base_url="http://test") as http:
        yield http

    api.dependency_overrides.clear()


@pytest.fixture
def alice():
    from app.schemas.user import UserCreate

    return UserCreate(username="Alice", email="alice@example.com", password="Secret123!")
