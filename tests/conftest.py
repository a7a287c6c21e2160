"""
Noteful Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite file under tmp_path, so tests never
       share rows and can run in any order.

Fixture Hierarchy (all function-scoped):
    database ─┬─ session          repository-level tests (one AsyncSession)
              └─ app ── client    endpoint tests (httpx over ASGITransport)
    mock_db_session               pure unit tests of error translation
    register / auth_headers       create users and mint bearer tokens
"""

import os

# Override settings BEFORE any noteful import; Settings() reads the env once
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./noteful_test.db"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator, Dict  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from noteful.database import Database  # noqa: E402
from noteful.models.user import User  # noqa: E402
from noteful.repositories.user_repository import user_repository  # noqa: E402
from noteful.security import create_auth_token, hash_password  # noqa: E402


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """A fresh SQLite database with every table created."""
    db = Database(url=f"sqlite+aiosqlite:///{tmp_path / 'noteful.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database):
    """
    One AsyncSession for repository tests.

    Tests call `await session.commit()` where a real request boundary
    would be, e.g. before checking a conflict.
    """
    async with database.session() as s:
        yield s


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.flush.side_effect = IntegrityError(...)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.scalar = AsyncMock(return_value=None)
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def make_user(session):
    """Factory: insert a user directly and return the committed row."""

    async def _make(username: str = "alice", password: str = "password123", fullname=None) -> User:
        user = await user_repository.create(
            session,
            username=username,
            password_hash=await hash_password(password),
            fullname=fullname,
        )
        await session.commit()
        return user

    return _make


@pytest_asyncio.fixture
async def alice(make_user) -> User:
    return await make_user("alice", fullname="Alice Example")


@pytest_asyncio.fixture
async def bob(make_user) -> User:
    return await make_user("bob", fullname="Bob Example")


@pytest.fixture
def app(database):
    """
    The FastAPI app bound to the per-test database.

    ASGITransport does not run the lifespan, so the tables created by the
    `database` fixture are all the setup there is.
    """
    from noteful.main import create_app

    return create_app(database=database)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient routed straight into the app (no server).

    Usage:
        async def test_health(client):
            response = await client.get("/api/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def bearer(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_auth_token(user)}"}


@pytest.fixture
def alice_headers(alice) -> Dict[str, str]:
    return bearer(alice)


@pytest.fixture
def bob_headers(bob) -> Dict[str, str]:
    return bearer(bob)
