"""
Noteful Backend — Database Handle & Session Management
========================================================

What:  Async SQLAlchemy engine + session factory wrapped in a `Database` handle,
       and the FastAPI dependency that hands one session to each request.
Why:   The handle is created by the app factory and stored on `app.state`,
       so tests and production build their own storage without touching
       module globals.
How:   `Database` owns the engine; `get_db_session` opens a session per
       request, commits on success and rolls back on error.

Lifecycle:
    create_app()  → Database(url)          (engine is lazy, no connection yet)
    lifespan      → await wait_until_ready()
    shutdown      → await dispose()

Connection Pooling Strategy:
    pool_size / max_overflow / pool_pre_ping come from settings and are only
    passed for server databases. SQLite (used by the test suite) picks its own
    pool class and rejects those arguments.
"""

import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    stop_after_attempt,
    wait_exponential_jitter,
)

from noteful.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic reads for --autogenerate and
    the test suite uses for create_all().
    """
    pass


class Database:
    """
    Storage handle: one async engine and its session factory.

    Args:
        url: Async SQLAlchemy URL (postgresql+asyncpg://… or sqlite+aiosqlite://…)
        echo: Log every SQL statement (defaults to DEBUG log level)
    """

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        self.url = url or settings.database_url
        engine_kwargs = {
            "echo": settings.log_level == "DEBUG" if echo is None else echo,
        }
        if not self.url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        self.engine: AsyncEngine = create_async_engine(self.url, **engine_kwargs)
        # expire_on_commit=False: response schemas read attributes after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def session(self) -> AsyncSession:
        """Create a new session; use as `async with database.session() as s`."""
        return self.session_factory()

    async def ping(self) -> None:
        """Run SELECT 1. Raises whatever the driver raises when unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def wait_until_ready(self) -> None:
        """
        Ping the database until it answers, with exponential backoff.

        Why: in docker-compose the API container usually starts before
        PostgreSQL accepts connections. Gives up after db_connect_attempts
        and re-raises the last driver error.
        """
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(settings.db_connect_attempts),
            wait=wait_exponential_jitter(
                initial=settings.db_connect_min_wait,
                max=settings.db_connect_max_wait,
                jitter=1,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                await self.ping()
        logger.info("Database is ready")

    async def create_all(self) -> None:
        """Create every table registered on Base (tests and first-run dev)."""
        # Models register themselves on Base.metadata when imported
        import noteful.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        """Close all pooled connections (called at shutdown)."""
        await self.engine.dispose()


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from the app's Database handle
        2. Yields it to the route handler
        3. On success: commits (all writes of the request land together)
        4. On error: rolls back, then re-raises for the exception handlers
        5. Always: closes the session (returns the connection to the pool)
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
