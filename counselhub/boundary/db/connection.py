"""
Database connection management.

One cached async engine and session factory per process, plus the FastAPI
dependency that scopes a session to a request.

Dependencies: sqlalchemy, asyncpg, counselhub.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from counselhub.configs import get_settings


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Build the shared async engine.

    PostgreSQL URLs get a bounded queue pool with pre-ping so stale
    connections are replaced before a request sees them. SQLite URLs keep
    the dialect default pool.
    """
    db_config = get_settings().database

    engine_kwargs: dict = {"echo": db_config.echo_sql}
    if db_config.uses_pool:
        engine_kwargs.update(
            poolclass=AsyncAdaptedQueuePool,
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_pre_ping=True,
        )
    return create_async_engine(db_config.async_database_url, **engine_kwargs)


@lru_cache
def get_async_session_factory() -> async_sessionmaker:
    # expire_on_commit=False keeps committed rows readable for response mapping
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a request-scoped session.

    Services commit their own unit of work; anything left uncommitted when
    the request ends is rolled back on close.
    """
    async with get_async_session_factory()() as session:
        yield session
