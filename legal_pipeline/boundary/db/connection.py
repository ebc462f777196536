"""
Async engine and sessions for the API process.

The API shares one pooled engine. Celery tasks build their own NullPool
engine per invocation (see legal_pipeline.workers.tasks) and never touch
this one.

Dependencies: sqlalchemy, legal_pipeline.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from legal_pipeline.configs import get_settings


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Session factory with the pipeline defaults: no autoflush, no expiry on commit."""
    return async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@lru_cache
def get_async_engine() -> AsyncEngine:
    db = get_settings().database
    return create_async_engine(
        db.async_database_url,
        echo=db.echo_sql,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_timeout=db.pool_timeout,
        pool_pre_ping=True,
    )


@lru_cache
def get_async_session_factory() -> async_sessionmaker:
    """
    Process-wide session factory.

    Workers open one session per job from it; request handlers get theirs
    through get_async_db.
    """
    return build_session_factory(get_async_engine())


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, closed afterwards."""
    async with get_async_session_factory()() as session:
        yield session
