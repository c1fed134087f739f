"""SQLAlchemy async session configuration.

This module provides:
- Async engine creation
- Async session factory
- Session dependency for FastAPI
- Database initialization utilities
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.db.models import Base


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for the given database URL.

    In-memory SQLite databases live as long as their connection, so they
    share a single static connection across sessions.
    """
    if url.startswith("sqlite") and ":memory:" in url:
        return create_async_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(url, echo=echo)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# Create async engine
engine: AsyncEngine = build_engine(settings.database.url, echo=settings.database.echo)

# Create async session factory
async_session_factory: async_sessionmaker[AsyncSession] = build_session_factory(engine)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides an async database session.

    The session is committed when the request handler returns and rolled
    back if it raises.

    Yields:
        AsyncSession: An async SQLAlchemy session.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession, None]:
    """Context manager for getting a database session outside of FastAPI.

    Used by the startup data generation.

    Example:
        async with get_session_context() as session:
            store = CallRecordStore(session)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Initialize the database by creating all tables.

    Should be called during application startup.
    """
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close the database engine.

    Should be called during application shutdown.
    """
    await engine.dispose()
