"""
Async SQLAlchemy engine and session factory.

The engine is built from ``Settings`` by ``create_app`` and kept on
``app.state``; route handlers receive sessions through ``get_db_session``.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import Settings
from database.models import Base


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the process-wide engine (and its connection pool)."""
    kwargs = {"echo": False, "pool_recycle": 3600}
    if settings.database_url.startswith("postgresql"):
        kwargs.update(pool_size=10, max_overflow=20)
    return create_async_engine(settings.database_url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create any missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency function — use in FastAPI `Depends(get_db_session)`."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
