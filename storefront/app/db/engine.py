from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from config import get_settings

from ..models_master import Base as MasterBase
from ..models_tenant import Base as TenantBase
from ..obs import add_query_logger

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def create_engine_for(url: str, label: str = "storefront") -> AsyncEngine:
    """Return an :class:`AsyncEngine` for ``url`` with query logging attached.

    In-memory SQLite URLs get a :class:`StaticPool` so every session sees the
    same database.
    """

    kwargs: dict = {}
    if url.startswith("sqlite") and ":memory:" in url:
        kwargs = {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    engine = create_async_engine(url, **kwargs)
    add_query_logger(engine, label)
    return engine


def get_engine() -> AsyncEngine:
    """Return a singleton async engine for the configured database."""
    global _engine, _sessionmaker
    if _engine is None:
        _engine = create_engine_for(get_settings().database_url)
        _sessionmaker = async_sessionmaker(
            _engine, expire_on_commit=False, class_=AsyncSession
        )
    return _engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    if _sessionmaker is None:
        get_engine()
    assert _sessionmaker is not None  # for type checkers
    return _sessionmaker


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session and ensure it is closed afterwards."""
    session = get_sessionmaker()()
    try:
        yield session
    finally:
        await session.close()


async def create_all(engine: AsyncEngine) -> None:
    """Create the master and tenant schemas on ``engine``."""
    async with engine.begin() as conn:
        await conn.run_sync(MasterBase.metadata.create_all)
        await conn.run_sync(TenantBase.metadata.create_all)


__all__ = [
    "create_all",
    "create_engine_for",
    "get_engine",
    "get_session",
    "get_sessionmaker",
]
