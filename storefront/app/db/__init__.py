from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .engine import (
    create_all,
    create_engine_for,
    get_engine,
    get_session,
    get_sessionmaker,
)


async def create_test_session() -> async_sessionmaker[AsyncSession]:
    """Return a session factory bound to a fresh in-memory database.

    Both master and tenant schemas are created on the same engine to mirror
    the production setup.
    """

    engine = create_engine_for("sqlite+aiosqlite:///:memory:", "test")
    await create_all(engine)
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


__all__ = [
    "create_all",
    "create_engine_for",
    "create_test_session",
    "get_engine",
    "get_session",
    "get_sessionmaker",
]
