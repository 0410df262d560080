"""Shared fixtures for storefront tests."""

import os
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[2]))

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SHEETS_WEBHOOK_URL", "")

from storefront.app.db import create_test_session  # noqa: E402
from storefront.app.storage import MemoryStorage  # noqa: E402

from _seed_tenant import seed_catalog  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
async def Session():
    factory = await create_test_session()
    await seed_catalog(factory)
    yield factory
    await factory.kw["bind"].dispose()
