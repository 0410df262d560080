"""Async string key-value stores.

Values are JSON text written by the callers. A write is durable once the
awaited call returns.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from redis.asyncio import Redis, from_url

from config import Settings

logger = logging.getLogger("storefront.storage")


@runtime_checkable
class KeyValueStorage(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def keys(self, prefix: str) -> list[str]: ...


class MemoryStorage:
    """Process-local storage for tests and single-process deployments."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def keys(self, prefix: str) -> list[str]:
        return [key for key in self._data if key.startswith(prefix)]


class RedisStorage:
    """Storage backed by an asyncio redis client."""

    def __init__(self, client: Redis) -> None:
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisStorage":
        return cls(from_url(url, decode_responses=True))

    async def get(self, key: str) -> str | None:
        value = await self.client.get(key)
        if isinstance(value, bytes):
            return value.decode()
        return value

    async def set(self, key: str, value: str) -> None:
        await self.client.set(key, value)

    async def delete(self, key: str) -> None:
        await self.client.delete(key)

    async def keys(self, prefix: str) -> list[str]:
        found = []
        async for key in self.client.scan_iter(match=f"{prefix}*"):
            found.append(key.decode() if isinstance(key, bytes) else key)
        return found

    async def close(self) -> None:
        await self.client.aclose()


def build_storage(settings: Settings) -> KeyValueStorage:
    """Return redis storage when ``redis_url`` is configured, else memory."""

    if settings.redis_url:
        return RedisStorage.from_url(settings.redis_url)
    logger.info("REDIS_URL not set; using in-memory storage")
    return MemoryStorage()
