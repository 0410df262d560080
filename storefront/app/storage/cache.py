"""Time-bounded cache entries stored in a :class:`KeyValueStorage`."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Awaitable, Callable

from .kv import KeyValueStorage

logger = logging.getLogger("storefront.cache")

_MISSING = object()


class TTLCache:
    """Cache JSON-serialisable values under ``namespace`` for ``ttl`` seconds.

    Entries are stored as ``{"value": ..., "expires_at": ...}`` so expiry is
    evaluated by the reader and works on any storage backend. ``clock`` is
    injectable for tests.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        ttl: float,
        *,
        namespace: str = "cache",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.storage = storage
        self.ttl = ttl
        self.namespace = namespace
        self.clock = clock

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def get(self, key: str, default: Any = None) -> Any:
        raw = await self.storage.get(self._key(key))
        if raw is None:
            return default
        try:
            entry = json.loads(raw)
            expires_at = float(entry["expires_at"])
        except (ValueError, KeyError, TypeError):
            await self.storage.delete(self._key(key))
            return default
        if self.clock() >= expires_at:
            return default
        return entry["value"]

    async def set(self, key: str, value: Any) -> None:
        entry = {"value": value, "expires_at": self.clock() + self.ttl}
        await self.storage.set(self._key(key), json.dumps(entry))

    async def invalidate(self, key: str) -> None:
        await self.storage.delete(self._key(key))

    async def clear(self) -> int:
        """Delete every entry in this namespace, whoever wrote it."""

        keys = await self.storage.keys(f"{self.namespace}:")
        for key in keys:
            await self.storage.delete(key)
        return len(keys)

    async def get_or_load(
        self, key: str, loader: Callable[[], Awaitable[Any]]
    ) -> Any:
        """Return the cached value for ``key`` or await ``loader`` and cache it.

        ``None`` results are not cached so a later lookup can succeed.
        """

        cached = await self.get(key, _MISSING)
        if cached is not _MISSING:
            logger.debug("cache hit %s:%s", self.namespace, key)
            return cached
        logger.debug("cache miss %s:%s", self.namespace, key)
        value = await loader()
        if value is not None:
            await self.set(key, value)
        return value
