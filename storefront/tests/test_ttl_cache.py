import json

import fakeredis.aioredis
import pytest

from storefront.app.storage import MemoryStorage, RedisStorage, TTLCache


class Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.anyio
async def test_entries_expire_after_ttl():
    clock = Clock()
    cache = TTLCache(MemoryStorage(), 300, namespace="catalog", clock=clock)
    await cache.set("menu:t1", {"items": []})
    clock.now = 299.9
    assert await cache.get("menu:t1") == {"items": []}
    clock.now = 300
    assert await cache.get("menu:t1") is None


@pytest.mark.anyio
async def test_entries_are_namespaced_json():
    storage = MemoryStorage()
    await TTLCache(storage, 10, namespace="tenant", clock=lambda: 5.0).set("kopi", {"a": 1})
    assert json.loads(await storage.get("tenant:kopi")) == {"value": {"a": 1}, "expires_at": 15.0}
    assert await TTLCache(storage, 10, namespace="other").get("kopi") is None


@pytest.mark.anyio
async def test_corrupt_entry_is_dropped():
    storage = MemoryStorage()
    await storage.set("cache:k", "garbage")
    cache = TTLCache(storage, 10)
    assert await cache.get("k", "fallback") == "fallback"
    assert await storage.get("cache:k") is None


@pytest.mark.anyio
async def test_invalidate_and_clear():
    cache = TTLCache(MemoryStorage(), 10)
    await cache.set("a", 1)
    await cache.set("b", 2)
    await cache.invalidate("a")
    assert await cache.get("a") is None
    assert await cache.clear() == 1
    assert await cache.get("b") is None


@pytest.mark.anyio
async def test_clear_drops_entries_written_by_other_workers():
    storage = RedisStorage(fakeredis.aioredis.FakeRedis(decode_responses=True))
    await TTLCache(storage, 60, namespace="catalog").set("menu:t1", {"n": 1})
    await TTLCache(storage, 60, namespace="catalog").set("menu:t2", {"n": 2})
    await TTLCache(storage, 60, namespace="tenant").set("kopi", {"n": 3})

    cleared = await TTLCache(storage, 60, namespace="catalog").clear()

    assert cleared == 2
    assert await storage.keys("catalog:") == []
    assert await TTLCache(storage, 60, namespace="tenant").get("kopi") == {"n": 3}


@pytest.mark.anyio
async def test_get_or_load_replaces_expired_entries():
    clock = Clock()
    cache = TTLCache(MemoryStorage(), 60, clock=clock)
    loads: list[int] = []

    async def loader():
        loads.append(1)
        return {"n": len(loads)}

    assert await cache.get_or_load("k", loader) == {"n": 1}
    assert await cache.get_or_load("k", loader) == {"n": 1}
    clock.now = 61
    assert await cache.get_or_load("k", loader) == {"n": 2}
    assert len(loads) == 2


@pytest.mark.anyio
async def test_none_is_not_cached():
    cache = TTLCache(MemoryStorage(), 60)
    calls: list[int] = []

    async def loader():
        calls.append(1)
        return None

    await cache.get_or_load("k", loader)
    await cache.get_or_load("k", loader)
    assert len(calls) == 2
