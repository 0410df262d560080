import gc
import json
import logging
from decimal import Decimal

import anyio
import fakeredis.aioredis
import pytest

from storefront.app.cart import DEFAULT_KEY, CartLine, CartStore, selections_fingerprint
from storefront.app.cart import store as cart_store_module
from storefront.app.pricing import cart_totals
from storefront.app.storage import MemoryStorage, RedisStorage


def _line(item_id="A", price="15000", qty=1, selections=None, notes=None):
    return CartLine(
        item_id=item_id,
        name=f"Item {item_id}",
        unit_price=Decimal(price),
        quantity=qty,
        selections=selections or {},
        notes=notes,
    )


class YieldingStorage(MemoryStorage):
    """Memory storage that gives other tasks a turn on every call."""

    async def get(self, key):
        await anyio.sleep(0)
        return await super().get(key)

    async def set(self, key, value):
        await anyio.sleep(0)
        await super().set(key, value)


@pytest.mark.anyio
async def test_same_identity_merges_quantities(storage):
    cart = CartStore(storage)
    await cart.add_item(_line(qty=2))
    merged = await cart.add_item(_line(qty=3))
    assert len(cart) == 1
    assert merged.quantity == 5
    assert cart.total_items == 5


@pytest.mark.anyio
async def test_merge_keeps_first_price(storage, caplog):
    cart = CartStore(storage)
    await cart.add_item(_line(price="15000"))
    with caplog.at_level(logging.WARNING, logger="storefront.cart"):
        await cart.add_item(_line(price="17000"))
    assert cart.lines[0].unit_price == Decimal("15000")
    assert cart.total_amount == Decimal("30000")
    assert "price mismatch" in caplog.text


@pytest.mark.anyio
async def test_different_customizations_are_separate_lines(storage):
    cart = CartStore(storage)
    await cart.add_item(_line(selections={"size": ["large"]}, price="17000"))
    await cart.add_item(_line(selections={"size": ["regular"]}))
    await cart.add_item(_line(notes="less ice"))
    assert len(cart) == 3
    assert len({line.fingerprint for line in cart}) == 3


def test_fingerprint_ignores_click_order_and_whitespace():
    a = selections_fingerprint({"top": ["boba", "jelly"], "size": ["l"]}, " hot ")
    b = selections_fingerprint({"size": ["l"], "top": ["jelly", "boba"], "sugar": []}, "hot")
    assert a == b
    assert selections_fingerprint({}, None) == selections_fingerprint(None, "  ")


@pytest.mark.anyio
async def test_remove_by_bare_id_removes_every_variant(storage):
    cart = CartStore(storage)
    await cart.add_item(_line("A", selections={"size": ["large"]}))
    await cart.add_item(_line("A"))
    await cart.add_item(_line("B", price="10000"))
    assert await cart.remove_item("A") == 2
    assert [line.item_id for line in cart] == ["B"]


@pytest.mark.anyio
async def test_remove_by_fingerprint_removes_one_line(storage):
    cart = CartStore(storage)
    large = await cart.add_item(_line("A", selections={"size": ["large"]}))
    await cart.add_item(_line("A"))
    assert await cart.remove_item("A", large.fingerprint) == 1
    assert len(cart) == 1
    assert cart.lines[0].selections == {}
    assert await cart.remove_item("missing") == 0


@pytest.mark.anyio
async def test_update_quantity_sets_value(storage):
    cart = CartStore(storage)
    await cart.add_item(_line(qty=2))
    assert await cart.update_quantity("A", 7) == 1
    assert cart.lines[0].quantity == 7


@pytest.mark.anyio
async def test_update_quantity_by_fingerprint(storage):
    cart = CartStore(storage)
    large = await cart.add_item(_line("A", selections={"size": ["large"]}))
    await cart.add_item(_line("A"))
    await cart.update_quantity("A", 4, large.fingerprint)
    assert sorted(line.quantity for line in cart) == [1, 4]


@pytest.mark.anyio
async def test_update_to_zero_equals_remove():
    first = CartStore(MemoryStorage())
    second = CartStore(MemoryStorage())
    for cart in (first, second):
        await cart.add_item(_line("A", qty=2))
        await cart.add_item(_line("B", price="10000"))
    await first.update_quantity("A", 0)
    await second.remove_item("A")
    assert [l.model_dump() for l in first] == [l.model_dump() for l in second]
    assert first.find("A") == []
    assert await first.update_quantity("B", -3) == 1
    assert first.is_empty()


def test_quantity_below_one_is_rejected():
    with pytest.raises(ValueError):
        _line(qty=0)


@pytest.mark.anyio
async def test_clear_cart(storage):
    cart = CartStore(storage)
    await cart.add_item(_line())
    await cart.clear_cart()
    assert cart.is_empty()
    assert json.loads(await storage.get(DEFAULT_KEY)) == []


@pytest.mark.anyio
async def test_every_mutation_is_persisted_and_rehydrates(storage):
    cart = CartStore(storage)
    await cart.add_item(_line("A", qty=2, selections={"size": ["large"]}, notes="hot"))
    await cart.add_item(_line("B", price="10000"))
    before = cart.lines

    reloaded = await CartStore.open(storage)
    assert reloaded.lines == before
    assert reloaded.totals() == cart.totals()
    assert reloaded.totals().total_amount == Decimal("40000")


@pytest.mark.anyio
async def test_corrupt_storage_starts_empty(storage, caplog):
    await storage.set(DEFAULT_KEY, "{not json")
    with caplog.at_level(logging.WARNING, logger="storefront.cart"):
        cart = await CartStore.open(storage)
    assert cart.is_empty()
    assert "unreadable cart" in caplog.text
    await storage.set(DEFAULT_KEY, json.dumps([{"item_id": "A"}]))
    assert (await CartStore.open(storage)).is_empty()


@pytest.mark.anyio
async def test_separate_keys_do_not_share_lines(storage):
    await CartStore(storage, "cart:t1:s1").add_item(_line())
    assert (await CartStore.open(storage, "cart:t2:s1")).is_empty()


@pytest.mark.anyio
async def test_totals_match_line_sum_after_mixed_operations(storage):
    cart = CartStore(storage)
    await cart.add_item(_line("A", qty=2))
    await cart.add_item(_line("B", price="10000", qty=1))
    await cart.add_item(_line("C", price="5000", qty=4, notes="extra hot"))
    await cart.add_item(_line("A", qty=1))
    await cart.update_quantity("B", 3)
    await cart.remove_item("C")
    await cart.add_item(_line("C", price="5000"))
    expected = sum(l.unit_price * l.quantity for l in cart.lines)
    assert cart.total_amount == expected == Decimal("80000")
    assert cart.total_items == 7
    assert cart_totals(cart.lines) == cart.totals()


@pytest.mark.anyio
async def test_concurrent_adds_from_separate_stores_are_serialized():
    storage = YieldingStorage()
    key = "storefront-cart:t1:busy"

    async def add(qty):
        store = await CartStore.open(storage, key)
        await store.add_item(_line(qty=qty))

    async with anyio.create_task_group() as tg:
        for qty in range(1, 21):
            tg.start_soon(add, qty)

    cart = await CartStore.open(storage, key)
    assert len(cart) == 1
    assert cart.total_items == sum(range(1, 21))


@pytest.mark.anyio
async def test_concurrent_mixed_lines_are_all_kept():
    storage = YieldingStorage()
    key = "storefront-cart:t1:mixed"

    async def add(item_id):
        await CartStore(storage, key).add_item(_line(item_id, price="1000"))

    async with anyio.create_task_group() as tg:
        for n in range(10):
            tg.start_soon(add, f"item-{n}")

    cart = await CartStore.open(storage, key)
    assert sorted(line.item_id for line in cart) == sorted(f"item-{n}" for n in range(10))


def test_lock_table_does_not_grow_with_visitors():
    storage = MemoryStorage()
    before = len(cart_store_module._locks)
    for n in range(1000):
        CartStore(storage, f"storefront-cart:t1:visitor-{n}")
    gc.collect()
    assert len(cart_store_module._locks) <= before


def test_stores_sharing_a_key_share_a_lock():
    storage = MemoryStorage()
    first = CartStore(storage, "storefront-cart:t1:same")
    second = CartStore(storage, "storefront-cart:t1:same")
    other = CartStore(storage, "storefront-cart:t1:other")
    assert first._lock is second._lock
    assert first._lock is not other._lock


@pytest.mark.anyio
async def test_redis_storage_round_trip():
    storage = RedisStorage(fakeredis.aioredis.FakeRedis(decode_responses=True))
    cart = CartStore(storage, "storefront-cart:t1:abc")
    await cart.add_item(_line(qty=2))
    assert (await CartStore.open(storage, "storefront-cart:t1:abc")).total_items == 2
