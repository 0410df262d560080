"""Persistent cart store.

The cart is an ordered list of :class:`CartLine` objects written to a
:class:`KeyValueStorage` after every mutation. Line identity is
``(item_id, fingerprint)``; see :meth:`CartStore.remove_item` for how bare
item ids are treated.
"""

from __future__ import annotations

import asyncio
import json
import logging
import weakref
from decimal import Decimal
from typing import Iterator

from pydantic import ValidationError as PydanticValidationError

from ..pricing.engine import CartTotals, cart_totals
from ..storage.kv import KeyValueStorage
from .models import CartLine

logger = logging.getLogger("storefront.cart")

DEFAULT_KEY = "storefront-cart"

# One lock per storage key, shared by every live store for that key (one per
# HTTP request). An entry disappears once no store references its lock.
_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def _lock_for(key: str) -> asyncio.Lock:
    lock = _locks.get(key)
    if lock is None:
        lock = asyncio.Lock()
        _locks[key] = lock
    return lock


class CartStore:
    """Ordered cart lines with merge, update and remove semantics.

    A new store is empty until :meth:`reload` runs; :meth:`open` does both.
    Every mutation re-reads storage under the per-key lock before writing.
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_KEY) -> None:
        self.storage = storage
        self.key = key
        self._lock = _lock_for(key)
        self._lines: list[CartLine] = []

    @classmethod
    async def open(cls, storage: KeyValueStorage, key: str = DEFAULT_KEY) -> "CartStore":
        store = cls(storage, key)
        await store.reload()
        return store

    async def _load(self) -> list[CartLine]:
        raw = await self.storage.get(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
            return [CartLine.model_validate(entry) for entry in data]
        except (ValueError, TypeError, PydanticValidationError):
            logger.warning("discarding unreadable cart at %s", self.key)
            return []

    async def _save(self) -> None:
        payload = json.dumps([line.to_storage() for line in self._lines])
        await self.storage.set(self.key, payload)

    async def reload(self) -> None:
        async with self._lock:
            self._lines = await self._load()

    @property
    def lines(self) -> list[CartLine]:
        return [line.model_copy() for line in self._lines]

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def totals(self) -> CartTotals:
        return cart_totals(self._lines)

    @property
    def total_items(self) -> int:
        return self.totals().total_items

    @property
    def total_amount(self) -> Decimal:
        return self.totals().total_amount

    def find(self, item_id: str, fingerprint: str | None = None) -> list[CartLine]:
        return [
            line.model_copy()
            for line in self._lines
            if self._matches(line, item_id, fingerprint)
        ]

    @staticmethod
    def _matches(line: CartLine, item_id: str, fingerprint: str | None) -> bool:
        if line.item_id != item_id:
            return False
        return fingerprint is None or line.fingerprint == fingerprint

    async def add_item(self, line: CartLine) -> CartLine:
        """Add ``line`` or merge it into the line with the same identity.

        On merge only the quantity changes; the existing line keeps its price.
        """

        async with self._lock:
            self._lines = await self._load()
            for idx, existing in enumerate(self._lines):
                if existing.key == line.key:
                    if existing.unit_price != line.unit_price:
                        logger.warning(
                            "price mismatch merging %s: keeping %s, ignoring %s",
                            line.item_id,
                            existing.unit_price,
                            line.unit_price,
                        )
                    merged = existing.model_copy(
                        update={"quantity": existing.quantity + line.quantity}
                    )
                    self._lines[idx] = merged
                    await self._save()
                    return merged.model_copy()
            added = line.model_copy()
            self._lines.append(added)
            await self._save()
            return added.model_copy()

    async def remove_item(self, item_id: str, fingerprint: str | None = None) -> int:
        """Remove lines for ``item_id`` and return how many were removed.

        With ``fingerprint`` only that exact line goes. Without it every
        variant of the item is removed.
        """

        async with self._lock:
            self._lines = await self._load()
            before = len(self._lines)
            self._lines = [
                line
                for line in self._lines
                if not self._matches(line, item_id, fingerprint)
            ]
            removed = before - len(self._lines)
            if removed:
                await self._save()
            return removed

    async def update_quantity(
        self, item_id: str, quantity: int, fingerprint: str | None = None
    ) -> int:
        """Set the quantity of matching lines; ``quantity <= 0`` removes them.

        Matching follows :meth:`remove_item`. Returns the number of lines
        touched.
        """

        if quantity <= 0:
            return await self.remove_item(item_id, fingerprint)
        async with self._lock:
            self._lines = await self._load()
            touched = 0
            for idx, line in enumerate(self._lines):
                if self._matches(line, item_id, fingerprint):
                    self._lines[idx] = line.model_copy(update={"quantity": quantity})
                    touched += 1
            if touched:
                await self._save()
            return touched

    async def clear_cart(self) -> None:
        async with self._lock:
            self._lines = []
            await self._save()
