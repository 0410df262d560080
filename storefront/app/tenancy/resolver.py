"""Tenant resolution with a time-bounded cache.

Slugs are sanitized before any lookup, resolved identities are cached per
sanitized slug, and an unknown slug yields ``None`` instead of a fallback
tenant.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from typing import Awaitable, Callable

from ..domain.errors import TenantNotResolvedError
from ..storage.cache import TTLCache

logger = logging.getLogger("storefront.tenancy")

_DISALLOWED = re.compile(r"[^a-z0-9_-]")
_SHAPE = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


@dataclass(frozen=True)
class TenantIdentity:
    tenant_id: str
    slug: str
    name: str
    minimum_order_amount: int = 0


Lookup = Callable[[str], Awaitable["TenantIdentity | None"]]


def sanitize_slug(value: str | None, *, min_length: int = 2, max_length: int = 64) -> str | None:
    """Return a cleaned slug or ``None`` when ``value`` cannot be a slug.

    The value is lower-cased, stripped to ``[a-z0-9_-]`` and truncated to
    ``max_length``. Results shorter than ``min_length`` or not starting with
    a letter or digit are rejected.
    """

    if not value:
        return None
    cleaned = _DISALLOWED.sub("", value.strip().lower())[:max_length]
    if len(cleaned) < min_length or not _SHAPE.match(cleaned):
        return None
    return cleaned


class TenantResolver:
    """Resolve slugs to :class:`TenantIdentity` objects.

    ``lookup`` performs the backing query for a sanitized slug. Positive
    results are cached in ``cache``; misses are not, so a tenant created
    after a failed lookup becomes visible immediately.
    """

    def __init__(
        self,
        lookup: Lookup,
        cache: TTLCache,
        *,
        min_length: int = 2,
        max_length: int = 64,
    ) -> None:
        self.lookup = lookup
        self.cache = cache
        self.min_length = min_length
        self.max_length = max_length

    async def resolve(self, slug: str | None) -> TenantIdentity | None:
        key = sanitize_slug(slug, min_length=self.min_length, max_length=self.max_length)
        if key is None:
            logger.warning("rejected tenant slug %r", slug)
            return None

        async def _load() -> dict | None:
            identity = await self.lookup(key)
            return asdict(identity) if identity is not None else None

        data = await self.cache.get_or_load(key, _load)
        if data is None:
            logger.warning("tenant %s not found", key)
            return None
        return TenantIdentity(**data)

    async def require(self, slug: str | None) -> TenantIdentity:
        """Like :meth:`resolve` but raise :class:`TenantNotResolvedError`."""

        identity = await self.resolve(slug)
        if identity is None:
            raise TenantNotResolvedError(slug)
        return identity

    async def invalidate(self, slug: str) -> None:
        key = sanitize_slug(slug, min_length=self.min_length, max_length=self.max_length)
        if key is not None:
            await self.cache.invalidate(key)
