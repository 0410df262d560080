from __future__ import annotations

"""Dependency helpers for the per-session cart."""

from fastapi import Depends, Header, HTTPException, Request

from ..cart.store import CartStore
from ..tenancy.resolver import TenantIdentity
from .tenant import get_tenant


def cart_key(base: str, tenant_id: str | None, cart_session: str | None) -> str:
    """Return the storage key of a cart.

    ``tenant_id`` and ``cart_session`` are appended when given so carts of
    different stores and visitors never share a key.
    """
    parts = [base]
    if tenant_id:
        parts.append(tenant_id)
    if cart_session:
        parts.append(cart_session)
    return ":".join(parts)


async def get_cart(
    request: Request,
    tenant: TenantIdentity = Depends(get_tenant),
    x_cart_session: str | None = Header(default=None),
) -> CartStore:
    """Return the cart addressed by ``X-Cart-Session`` for ``tenant``."""
    if not x_cart_session:
        raise HTTPException(400, "Missing X-Cart-Session")
    settings = request.app.state.settings
    tenant_id = tenant.tenant_id if settings.cart_scope_by_tenant else None
    key = cart_key(settings.cart_storage_key, tenant_id, x_cart_session.strip()[:64])
    return await CartStore.open(request.app.state.storage, key)
