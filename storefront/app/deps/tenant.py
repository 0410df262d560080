from __future__ import annotations

"""Dependency helpers for tenant resolution."""

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.errors import TenantNotResolvedError
from ..obs.logging import tenant_ctx
from ..tenancy.resolver import TenantIdentity


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session from the application's session factory."""
    async with request.app.state.sessionmaker() as session:
        yield session


async def get_tenant(slug: str, request: Request) -> TenantIdentity:
    """Resolve the ``slug`` path parameter to a tenant.

    The resolved identity is the only tenant source for the rest of the
    request; routes pass ``tenant.tenant_id`` down explicitly.

    Raises:
        TenantNotResolvedError: If the slug is malformed or unknown.
    """
    identity = await request.app.state.resolver.resolve(slug)
    if identity is None:
        raise TenantNotResolvedError(slug)
    tenant_ctx.set(identity.slug)
    return identity


async def get_tenant_id(tenant: TenantIdentity = Depends(get_tenant)) -> str:
    return tenant.tenant_id
