"""SQLAlchemy implementation of the tenant lookup."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models_master import Tenant
from ..repos.tenants_repo import TenantsRepo
from ..tenancy.resolver import TenantIdentity


class TenantsRepoSQL(TenantsRepo):
    async def get_by_slug(self, session: AsyncSession, slug: str) -> TenantIdentity | None:
        result = await session.execute(
            select(Tenant).where(Tenant.slug == slug, Tenant.is_active.is_(True))
        )
        tenant = result.scalar_one_or_none()
        if tenant is None:
            return None
        return TenantIdentity(
            tenant_id=tenant.id,
            slug=tenant.slug,
            name=tenant.name,
            minimum_order_amount=int(tenant.minimum_order_amount or 0),
        )
