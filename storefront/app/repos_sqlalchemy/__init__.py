"""SQLAlchemy-backed repository implementations.

This module also exposes ``TenantGuard``, a tiny helper asserting that
repository calls are always scoped to a tenant. All tenants share one
database, so scoping relies on every query filtering on ``tenant_id``.
"""


class TenantGuard:
    """Utility providing tenant scoping assertions."""

    @staticmethod
    def assert_tenant(tenant_id: str | None) -> None:
        """Raise ``PermissionError`` if ``tenant_id`` is blank."""

        if not tenant_id:
            raise PermissionError("tenant_id required")


from .menu_repo_sql import MenuRepoSQL  # noqa: E402
from .orders_repo_sql import OrderHeader, OrderLine, OrderSummary, OrdersRepoSQL  # noqa: E402
from .tenants_repo_sql import TenantsRepoSQL  # noqa: E402

__all__ = [
    "MenuRepoSQL",
    "OrderHeader",
    "OrderLine",
    "OrderSummary",
    "OrdersRepoSQL",
    "TenantGuard",
    "TenantsRepoSQL",
]
