"""Abstract repository contracts."""

from .menu_repo import MenuRepo
from .orders_repo import OrdersRepo
from .tenants_repo import TenantsRepo

__all__ = ["MenuRepo", "OrdersRepo", "TenantsRepo"]
