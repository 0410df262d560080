"""Repository interface for menu operations."""

from abc import ABC, abstractmethod


class MenuRepo(ABC):
    """Contract for tenant-scoped catalog reads."""

    @abstractmethod
    def list_categories(self, session, tenant_id):
        """Return active categories in display order."""
        raise NotImplementedError

    @abstractmethod
    def list_items(self, session, tenant_id):
        """Return menu items with their discounts."""
        raise NotImplementedError

    @abstractmethod
    def get_item(self, session, tenant_id, item_id):
        """Return one menu item and its discount."""
        raise NotImplementedError

    @abstractmethod
    def list_options(self, session, tenant_id, item_id):
        """Return option groups of a menu item."""
        raise NotImplementedError

    @abstractmethod
    def list_payment_methods(self, session, tenant_id):
        """Return the payment types currently enabled for a tenant."""
        raise NotImplementedError
