"""Repository interface for order operations."""

from abc import ABC, abstractmethod


class OrdersRepo(ABC):
    """Contract for order persistence.

    Header and items are written by separate calls; callers own the
    compensation when the second call fails.
    """

    @abstractmethod
    def insert_order(self, session, tenant_id, header):
        """Insert an order header and return the created row."""
        raise NotImplementedError

    @abstractmethod
    def insert_items(self, session, tenant_id, order_id, items):
        """Bulk insert the line items of an order."""
        raise NotImplementedError

    @abstractmethod
    def delete_order(self, session, tenant_id, order_id):
        """Delete an order header and any items it has."""
        raise NotImplementedError

    @abstractmethod
    def list_orphaned(self, session, tenant_id):
        """Return order headers that have no line items."""
        raise NotImplementedError

    @abstractmethod
    def get_by_code(self, session, tenant_id, order_code):
        """Return one order with its items, looked up by its public code."""
        raise NotImplementedError

    @abstractmethod
    def list_by_phone(self, session, tenant_id, phone, limit=50):
        """Return the newest orders placed with a phone number."""
        raise NotImplementedError

    @abstractmethod
    def update_status(self, session, tenant_id, order_id, status):
        """Apply an allowed status transition."""
        raise NotImplementedError
