"""Repository interface for tenant lookups."""

from abc import ABC, abstractmethod


class TenantsRepo(ABC):
    @abstractmethod
    def get_by_slug(self, session, slug):
        """Return the active tenant for ``slug`` or ``None``."""
        raise NotImplementedError
