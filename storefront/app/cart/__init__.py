"""Customer cart."""

from .models import CartLine, selections_fingerprint
from .store import DEFAULT_KEY, CartStore

__all__ = ["CartLine", "CartStore", "DEFAULT_KEY", "selections_fingerprint"]
