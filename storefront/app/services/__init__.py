"""Service layer helpers for the storefront."""

from .catalog import CatalogService
from .checkout import CheckoutForm, CheckoutResult, CheckoutSubmitter
from .notifications import SheetsNotifier, order_summary

__all__ = [
    "CatalogService",
    "CheckoutForm",
    "CheckoutResult",
    "CheckoutSubmitter",
    "SheetsNotifier",
    "order_summary",
]
