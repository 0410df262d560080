"""Domain models and helpers."""

from .errors import (
    EmptyCartError,
    IncompleteOptionsError,
    MinimumOrderError,
    MissingFieldsError,
    NotificationError,
    OrderWriteError,
    PartialOrderError,
    PaymentMethodError,
    StorefrontError,
    TenantNotResolvedError,
    ValidationError,
)
from .order_status import OrderStatus, TRANSITIONS, can_transition

__all__ = [
    "EmptyCartError",
    "IncompleteOptionsError",
    "MinimumOrderError",
    "MissingFieldsError",
    "NotificationError",
    "OrderStatus",
    "OrderWriteError",
    "PartialOrderError",
    "PaymentMethodError",
    "StorefrontError",
    "TRANSITIONS",
    "TenantNotResolvedError",
    "ValidationError",
    "can_transition",
]
