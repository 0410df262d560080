"""Exception types raised by the ordering core.

Every error carries a machine readable ``code`` and optional ``details`` and
``hint`` so the HTTP layer can render the standard error envelope without
inspecting messages.
"""

from __future__ import annotations

from typing import Any


class StorefrontError(Exception):
    """Base class for all ordering errors."""

    code = "STOREFRONT_ERROR"

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        self.hint = hint


class ValidationError(StorefrontError):
    """Input problems reported before any network call is made."""

    code = "VALIDATION"


class MissingFieldsError(ValidationError):
    code = "MISSING_FIELDS"

    def __init__(self, fields: list[str]) -> None:
        super().__init__(
            "Required fields are missing: " + ", ".join(fields),
            details={"fields": fields},
        )
        self.fields = fields


class IncompleteOptionsError(ValidationError):
    """One or more cart lines lack a required customization."""

    code = "INCOMPLETE_OPTIONS"

    def __init__(self, missing: list[dict[str, Any]]) -> None:
        super().__init__(
            "Required options have not been selected",
            details={"missing": missing},
            hint="Choose a value for every required option",
        )
        self.missing = missing


class PaymentMethodError(ValidationError):
    code = "PAYMENT_METHOD"

    def __init__(self, method: str | None, available: list[str]) -> None:
        super().__init__(
            f"Payment method {method!r} is not available",
            details={"payment_method": method, "available": available},
        )
        self.method = method
        self.available = available


class EmptyCartError(ValidationError):
    code = "EMPTY_CART"

    def __init__(self) -> None:
        super().__init__("Cart is empty")


class MinimumOrderError(ValidationError):
    code = "MINIMUM_ORDER"

    def __init__(self, subtotal: Any, minimum: Any) -> None:
        super().__init__(
            f"Minimum order amount is {minimum}",
            details={"subtotal": str(subtotal), "minimum": str(minimum)},
            hint="Add more items to your cart",
        )


class TenantNotResolvedError(StorefrontError):
    code = "TENANT_NOT_RESOLVED"

    def __init__(self, slug: str | None = None) -> None:
        super().__init__(
            "Tenant could not be resolved",
            details={"slug": slug} if slug else None,
        )
        self.slug = slug


class OrderWriteError(StorefrontError):
    """The order header could not be written; nothing was persisted."""

    code = "ORDER_WRITE_FAILED"

    def __init__(self, message: str = "Failed to create order") -> None:
        super().__init__(message, hint="Try again")


class PartialOrderError(StorefrontError):
    """The header was written but its items were not.

    ``compensated`` reports whether the orphaned header was deleted again.
    """

    code = "PARTIAL_ORDER"

    def __init__(self, order_id: Any, order_code: str, compensated: bool) -> None:
        super().__init__(
            "Order items could not be saved",
            details={
                "order_id": order_id,
                "order_code": order_code,
                "compensated": compensated,
            },
        )
        self.order_id = order_id
        self.order_code = order_code
        self.compensated = compensated


class NotificationError(StorefrontError):
    """Best-effort notification failed. Logged, never surfaced."""

    code = "NOTIFICATION_FAILED"
