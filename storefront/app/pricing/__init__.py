"""Menu, line and cart pricing."""

from .discounts import apply_discount, is_discount_active
from .engine import (
    CartTotals,
    cart_totals,
    effective_unit_price,
    line_total,
    line_unit_price,
    option_surcharge,
    to_amount,
)

__all__ = [
    "CartTotals",
    "apply_discount",
    "cart_totals",
    "effective_unit_price",
    "is_discount_active",
    "line_total",
    "line_unit_price",
    "option_surcharge",
    "to_amount",
]
