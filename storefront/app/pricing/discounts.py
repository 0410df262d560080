"""Helpers for menu item discount pricing."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from ..domain.catalog import Discount, DiscountType

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _aware(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with aware ones."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_discount_active(discount: Discount | None, now: datetime | None = None) -> bool:
    """Return ``True`` if ``discount`` applies at ``now``.

    Parameters
    ----------
    discount:
        Discount definition or ``None``.
    now:
        Reference time. Defaults to :func:`datetime.now` in UTC. The validity
        window is ``start_date <= now < end_date``; a missing bound is open.
    """

    if discount is None or not discount.is_active:
        return False
    current = _aware(now or datetime.now(timezone.utc))
    if discount.start_date is not None and current < _aware(discount.start_date):
        return False
    if discount.end_date is not None and current >= _aware(discount.end_date):
        return False
    return True


def apply_discount(price: Decimal, discount: Discount) -> Decimal:
    """Return ``price`` adjusted per ``discount``, never below zero.

    Percentages are clamped to ``0..100`` so a misconfigured value cannot
    produce a negative or inflated price.
    """

    value = Decimal(str(discount.value))
    if discount.type is DiscountType.PERCENTAGE:
        pct = min(max(value, ZERO), HUNDRED)
        price = price * (HUNDRED - pct) / HUNDRED
    else:
        price = price - max(value, ZERO)
    return max(price, ZERO)
