"""Pure pricing functions for menu items, cart lines and carts.

All amounts are whole units of the tenant currency held as
:class:`~decimal.Decimal`. Percentage discounts are rounded half-up to a
whole unit once, when the effective unit price is computed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Protocol, Sequence

from ..domain.catalog import Discount, MenuItem, MenuOption
from .discounts import apply_discount, is_discount_active

UNIT = Decimal("1")


class PricedLine(Protocol):
    unit_price: Decimal
    quantity: int


@dataclass(frozen=True)
class CartTotals:
    total_items: int
    total_amount: Decimal


def to_amount(value: object) -> Decimal:
    """Convert ``value`` to a whole-unit :class:`Decimal`."""

    return Decimal(str(value)).quantize(UNIT, rounding=ROUND_HALF_UP)


def effective_unit_price(
    item: MenuItem, discount: Discount | None = None, now: datetime | None = None
) -> Decimal:
    """Return the unit price of ``item`` after ``discount``.

    Without an active discount this is ``base_price``, falling back to the
    cached ``price`` when the catalog does not split the two.
    """

    base = item.base_price if item.base_price is not None else item.price
    if base is None:
        raise ValueError(f"menu item {item.id!r} has no price")
    base = Decimal(str(base))
    if discount is None or not is_discount_active(discount, now):
        return to_amount(base)
    return to_amount(apply_discount(base, discount))


def option_surcharge(
    options: Sequence[MenuOption], selections: Mapping[str, Iterable[str]]
) -> Decimal:
    """Return the sum of ``additional_price`` for every selected option item.

    Unknown option or item ids are ignored.
    """

    by_id = {opt.id: opt for opt in options}
    extra = Decimal("0")
    for option_id, item_ids in selections.items():
        option = by_id.get(option_id)
        if option is None:
            continue
        for item_id in item_ids:
            opt_item = option.item(item_id)
            if opt_item is not None:
                extra += Decimal(str(opt_item.additional_price))
    return extra


def line_unit_price(
    unit_price: Decimal,
    options: Sequence[MenuOption],
    selections: Mapping[str, Iterable[str]],
) -> Decimal:
    """Return ``unit_price`` plus the surcharge of the selected options."""

    return to_amount(Decimal(unit_price) + option_surcharge(options, selections))


def line_total(unit_price: Decimal, quantity: int) -> Decimal:
    """Return ``unit_price * quantity``."""

    if quantity < 0:
        raise ValueError("quantity must not be negative")
    return to_amount(Decimal(unit_price) * quantity)


def cart_totals(lines: Iterable[PricedLine]) -> CartTotals:
    """Return item count and amount for ``lines``."""

    total_items = 0
    total_amount = Decimal("0")
    for line in lines:
        total_items += line.quantity
        total_amount += Decimal(line.unit_price) * line.quantity
    return CartTotals(total_items=total_items, total_amount=to_amount(total_amount))
