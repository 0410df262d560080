"""Read-only catalog value objects.

These mirror the ``menu_*`` rows but are detached from the ORM so pricing and
option selection can run without a database session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"

    @classmethod
    def parse(cls, value: str) -> "DiscountType":
        """Accept the stored ``fixed_amount`` spelling as well as ``fixed``."""

        if value == "fixed_amount":
            return cls.FIXED
        return cls(value)


class SelectionType(str, Enum):
    SINGLE_REQUIRED = "single_required"
    SINGLE_OPTIONAL = "single_optional"
    MULTIPLE = "multiple"

    @property
    def is_single(self) -> bool:
        return self is not SelectionType.MULTIPLE


@dataclass(frozen=True)
class Discount:
    type: DiscountType
    value: Decimal
    is_active: bool = True
    start_date: datetime | None = None
    end_date: datetime | None = None


@dataclass(frozen=True)
class MenuItem:
    """A purchasable menu item.

    ``price`` is the cached post-discount value some catalogs carry alongside
    ``base_price``; it is only used when no base/discount split exists.
    """

    id: str
    name: str
    base_price: Decimal | None = None
    price: Decimal | None = None
    discount_id: str | None = None
    photo_url: str | None = None
    category_id: str | None = None


@dataclass(frozen=True)
class MenuOptionItem:
    id: str
    option_id: str
    name: str
    additional_price: Decimal = Decimal("0")
    is_available: bool = True


@dataclass(frozen=True)
class MenuOption:
    """A customization group such as *Size* or *Topping*."""

    id: str
    label: str
    selection_type: SelectionType
    max_selections: int = 1
    is_required: bool = False
    items: tuple[MenuOptionItem, ...] = field(default_factory=tuple)

    def item(self, item_id: str) -> MenuOptionItem | None:
        for opt_item in self.items:
            if opt_item.id == item_id:
                return opt_item
        return None

    @property
    def available_items(self) -> list[MenuOptionItem]:
        return [i for i in self.items if i.is_available]
