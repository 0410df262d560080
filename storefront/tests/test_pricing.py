from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.app.domain.catalog import (
    Discount,
    DiscountType,
    MenuItem,
    MenuOption,
    MenuOptionItem,
    SelectionType,
)
from storefront.app.pricing import (
    apply_discount,
    cart_totals,
    effective_unit_price,
    is_discount_active,
    line_total,
    line_unit_price,
)
from storefront.app.cart import CartLine

NOW = datetime(2025, 10, 17, 12, 0, tzinfo=timezone.utc)

TOPPING = MenuOption(
    id="topping",
    label="Topping",
    selection_type=SelectionType.MULTIPLE,
    max_selections=2,
    items=(
        MenuOptionItem(id="boba", option_id="topping", name="Boba", additional_price=Decimal("2000")),
        MenuOptionItem(id="jelly", option_id="topping", name="Jelly", additional_price=Decimal("1500")),
    ),
)


def test_percentage_discount_with_option_and_quantity():
    item = MenuItem(id="latte", name="Latte", base_price=Decimal("20000"))
    discount = Discount(type=DiscountType.PERCENTAGE, value=Decimal("10"))

    unit = effective_unit_price(item, discount, NOW)
    assert unit == Decimal("18000")

    priced = line_unit_price(unit, [TOPPING], {"topping": ["boba"]})
    assert priced == Decimal("20000")
    assert line_total(priced, 3) == Decimal("60000")


def test_no_discount_uses_base_price_then_cached_price():
    assert effective_unit_price(MenuItem(id="a", name="A", base_price=Decimal("12000"))) == 12000
    assert effective_unit_price(MenuItem(id="b", name="B", price=Decimal("9000"))) == 9000


def test_missing_price_is_an_error():
    with pytest.raises(ValueError):
        effective_unit_price(MenuItem(id="a", name="A"))


def test_inactive_discount_is_ignored():
    item = MenuItem(id="a", name="A", base_price=Decimal("20000"))
    discount = Discount(type=DiscountType.PERCENTAGE, value=Decimal("50"), is_active=False)
    assert effective_unit_price(item, discount, NOW) == Decimal("20000")


@pytest.mark.parametrize(
    "dtype,value,expected",
    [
        (DiscountType.FIXED, "5000", "15000"),
        (DiscountType.FIXED, "25000", "0"),
        (DiscountType.PERCENTAGE, "150", "0"),
        (DiscountType.PERCENTAGE, "-20", "20000"),
        (DiscountType.FIXED, "-500", "20000"),
    ],
)
def test_discounts_never_go_negative(dtype, value, expected):
    item = MenuItem(id="a", name="A", base_price=Decimal("20000"))
    price = effective_unit_price(item, Discount(type=dtype, value=Decimal(value)), NOW)
    assert price == Decimal(expected)
    assert price >= 0


def test_fixed_amount_spelling_is_accepted():
    assert DiscountType.parse("fixed_amount") is DiscountType.FIXED
    assert DiscountType.parse("percentage") is DiscountType.PERCENTAGE


def test_percentage_rounds_to_whole_units():
    discount = Discount(type=DiscountType.PERCENTAGE, value=Decimal("15"))
    assert apply_discount(Decimal("9999"), discount) == Decimal("8499.15")
    item = MenuItem(id="a", name="A", base_price=Decimal("9999"))
    assert effective_unit_price(item, discount, NOW) == Decimal("8499")


def test_discount_validity_window():
    discount = Discount(
        type=DiscountType.FIXED,
        value=Decimal("1000"),
        start_date=NOW - timedelta(days=1),
        end_date=NOW + timedelta(days=1),
    )
    assert is_discount_active(discount, NOW)
    assert not is_discount_active(discount, NOW - timedelta(days=2))
    assert not is_discount_active(discount, NOW + timedelta(days=1))
    naive = Discount(
        type=DiscountType.FIXED,
        value=Decimal("1000"),
        start_date=datetime(2025, 10, 18),
    )
    assert not is_discount_active(naive, NOW)
    assert not is_discount_active(None, NOW)


def test_unknown_selections_add_nothing():
    assert line_unit_price(Decimal("5000"), [TOPPING], {"size": ["x"], "topping": ["nope"]}) == 5000


def test_cart_totals_example():
    lines = [
        CartLine(item_id="A", name="A", unit_price=Decimal("15000"), quantity=2, notes=""),
        CartLine(item_id="B", name="B", unit_price=Decimal("10000"), quantity=1, notes=""),
    ]
    totals = cart_totals(lines)
    assert totals.total_items == 3
    assert totals.total_amount == Decimal("40000")


def test_cart_totals_empty():
    totals = cart_totals([])
    assert totals.total_items == 0
    assert totals.total_amount == 0


def test_negative_quantity_rejected():
    with pytest.raises(ValueError):
        line_total(Decimal("1000"), -1)
