"""Display formatting for whole-unit currency amounts."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

SYMBOLS = {"IDR": "Rp", "MYR": "RM", "SGD": "S$", "USD": "$"}


def format_currency(amount: Decimal | int, currency: str = "IDR") -> str:
    """Return ``amount`` as e.g. ``Rp 40.000``.

    Amounts are rounded to whole units and grouped with dots.
    """

    value = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    grouped = f"{abs(int(value)):,}".replace(",", ".")
    symbol = SYMBOLS.get(currency, currency)
    return f"{sign}{symbol} {grouped}"
