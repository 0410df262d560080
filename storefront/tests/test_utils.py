import re
import time
from datetime import datetime
from decimal import Decimal

import pytest

from storefront.app.domain import OrderStatus, can_transition
from storefront.app.utils.currency import format_currency
from storefront.app.utils.order_code import generate_order_code
from storefront.app.utils.phone import format_phone, normalize_phone
from storefront.app.utils.webhook_signing import sign, signature_headers, verify


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("081234567890", "+6281234567890"),
        ("0812-3456-7890", "+6281234567890"),
        ("+62 812 3456 7890", "+6281234567890"),
        ("6281234567890", "+6281234567890"),
        ("81234567890", "+6281234567890"),
        ("0062 812 3456 7890", "+6281234567890"),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


@pytest.mark.parametrize("raw", ["", "12", "0" * 20, "abc"])
def test_normalize_phone_rejects_garbage(raw):
    with pytest.raises(ValueError):
        normalize_phone(raw)


def test_normalize_phone_other_country():
    assert normalize_phone("012 345 6789", "60") == "+60123456789"


def test_format_phone():
    assert format_phone("081234567890") == "+62 812-3456-7890"


def test_format_currency():
    assert format_currency(Decimal("40000")) == "Rp 40.000"
    assert format_currency(1234567, "IDR") == "Rp 1.234.567"
    assert format_currency(Decimal("0")) == "Rp 0"
    assert format_currency(-5000, "USD") == "-$ 5.000"
    assert format_currency(100, "XYZ") == "XYZ 100"


def test_order_code_format_and_spread():
    code = generate_order_code("ORD", datetime(2025, 10, 17, 9, 30))
    assert re.fullmatch(r"ORD-251017-[0-9A-Z]{6}", code)
    codes = {generate_order_code() for _ in range(200)}
    assert len(codes) > 190


def test_order_status_transitions():
    assert can_transition(OrderStatus.PENDING_PAYMENT, OrderStatus.PAID)
    assert can_transition(OrderStatus.PAID, OrderStatus.CANCELLED)
    assert not can_transition(OrderStatus.CANCELLED, OrderStatus.PAID)
    assert not can_transition(OrderStatus.PAID, OrderStatus.PENDING_PAYMENT)


def test_webhook_signature_round_trip():
    ts = int(time.time())
    body = b'{"order_code":"ORD-1"}'
    sig = sign("secret", ts, body)
    assert verify("secret", ts, body, sig)
    assert not verify("secret", ts, body + b" ", sig)
    assert not verify("secret", ts - 1000, body, sign("secret", ts - 1000, body))


def test_signature_headers_carry_timestamp():
    headers = signature_headers("secret", b"{}", now=1700000000.7)
    assert headers["X-Timestamp"] == "1700000000"
    assert headers["X-Signature"] == sign("secret", 1700000000, b"{}")
