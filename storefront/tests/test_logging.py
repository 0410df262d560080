import json
import logging

import pytest

from storefront.app.middlewares.request_id import request_id_ctx
from storefront.app.obs.logging import ContextFilter, JsonFormatter, mask_pii, tenant_ctx


def _format(msg: str, *args, **extra) -> dict:
    record = logging.LogRecord("storefront", logging.INFO, __file__, 1, msg, args, None)
    record.__dict__.update(extra)
    ContextFilter().filter(record)
    return json.loads(JsonFormatter().format(record))


def test_json_log_carries_request_and_tenant():
    rid = request_id_ctx.set("req-1")
    tid = tenant_ctx.set("kopi-pendekar")
    try:
        data = _format("order %s created", "ORD-251017-ABC123")
    finally:
        request_id_ctx.reset(rid)
        tenant_ctx.reset(tid)
    assert data["req_id"] == "req-1"
    assert data["tenant"] == "kopi-pendekar"
    assert data["level"] == "INFO"
    assert data["msg"] == "order ORD-251017-ABC123 created"


def test_extra_fields_are_copied():
    data = _format("order created", order_code="ORD-251017-ABC123")
    assert data["order_code"] == "ORD-251017-ABC123"
    assert "item_id" not in data


def test_pii_is_redacted():
    data = _format("customer budi@example.com phone +6281234567890")
    assert "budi@example.com" not in data["msg"]
    assert "6281234567890" not in data["msg"]
    assert data["msg"].count("***") == 2


@pytest.mark.parametrize("phone", ["0812-3456-7890", "+62 812 3456 7890"])
def test_formatted_phone_numbers_are_masked(phone):
    assert mask_pii(f"call {phone} now") == "call *** now"


def test_short_numbers_are_kept():
    assert mask_pii("qty 12 total 40000") == "qty 12 total 40000"


def test_dates_are_not_mistaken_for_phones():
    assert mask_pii("pickup 2026-10-18") == "pickup 2026-10-18"
