import logging

from sqlalchemy import create_engine, text

from storefront.app.middlewares import incoming_request_id
from storefront.app.obs import add_query_logger


def test_slow_queries_are_logged_without_parameters(caplog):
    engine = create_engine("sqlite://")
    add_query_logger(engine, "unit", slow_ms=-1)
    with caplog.at_level(logging.WARNING, logger="obs"):
        with engine.connect() as conn:
            conn.execute(text("SELECT :phone"), {"phone": "+6281234567890"})
    assert "slow query" in caplog.text
    assert "db=unit" in caplog.text
    assert "6281234567890" not in caplog.text


def test_fast_queries_are_quiet(caplog):
    engine = create_engine("sqlite://")
    add_query_logger(engine, "unit", slow_ms=10_000, sample_rate=0)
    with caplog.at_level(logging.DEBUG, logger="obs"):
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    assert caplog.records == []


def test_incoming_request_id_is_sanitized():
    assert incoming_request_id("req-42") == "req-42"
    generated = incoming_request_id("bad id\nwith newline")
    assert len(generated) == 32
    assert incoming_request_id(None) != incoming_request_id(None)
