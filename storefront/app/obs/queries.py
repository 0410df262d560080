"""Per-engine SQL timing logs.

Statements slower than the threshold are logged as warnings; a small sample
of the rest is logged at debug level. Bound parameters can carry customer
data, so only a short digest of them is written.
"""

from __future__ import annotations

import hashlib
import logging
import os
import random
import time

from sqlalchemy import event
from sqlalchemy.engine import Engine

SLOW_QUERY_MS = int(os.getenv("DB_SLOW_QUERY_MS", "200"))
SAMPLE_RATE = 0.01
MAX_SQL_CHARS = 200

logger = logging.getLogger("obs")


def _shorten(statement: str) -> str:
    sql = " ".join(statement.split())
    if len(sql) > MAX_SQL_CHARS:
        return sql[: MAX_SQL_CHARS - 3] + "..."
    return sql


def _digest(parameters) -> str:
    return hashlib.sha256(repr(parameters).encode()).hexdigest()[:8]


def add_query_logger(
    engine: Engine,
    label: str,
    *,
    slow_ms: int | None = None,
    sample_rate: float = SAMPLE_RATE,
) -> None:
    """Time every statement on ``engine`` and log it under ``db=<label>``."""
    target = getattr(engine, "sync_engine", engine)
    threshold = SLOW_QUERY_MS if slow_ms is None else slow_ms

    @event.listens_for(target, "before_cursor_execute")
    def _start(conn, cursor, statement, parameters, context, executemany):  # type: ignore[no-untyped-def]
        context._storefront_started = time.perf_counter()

    @event.listens_for(target, "after_cursor_execute")
    def _finish(conn, cursor, statement, parameters, context, executemany):  # type: ignore[no-untyped-def]
        started = getattr(context, "_storefront_started", None)
        if started is None:
            return
        elapsed = int((time.perf_counter() - started) * 1000)
        if elapsed > threshold:
            log = logger.warning
            kind = "slow query"
        elif random.random() < sample_rate:
            log = logger.debug
            kind = "query"
        else:
            return
        log(
            "%s %dms db=%s sql=%s params=%s",
            kind,
            elapsed,
            label,
            _shorten(statement),
            _digest(parameters),
        )
