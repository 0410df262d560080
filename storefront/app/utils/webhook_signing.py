"""HMAC signatures for outbound order webhooks.

The receiver recomputes ``sha256=<hex>`` over ``"<timestamp>.<body>"`` with
the shared secret and rejects stale timestamps.
"""

from __future__ import annotations

import hashlib
import hmac
import time

MAX_SKEW_SECS = 300


def sign(secret: str, timestamp: int, body: bytes) -> str:
    """Return the ``X-Signature`` value for ``body`` sent at ``timestamp``."""
    msg = str(timestamp).encode() + b"." + body
    return "sha256=" + hmac.new(secret.encode(), msg, hashlib.sha256).hexdigest()


def signature_headers(secret: str, body: bytes, now: float | None = None) -> dict[str, str]:
    """Return the timestamp and signature headers for ``body``."""
    ts = int(now if now is not None else time.time())
    return {"X-Timestamp": str(ts), "X-Signature": sign(secret, ts, body)}


def verify(
    secret: str,
    ts: int,
    body: bytes,
    header_sig: str,
    max_skew: int = MAX_SKEW_SECS,
) -> bool:
    """Return ``True`` if ``header_sig`` matches and ``ts`` is fresh."""
    if abs(time.time() - ts) > max_skew:
        return False
    return hmac.compare_digest(sign(secret, ts, body), header_sig)
