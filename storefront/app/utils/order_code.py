"""Customer-facing order codes."""

from __future__ import annotations

import secrets
import string
from datetime import datetime

ALPHABET = string.digits + string.ascii_uppercase


def generate_order_code(prefix: str = "ORD", now: datetime | None = None) -> str:
    """Return a code like ``ORD-251017-7K2Q9X``.

    The date part is the local creation date; the suffix is six random
    base36 characters. Uniqueness per tenant is enforced by the database.
    """

    now = now or datetime.now()
    suffix = "".join(secrets.choice(ALPHABET) for _ in range(6))
    return f"{prefix}-{now:%y%m%d}-{suffix}"
