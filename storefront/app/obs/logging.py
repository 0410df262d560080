"""One-line JSON logging with request and tenant context.

Customer contact details end up in messages easily (checkout errors echo the
form), so email addresses and phone numbers are masked before a line is
written.
"""

import json
import logging
import re
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

from ..middlewares.request_id import request_id_ctx

# Set by the tenant dependency once a slug has been resolved
tenant_ctx: ContextVar[str | None] = ContextVar("tenant", default=None)

MASK = "***"
EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+", re.I)
# +62 812-3456-7890, 0812 3456 7890, 6281234567890
PHONE_RE = re.compile(r"\+?\b\d[\d\s-]{7,17}\d\b")
MIN_PHONE_DIGITS = 9
# Attributes passed through ``extra=`` that are copied into the JSON line
EXTRA_FIELDS = ("order_code", "item_id", "status")


def _mask_phone(match: re.Match[str]) -> str:
    digits = sum(ch.isdigit() for ch in match.group())
    return MASK if digits >= MIN_PHONE_DIGITS else match.group()


def mask_pii(text: str) -> str:
    text = EMAIL_RE.sub(MASK, text)
    return PHONE_RE.sub(_mask_phone, text)


class ContextFilter(logging.Filter):
    """Copy the current request id and tenant onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.req_id = request_id_ctx.get(None)
        if getattr(record, "tenant", None) is None:
            record.tenant = tenant_ctx.get(None)
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "req_id": getattr(record, "req_id", None),
            "tenant": getattr(record, "tenant", None),
            "msg": mask_pii(record.getMessage()),
        }
        for name in EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                data[name] = value
        if record.exc_info:
            data["exc"] = mask_pii(self.formatException(record.exc_info))
        return json.dumps(data, default=str)


def configure_logging(level: int | str = logging.INFO) -> None:
    """Send every logger through a single JSON stderr handler."""

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    handler.addFilter(ContextFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    # uvicorn installs its own handlers; let records propagate to ours
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers.clear()
