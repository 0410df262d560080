"""JSON envelopes shared by every route.

Success bodies are ``{"ok": true, "data": ...}``. Errors carry the request id
so a customer report can be matched to the server log line.
"""

from typing import Any, Dict

from ..domain.errors import StorefrontError
from ..middlewares.request_id import request_id_ctx


def ok(data: Any) -> Dict[str, Any]:
    return {"ok": True, "data": data}


def err(
    code: int | str,
    message: str,
    details: Dict[str, Any] | None = None,
    hint: str | None = None,
) -> Dict[str, Any]:
    """Return an error envelope; empty ``details`` and ``hint`` are omitted."""
    error: Dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details
    if hint:
        error["hint"] = hint
    return {"ok": False, "request_id": request_id_ctx.get(None), "error": error}


def err_from(exc: StorefrontError) -> Dict[str, Any]:
    return err(exc.code, exc.message, exc.details, exc.hint)
