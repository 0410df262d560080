import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Read by the log filter and the error envelope
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

_SAFE_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def incoming_request_id(value: str | None) -> str:
    """Return ``value`` if it is a usable request id, else a fresh uuid4."""
    if value and _SAFE_ID.match(value):
        return value
    return uuid.uuid4().hex


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and echo it in ``X-Request-ID``."""

    async def dispatch(self, request: Request, call_next):
        req_id = incoming_request_id(request.headers.get("X-Request-ID"))
        request.state.request_id = req_id
        token = request_id_ctx.set(req_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers["X-Request-ID"] = req_id
        return response
