from .request_id import RequestIdMiddleware, incoming_request_id, request_id_ctx

__all__ = ["RequestIdMiddleware", "incoming_request_id", "request_id_ctx"]
