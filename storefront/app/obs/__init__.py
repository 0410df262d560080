"""Observability helpers."""

from .logging import configure_logging, tenant_ctx
from .queries import add_query_logger

__all__ = ["add_query_logger", "configure_logging", "tenant_ctx"]
