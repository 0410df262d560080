"""Tenant resolution."""

from .resolver import TenantIdentity, TenantResolver, sanitize_slug

__all__ = ["TenantIdentity", "TenantResolver", "sanitize_slug"]
