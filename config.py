# config.py

"""Application configuration utilities.

Values are primarily loaded from ``config.json`` and may be overridden by
environment variables. The :func:`get_settings` helper merges the two sources
and caches the result.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings merged from JSON and environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./storefront.db"
    redis_url: str | None = None
    tenant_cache_ttl_secs: int = 600
    menu_cache_ttl_secs: int = 300
    cart_storage_key: str = "storefront-cart"
    cart_scope_by_tenant: bool = True
    phone_country_code: str = "62"
    order_code_prefix: str = "ORD"
    currency: str = "IDR"
    sheets_webhook_url: str | None = None
    sheets_webhook_secret: str | None = None
    webhook_timeout_secs: float = 5.0
    log_level: str = "INFO"
    slug_min_length: int = 2
    slug_max_length: int = 64


# Cached singleton to avoid repeated file reads
@lru_cache
def get_settings() -> Settings:
    """Return merged settings with environment variable precedence.

    The configuration is read from ``config.json`` located alongside this file
    and fed into :class:`Settings`. Environment variables override any values
    from the JSON file. A missing JSON file is treated as empty.
    """

    config_path = Path(__file__).with_name("config.json")
    data = json.loads(config_path.read_text()) if config_path.exists() else {}
    env_override = {
        k.lower(): v
        for k, v in os.environ.items()
        if k.lower() in Settings.model_fields
    }
    merged = {**data, **env_override}
    # Environment variables override values from the JSON file.
    return Settings(**merged)
