# test_config.py
import json
import pathlib
import sys
from pathlib import Path

sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

import config  # noqa: E402
from config import get_settings  # noqa: E402

CONFIG_JSON = Path(config.__file__).with_name("config.json")


def _settings():
    get_settings.cache_clear()
    return get_settings()


def test_defaults_from_config(monkeypatch):
    monkeypatch.delenv("TENANT_CACHE_TTL_SECS", raising=False)
    settings = _settings()
    data = json.loads(CONFIG_JSON.read_text())
    assert settings.tenant_cache_ttl_secs == data["tenant_cache_ttl_secs"] == 600
    assert settings.menu_cache_ttl_secs == 300
    assert settings.cart_storage_key == "storefront-cart"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ORDER_CODE_PREFIX", "KP")
    monkeypatch.setenv("TENANT_CACHE_TTL_SECS", "60")
    settings = _settings()
    assert settings.order_code_prefix == "KP"
    assert settings.tenant_cache_ttl_secs == 60
    monkeypatch.delenv("ORDER_CODE_PREFIX")
    monkeypatch.delenv("TENANT_CACHE_TTL_SECS")
    get_settings.cache_clear()


def test_missing_key_uses_default(monkeypatch):
    original = CONFIG_JSON.read_text()
    monkeypatch.setattr(
        Path,
        "read_text",
        lambda self: json.dumps(
            {k: v for k, v in json.loads(original).items() if k != "phone_country_code"}
        ),
    )
    settings = _settings()
    assert settings.phone_country_code == "62"
    monkeypatch.undo()
    get_settings.cache_clear()
