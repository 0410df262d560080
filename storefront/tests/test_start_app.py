import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[2]))

import start_app  # noqa: E402
from start_app import main  # noqa: E402


def _fake_uvicorn(monkeypatch):
    calls: list[tuple] = []

    def fake_run(*args, **kwargs):
        calls.append((args, kwargs))

    monkeypatch.setattr(start_app, "uvicorn", type("U", (), {"run": staticmethod(fake_run)}))
    return calls


def test_launches_storefront_app(monkeypatch):
    calls = _fake_uvicorn(monkeypatch)
    main(["--port", "9000"])
    (args, kwargs), = calls
    assert args == ("storefront.app.main:app",)
    assert kwargs["port"] == 9000
    assert kwargs["log_level"] == "info"


def test_memory_db_flag_overrides_database_url(monkeypatch):
    _fake_uvicorn(monkeypatch)
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./other.db")
    main(["--memory-db"])
    assert start_app.config.get_settings().database_url == "sqlite+aiosqlite:///:memory:"


def test_missing_dependency_exits(monkeypatch, capsys):
    def fake_run(*args, **kwargs):
        raise ModuleNotFoundError("No module named 'aiosqlite'", name="aiosqlite")

    monkeypatch.setattr(start_app, "uvicorn", type("U", (), {"run": staticmethod(fake_run)}))
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 1
    assert "pip install aiosqlite" in capsys.readouterr().err
