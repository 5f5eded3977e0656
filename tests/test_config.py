# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from tasksync.config import Settings

_ALL_KEYS = (
    "APP_NAME",
    "LOG_LEVEL",
    "DATA_DIR",
    "DB_PATH",
    "SERVER_URL",
    "SYNC_ENABLED",
    "SYNC_INTERVAL_SECONDS",
    "CONSOLE_ENABLED",
    "SERVER_HOST",
    "SERVER_PORT",
    "SERVER_DB_PATH",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ALL_KEYS:
        monkeypatch.delenv(f"TASKSYNC_{key}", raising=False)


def test_defaults() -> None:
    s = Settings.from_env()

    assert s.app_name == "tasksync"
    assert s.server_url == "http://127.0.0.1:5000"
    assert s.db_path == Path(".local/tasksync") / "tasksync.sqlite3"
    assert s.sync_enabled is True
    assert s.sync_interval_seconds == 60.0
    assert s.server_port == 5000
    assert s.server_db_path is None


def test_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKSYNC_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKSYNC_SERVER_URL", " http://sync.example:8080 ")
    monkeypatch.setenv("TASKSYNC_SYNC_ENABLED", "off")
    monkeypatch.setenv("TASKSYNC_SYNC_INTERVAL_SECONDS", "15")
    monkeypatch.setenv("TASKSYNC_SERVER_PORT", "8080")
    monkeypatch.setenv("TASKSYNC_SERVER_DB_PATH", str(tmp_path / "remote.sqlite3"))

    s = Settings.from_env()

    assert s.db_path == tmp_path / "tasksync.sqlite3"
    assert s.server_url == "http://sync.example:8080"
    assert s.sync_enabled is False
    assert s.sync_interval_seconds == 15.0
    assert s.server_port == 8080
    assert s.server_db_path == tmp_path / "remote.sqlite3"


@pytest.mark.parametrize(("raw", "expected"), [("0.1", 1.0), ("abc", 60.0), ("", 60.0)])
def test_interval_is_clamped_and_tolerates_garbage(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: float
) -> None:
    monkeypatch.setenv("TASKSYNC_SYNC_INTERVAL_SECONDS", raw)
    assert Settings.from_env().sync_interval_seconds == expected


def test_settings_are_frozen() -> None:
    s = Settings.from_env()
    with pytest.raises(AttributeError):
        s.server_port = 1  # type: ignore[misc]
