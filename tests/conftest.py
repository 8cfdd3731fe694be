"""Shared test fixtures and configuration.

Keeps logs, config files and databases inside pytest's ``tmp_path`` so no
test touches the user's real data directories.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta, timezone

import pytest

from terminal_tasks.adapters.sqlite import SqliteStore
from terminal_tasks.config import AppConfig, ConfigManager


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path, monkeypatch):
    """Point the application log at tmp_path and reset the singleton."""
    import terminal_tasks.utils.logger as logger_mod

    monkeypatch.setattr(logger_mod, "user_log_dir", lambda *_a, **_k: str(tmp_path / "logs"))
    monkeypatch.setattr(logger_mod, "_logger", None)
    existing = logging.getLogger("terminal_tasks")
    for handler in list(existing.handlers):
        handler.close()
    existing.handlers.clear()
    yield
    for handler in list(existing.handlers):
        handler.close()
    existing.handlers.clear()


@pytest.fixture()
def config_manager(tmp_path):
    """A ConfigManager writing to tmp_path."""
    return ConfigManager(config_dir=tmp_path / "config")


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


@pytest.fixture()
def store(tmp_path):
    """A migrated SQLite store in a temporary file."""
    with SqliteStore(tmp_path / "tasks.db") as s:
        yield s


@pytest.fixture()
def memory_store():
    with SqliteStore(":memory:") as s:
        yield s


# ---------------------------------------------------------------------------
# Clocks
# ---------------------------------------------------------------------------


class FakeClock:
    """Settable wall clock returning aware UTC datetimes."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2030, 1, 10, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeMonotonic:
    """Settable monotonic clock in seconds."""

    def __init__(self, start: float = 1000.0):
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def monotonic():
    return FakeMonotonic()


@pytest.fixture()
def local_tz():
    """A fixed zone with a non-zero offset so local/UTC mix-ups show up."""
    return timezone(timedelta(hours=1), "UTC+01")


@pytest.fixture()
def app_config():
    return AppConfig()
