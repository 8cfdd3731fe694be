"""SQLite key-value settings record."""

from __future__ import annotations

import sqlite3

from terminal_tasks.adapters.sqlite.connection import reading, transaction
from terminal_tasks.adapters.sqlite.utils import now_iso
from terminal_tasks.exceptions import StoreError
from terminal_tasks.models import PomodoroConfig
from terminal_tasks.repositories import SettingsRepository

WORK_MINUTES_KEY = "pomodoro.work_minutes"
BREAK_MINUTES_KEY = "pomodoro.break_minutes"


class SqliteSettingsRepository(SettingsRepository):
    """Stores settings as text values in the ``settings`` table."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection

    def get(self, key: str) -> str | None:
        with reading(self.connection) as conn:
            row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def set_many(self, values: dict[str, str]) -> None:
        """Write several keys in one transaction."""
        stamp = now_iso()
        with transaction(self.connection) as conn:
            conn.executemany(
                "INSERT INTO settings (key, value, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                "updated_at = excluded.updated_at",
                [(key, value, stamp) for key, value in values.items()],
            )

    def get_pomodoro_config(self) -> PomodoroConfig:
        defaults = PomodoroConfig()
        work = self.get(WORK_MINUTES_KEY)
        brk = self.get(BREAK_MINUTES_KEY)
        try:
            return PomodoroConfig(
                work_minutes=int(work) if work is not None else defaults.work_minutes,
                break_minutes=int(brk) if brk is not None else defaults.break_minutes,
            )
        except ValueError as e:
            # pydantic's ValidationError is a ValueError too
            raise StoreError(f"Malformed Pomodoro settings: {e}") from e

    def save_pomodoro_config(self, config: PomodoroConfig) -> None:
        self.set_many(
            {
                WORK_MINUTES_KEY: str(config.work_minutes),
                BREAK_MINUTES_KEY: str(config.break_minutes),
            }
        )
