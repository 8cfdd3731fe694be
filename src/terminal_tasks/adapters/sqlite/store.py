"""Single handle over the local SQLite store.

One connection is opened per process and shared by the repositories; each
repository call runs in its own transaction.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from terminal_tasks.adapters.sqlite.connection import connect
from terminal_tasks.adapters.sqlite.note_repository import SqliteNoteRepository
from terminal_tasks.adapters.sqlite.pomodoro_repository import SqlitePomodoroRepository
from terminal_tasks.adapters.sqlite.settings_repository import SqliteSettingsRepository
from terminal_tasks.adapters.sqlite.task_repository import SqliteTaskRepository


class SqliteStore:
    """Persistence collaborator for the UI, the CLI and the reminder daemon."""

    def __init__(self, db_path: str | Path | None = None):
        self.db_path = db_path
        self.connection: sqlite3.Connection = connect(db_path)
        self.tasks = SqliteTaskRepository(self.connection)
        self.notes = SqliteNoteRepository(self.connection)
        self.sessions = SqlitePomodoroRepository(self.connection)
        self.settings = SqliteSettingsRepository(self.connection)

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> SqliteStore:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
