"""SQLite adapter module - local database storage implementation."""

from terminal_tasks.adapters.sqlite.connection import connect, default_db_path
from terminal_tasks.adapters.sqlite.note_repository import SqliteNoteRepository
from terminal_tasks.adapters.sqlite.pomodoro_repository import SqlitePomodoroRepository
from terminal_tasks.adapters.sqlite.settings_repository import SqliteSettingsRepository
from terminal_tasks.adapters.sqlite.store import SqliteStore
from terminal_tasks.adapters.sqlite.task_repository import SqliteTaskRepository

__all__ = [
    "SqliteNoteRepository",
    "SqlitePomodoroRepository",
    "SqliteSettingsRepository",
    "SqliteStore",
    "SqliteTaskRepository",
    "connect",
    "default_db_path",
]
