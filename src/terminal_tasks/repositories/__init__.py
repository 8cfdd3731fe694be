"""Repository interfaces."""

from terminal_tasks.repositories.repository import (
    NoteRepository,
    PomodoroRepository,
    SettingsRepository,
    TaskRepository,
)

__all__ = [
    "NoteRepository",
    "PomodoroRepository",
    "SettingsRepository",
    "TaskRepository",
]
