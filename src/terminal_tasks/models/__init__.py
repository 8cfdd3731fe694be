"""Data models for terminal-tasks."""

from terminal_tasks.models.core import (
    Note,
    PomodoroConfig,
    PomodoroSession,
    PomodoroStats,
    Priority,
    Task,
    TaskStatus,
    utc_now,
)

__all__ = [
    "Note",
    "PomodoroConfig",
    "PomodoroSession",
    "PomodoroStats",
    "Priority",
    "Task",
    "TaskStatus",
    "utc_now",
]
