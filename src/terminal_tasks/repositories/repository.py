"""Repository abstraction layer.

Abstract base classes (ports) for the persistence collaborator. The terminal
UI and the reminder daemon depend only on these interfaces; the SQLite
adapter implements them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from terminal_tasks.models import (
    Note,
    PomodoroConfig,
    PomodoroSession,
    PomodoroStats,
    Task,
)


class TaskRepository(ABC):
    """Abstract base class for task persistence operations."""

    @abstractmethod
    def create(self, task: Task) -> int:
        """Insert *task* and return the store-assigned id."""

    @abstractmethod
    def list_all(self) -> list[Task]:
        """Return every task."""

    @abstractmethod
    def get(self, task_id: int) -> Task:
        """Return one task.

        Raises:
            NotFoundError: If no task has this id
        """

    @abstractmethod
    def update(self, task: Task) -> None:
        """Overwrite the stored task with the same id.

        Raises:
            NotFoundError: If the task no longer exists
        """

    @abstractmethod
    def delete(self, task_id: int) -> None:
        """Delete a task. Notes and sessions keep existing with no task.

        Raises:
            NotFoundError: If the task no longer exists
        """

    @abstractmethod
    def increment_pomodoro_count(self, task_id: int, now: datetime) -> None:
        """Record one more completed work interval for a task.

        Raises:
            NotFoundError: If the task no longer exists
        """


class NoteRepository(ABC):
    """Abstract base class for note persistence operations."""

    @abstractmethod
    def create(self, note: Note) -> int:
        """Insert *note* and return the store-assigned id."""

    @abstractmethod
    def list_all(self) -> list[Note]:
        """Return every note, most recently updated first."""

    @abstractmethod
    def get(self, note_id: int) -> Note:
        """Return one note."""

    @abstractmethod
    def update(self, note: Note) -> None:
        """Overwrite the stored note with the same id."""

    @abstractmethod
    def delete(self, note_id: int) -> None:
        """Delete a note."""

    @abstractmethod
    def list_for_task(self, task_id: int) -> list[Note]:
        """Return the notes associated with a task."""

    @abstractmethod
    def search(self, query: str) -> list[Note]:
        """Return notes whose title or content contains *query*."""


class PomodoroRepository(ABC):
    """Abstract base class for Pomodoro session records."""

    @abstractmethod
    def create(self, session: PomodoroSession) -> int:
        """Insert a session and return its id."""

    @abstractmethod
    def complete(self, session_id: int, end_time: datetime) -> None:
        """Mark a session completed at *end_time*."""

    @abstractmethod
    def list_for_task(self, task_id: int) -> list[PomodoroSession]:
        """Return a task's sessions, newest first."""

    @abstractmethod
    def today_stats(self, now: datetime | None = None) -> PomodoroStats:
        """Completed sessions and minutes since local midnight."""


class SettingsRepository(ABC):
    """Abstract base class for the key-value configuration record."""

    @abstractmethod
    def get_pomodoro_config(self) -> PomodoroConfig:
        """Return stored durations, or defaults when none are stored."""

    @abstractmethod
    def save_pomodoro_config(self, config: PomodoroConfig) -> None:
        """Persist work and break durations."""
