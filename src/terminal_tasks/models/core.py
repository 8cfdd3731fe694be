"""Task, note and Pomodoro session data models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


class Priority(Enum):
    """Task priority. Stored as its integer value."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()

    def next(self) -> Priority:
        """Cycle Low -> Medium -> High -> Low."""
        order = [Priority.LOW, Priority.MEDIUM, Priority.HIGH]
        return order[(order.index(self) + 1) % len(order)]


class TaskStatus(Enum):
    """Task status. Stored as its integer value."""

    TODO = 0
    IN_PROGRESS = 1
    COMPLETED = 2

    @property
    def label(self) -> str:
        return {
            TaskStatus.TODO: "Todo",
            TaskStatus.IN_PROGRESS: "In progress",
            TaskStatus.COMPLETED: "Completed",
        }[self]


class Task(BaseModel):
    """Task model.

    Attributes:
        id: Store-assigned identifier, None until persisted
        title: Non-empty display text
        description: Optional longer text
        priority: Low, Medium or High
        status: Todo, In progress or Completed
        due_date: Optional deadline (UTC)
        reminder_time: Optional moment the reminder daemon should notify (UTC)
        created_at: Creation timestamp
        updated_at: Last update timestamp, never decreases
        completed_at: Set if and only if status is Completed
        pomodoro_count: Completed work intervals attributed to this task
    """

    id: int | None = None
    title: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    due_date: datetime | None = None
    reminder_time: datetime | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    completed_at: datetime | None = None
    pomodoro_count: int = Field(default=0, ge=0)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value

    @classmethod
    def new(
        cls,
        title: str,
        priority: Priority = Priority.MEDIUM,
        due_date: datetime | None = None,
        now: datetime | None = None,
    ) -> Task:
        """Build an unsaved Todo task."""
        now = now or utc_now()
        return cls(
            title=title,
            priority=priority,
            due_date=due_date,
            reminder_time=due_date,
            created_at=now,
            updated_at=now,
        )

    def touch(self, now: datetime | None = None) -> Task:
        """Return a copy with updated_at moved forward to *now*."""
        now = now or utc_now()
        return self.model_copy(update={"updated_at": max(now, self.updated_at)})

    def with_status(self, status: TaskStatus, now: datetime | None = None) -> Task:
        """Return a copy in *status*, keeping completed_at consistent."""
        now = now or utc_now()
        completed_at = None
        if status is TaskStatus.COMPLETED:
            completed_at = self.completed_at or now
        updated = self.model_copy(update={"status": status, "completed_at": completed_at})
        return updated.touch(now)

    def toggled(self, now: datetime | None = None) -> Task:
        """Todo/In progress become Completed, Completed goes back to Todo."""
        if self.status is TaskStatus.COMPLETED:
            return self.with_status(TaskStatus.TODO, now)
        return self.with_status(TaskStatus.COMPLETED, now)

    def is_overdue(self, now: datetime | None = None) -> bool:
        if self.due_date is None or self.status is TaskStatus.COMPLETED:
            return False
        return self.due_date < (now or utc_now())


class Note(BaseModel):
    """Free-form note, optionally associated with a task.

    The task association is weak: deleting the task clears ``task_id``.
    """

    id: int | None = None
    title: str
    content: str = ""
    task_id: int | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value

    @classmethod
    def new(
        cls,
        title: str,
        content: str = "",
        task_id: int | None = None,
        now: datetime | None = None,
    ) -> Note:
        now = now or utc_now()
        return cls(
            title=title,
            content=content,
            task_id=task_id,
            created_at=now,
            updated_at=now,
        )

    def matches(self, query: str) -> bool:
        """Case-insensitive search over title and content."""
        query = query.lower()
        return query in self.title.lower() or query in self.content.lower()


class PomodoroSession(BaseModel):
    """A recorded work interval."""

    id: int | None = None
    task_id: int | None = None
    start_time: datetime
    end_time: datetime | None = None
    duration_minutes: int = Field(ge=1)
    completed: bool = False


class PomodoroConfig(BaseModel):
    """Work and break durations, persisted in the store's settings record."""

    work_minutes: int = Field(default=25, ge=1, le=120)
    break_minutes: int = Field(default=5, ge=1, le=60)


class PomodoroStats(BaseModel):
    """Completed work intervals for the current local day."""

    completed_count: int = 0
    total_minutes: int = 0
