"""SQLite implementation of TaskRepository."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from terminal_tasks.adapters.sqlite.connection import reading, transaction
from terminal_tasks.adapters.sqlite.utils import parse_datetime, row_to_dict, to_iso
from terminal_tasks.exceptions import NotFoundError, StoreError
from terminal_tasks.models import Priority, Task, TaskStatus
from terminal_tasks.repositories import TaskRepository

_COLUMNS = (
    "id, title, description, priority, status, due_date, reminder_time, "
    "created_at, updated_at, completed_at, pomodoro_count"
)


def task_from_row(row: sqlite3.Row) -> Task:
    """Build a Task from a stored row.

    Raises:
        StoreError: If any column holds a value the model cannot accept
    """
    data: dict[str, Any] = row_to_dict(row)
    try:
        data["priority"] = Priority(data["priority"])
        data["status"] = TaskStatus(data["status"])
    except ValueError as e:
        raise StoreError(f"Malformed task #{data.get('id')}: {e}") from e

    for column in ("due_date", "reminder_time", "created_at", "updated_at", "completed_at"):
        data[column] = parse_datetime(data[column], column)

    try:
        return Task(**data)
    except PydanticValidationError as e:
        raise StoreError(f"Malformed task #{data.get('id')}: {e}") from e


def _task_params(task: Task) -> dict[str, Any]:
    return {
        "title": task.title,
        "description": task.description,
        "priority": task.priority.value,
        "status": task.status.value,
        "due_date": to_iso(task.due_date),
        "reminder_time": to_iso(task.reminder_time),
        "created_at": to_iso(task.created_at),
        "updated_at": to_iso(task.updated_at),
        "completed_at": to_iso(task.completed_at),
        "pomodoro_count": task.pomodoro_count,
    }


class SqliteTaskRepository(TaskRepository):
    """SQLite implementation of task repository."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection

    def create(self, task: Task) -> int:
        with transaction(self.connection) as conn:
            cursor = conn.execute(
                """
                INSERT INTO tasks (
                    title, description, priority, status, due_date, reminder_time,
                    created_at, updated_at, completed_at, pomodoro_count
                ) VALUES (
                    :title, :description, :priority, :status, :due_date, :reminder_time,
                    :created_at, :updated_at, :completed_at, :pomodoro_count
                )
                """,
                _task_params(task),
            )
        return int(cursor.lastrowid)

    def list_all(self) -> list[Task]:
        with reading(self.connection) as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM tasks "
                "ORDER BY status, priority DESC, due_date IS NULL, due_date, id"
            ).fetchall()
        return [task_from_row(row) for row in rows]

    def get(self, task_id: int) -> Task:
        with reading(self.connection) as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE id = ?", (task_id,)
            ).fetchone()
        if row is None:
            raise NotFoundError("Task", task_id)
        return task_from_row(row)

    def update(self, task: Task) -> None:
        if task.id is None:
            raise StoreError("Cannot update a task that was never saved")
        params = _task_params(task)
        params["id"] = task.id
        with transaction(self.connection) as conn:
            cursor = conn.execute(
                """
                UPDATE tasks SET
                    title = :title, description = :description,
                    priority = :priority, status = :status,
                    due_date = :due_date, reminder_time = :reminder_time,
                    updated_at = :updated_at, completed_at = :completed_at,
                    pomodoro_count = :pomodoro_count
                WHERE id = :id
                """,
                params,
            )
        if cursor.rowcount == 0:
            raise NotFoundError("Task", task.id)

    def delete(self, task_id: int) -> None:
        with transaction(self.connection) as conn:
            cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        if cursor.rowcount == 0:
            raise NotFoundError("Task", task_id)

    def increment_pomodoro_count(self, task_id: int, now: datetime) -> None:
        """Add one completed work interval to a task."""
        with transaction(self.connection) as conn:
            cursor = conn.execute(
                "UPDATE tasks SET pomodoro_count = pomodoro_count + 1, "
                "updated_at = MAX(updated_at, ?) WHERE id = ?",
                (to_iso(now), task_id),
            )
        if cursor.rowcount == 0:
            raise NotFoundError("Task", task_id)
