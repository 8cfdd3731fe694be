"""Task ordering that keeps the user's selection on the same task."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Protocol, TypeVar

from terminal_tasks.models import Priority, Task, TaskStatus

STATUS_RANK = {
    TaskStatus.IN_PROGRESS: 0,
    TaskStatus.TODO: 1,
    TaskStatus.COMPLETED: 2,
}

PRIORITY_RANK = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}

_NO_DUE_DATE = datetime.max.replace(tzinfo=UTC)


class _HasId(Protocol):
    id: int | None


ItemT = TypeVar("ItemT", bound=_HasId)


def sort_key(task: Task) -> tuple[int, int, int, datetime]:
    """Status, then priority (High first), then due date (undated last)."""
    has_due = task.due_date is not None
    return (
        STATUS_RANK[task.status],
        PRIORITY_RANK[task.priority],
        0 if has_due else 1,
        task.due_date if has_due else _NO_DUE_DATE,
    )


def restore_selection(items: Sequence[ItemT], selected_id: int | None) -> int | None:
    """Index of the item with *selected_id*.

    Falls back to 0 when the item is gone and the list is not empty, and to
    None for an empty list.
    """
    if not items:
        return None
    if selected_id is not None:
        for index, item in enumerate(items):
            if item.id == selected_id:
                return index
    return 0


def sort_tasks(
    tasks: Sequence[Task], selected_id: int | None = None
) -> tuple[list[Task], int | None]:
    """Sort tasks for display and find the new index of the selected task.

    The sort is stable, so tasks with equal keys keep their relative order
    and sorting an already sorted list changes nothing.
    """
    ordered = sorted(tasks, key=sort_key)
    return ordered, restore_selection(ordered, selected_id)
