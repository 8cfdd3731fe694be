"""Exception types shared by the store, the controller and the CLI."""

from __future__ import annotations


class TasksError(Exception):
    """Base class for all application errors."""


class StoreError(TasksError):
    """Raised when the persistent store cannot be opened, read or written."""


class ValidationError(TasksError):
    """Raised when user input is rejected before reaching the store."""


class NotFoundError(TasksError):
    """Raised when a task, note or session no longer exists."""

    def __init__(self, kind: str, item_id: int | None):
        super().__init__(f"{kind} #{item_id} not found")
        self.kind = kind
        self.item_id = item_id
