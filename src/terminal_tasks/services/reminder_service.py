"""Reminder daemon: polls the store and notifies about due reminders."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime, timedelta

import tzlocal

from terminal_tasks.exceptions import TasksError
from terminal_tasks.models import Task, TaskStatus, utc_now
from terminal_tasks.repositories import TaskRepository
from terminal_tasks.services.notification_service import NotificationService
from terminal_tasks.utils.logger import get_logger


class ReminderDaemon:
    """Fixed-interval reminder poll.

    A task is announced when its reminder time falls inside the window that
    ended at the current poll, ``(now - interval, now]``, so each reminder
    fires once as long as polls keep to the interval.
    """

    def __init__(
        self,
        tasks: TaskRepository,
        notifier: NotificationService,
        interval_seconds: int = 60,
        clock: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.tasks = tasks
        self.notifier = notifier
        self.interval = timedelta(seconds=interval_seconds)
        self.clock = clock
        self.sleep = sleep
        self.logger = get_logger()

    def due_reminders(self, now: datetime) -> list[Task]:
        """Open tasks whose reminder time is in the current poll window."""
        window_start = now - self.interval
        return [
            task
            for task in self.tasks.list_all()
            if task.status is not TaskStatus.COMPLETED
            and task.reminder_time is not None
            and window_start < task.reminder_time <= now
        ]

    def check_reminders(self, now: datetime | None = None) -> int:
        """Notify for every due reminder and return how many were sent."""
        now = now or self.clock()
        sent = 0
        for task in self.due_reminders(now):
            if self.notifier.send_task_reminder(task.title, self._reminder_body(task)):
                sent += 1
            self.logger.info("reminder for task #%s %r", task.id, task.title)
        return sent

    def run(self, max_polls: int | None = None) -> None:
        """Poll until interrupted (or *max_polls* polls have run)."""
        self.logger.info(
            "reminder daemon started, polling every %ss", int(self.interval.total_seconds())
        )
        polls = 0
        while max_polls is None or polls < max_polls:
            try:
                self.check_reminders()
            except TasksError as e:
                self.logger.error("error checking reminders: %s", e)
            polls += 1
            if max_polls is None or polls < max_polls:
                self.sleep(self.interval.total_seconds())

    @staticmethod
    def _reminder_body(task: Task) -> str:
        if task.due_date is None:
            return "Due: none"
        local = task.due_date.astimezone(tzlocal.get_localzone())
        return f"Due: {local:%Y-%m-%d %H:%M}"
