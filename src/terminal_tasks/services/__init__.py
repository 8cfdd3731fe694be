"""Notification and reminder services."""

from terminal_tasks.services.notification_service import NotificationService
from terminal_tasks.services.reminder_service import ReminderDaemon

__all__ = ["NotificationService", "ReminderDaemon"]
