"""Desktop notifications through ``notify-send``."""

from __future__ import annotations

import shutil
import subprocess

from terminal_tasks.utils.logger import get_logger

NOTIFY_SEND = "notify-send"
TIMEOUT_SECONDS = 5


class NotificationService:
    """Fire-and-forget desktop notifications.

    Sending never raises: a missing ``notify-send`` binary, a non-zero exit
    or a hung process are logged and otherwise ignored.
    """

    def __init__(self, enabled: bool = True, app_name: str = "terminal-tasks"):
        self.enabled = enabled
        self.app_name = app_name
        self.logger = get_logger()

    def send(
        self,
        summary: str,
        body: str = "",
        icon: str | None = None,
        expire_ms: int = 5000,
    ) -> bool:
        """Post a notification. Returns True if it was handed to the desktop."""
        if not self.enabled:
            return False

        binary = shutil.which(NOTIFY_SEND)
        if binary is None:
            self.logger.warning("%s not found, dropping notification %r", NOTIFY_SEND, summary)
            return False

        cmd = [binary, "--app-name", self.app_name, "--expire-time", str(expire_ms)]
        if icon:
            cmd += ["--icon", icon]
        cmd += [summary, body]

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=TIMEOUT_SECONDS,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            self.logger.warning("notification %r failed: %s", summary, e)
            return False

        if result.returncode != 0:
            self.logger.warning(
                "notification %r failed with exit code %d: %s",
                summary,
                result.returncode,
                result.stderr.strip(),
            )
            return False
        return True

    def send_task_reminder(self, title: str, body: str) -> bool:
        return self.send(f"📅 {title}", body, icon="calendar")

    def send_pomodoro_complete(self, is_break: bool) -> bool:
        if is_break:
            return self.send(
                "🍅 Break is over", "Ready for the next Pomodoro?", icon="emblem-default"
            )
        return self.send("🍅 Pomodoro complete", "Well done! Take a break.", icon="emblem-default")
