"""Pomodoro countdown state machine.

The timer holds no I/O. The application shell calls :meth:`PomodoroTimer.tick`
once per elapsed wall-clock second and owns every side effect of an interval
finishing (recording the session, starting the break, notifying).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from terminal_tasks.models.core import utc_now


class TimerState(Enum):
    """Pomodoro timer states."""

    IDLE = "idle"
    WORKING = "working"
    BREAK = "break"
    PAUSED = "paused"


_RUNNING = (TimerState.WORKING, TimerState.BREAK)


@dataclass
class PomodoroTimer:
    """Work/break countdown.

    ``paused_from`` remembers whether a pause interrupted a work or a break
    interval, so :meth:`resume` returns to the same interval.
    ``interval_seconds`` is the length the current interval was armed with;
    changing the durations mid-interval does not touch it.
    """

    work_minutes: int = 25
    break_minutes: int = 5
    state: TimerState = TimerState.IDLE
    remaining_seconds: int = 0
    interval_seconds: int = 0
    task_id: int | None = None
    session_id: int | None = None
    started_at: datetime | None = None
    paused_from: TimerState | None = None
    clock: Callable[[], datetime] = field(default=utc_now, repr=False, compare=False)

    @property
    def is_running(self) -> bool:
        """True while a work or break interval is counting down."""
        return self.state in _RUNNING

    @property
    def is_active(self) -> bool:
        """True unless the timer is idle (paused counts as active)."""
        return self.state is not TimerState.IDLE

    @property
    def interval(self) -> TimerState | None:
        """The interval in progress: WORKING or BREAK, also while paused."""
        if self.state is TimerState.PAUSED:
            return self.paused_from
        if self.is_running:
            return self.state
        return None

    def set_durations(
        self, work_minutes: int | None = None, break_minutes: int | None = None
    ) -> None:
        """Change durations. Takes effect the next time an interval is armed."""
        if work_minutes is not None:
            self.work_minutes = work_minutes
        if break_minutes is not None:
            self.break_minutes = break_minutes

    def start_work(self, task_id: int | None = None) -> None:
        self.state = TimerState.WORKING
        self.remaining_seconds = self.work_minutes * 60
        self.interval_seconds = self.remaining_seconds
        self.task_id = task_id
        self.started_at = self.clock()
        self.paused_from = None

    def start_break(self) -> None:
        self.state = TimerState.BREAK
        self.remaining_seconds = self.break_minutes * 60
        self.interval_seconds = self.remaining_seconds
        self.session_id = None
        self.started_at = self.clock()
        self.paused_from = None

    def pause(self) -> None:
        if self.state in _RUNNING:
            self.paused_from = self.state
            self.state = TimerState.PAUSED

    def resume(self) -> None:
        if self.state is TimerState.PAUSED:
            self.state = self.paused_from or TimerState.WORKING
            self.paused_from = None

    def stop(self) -> None:
        """Reset to idle, discarding the interval in progress."""
        self.state = TimerState.IDLE
        self.remaining_seconds = 0
        self.interval_seconds = 0
        self.task_id = None
        self.session_id = None
        self.started_at = None
        self.paused_from = None

    def tick(self) -> bool:
        """Advance one second.

        Returns True while time remains. Returns False on the tick that
        reaches zero, and also whenever the timer is not running; check
        :attr:`is_running` first to tell the two apart.
        """
        if self.state not in _RUNNING:
            return False
        if self.remaining_seconds > 0:
            self.remaining_seconds -= 1
        return self.remaining_seconds > 0

    def total_seconds(self) -> int:
        """Length of the interval in progress, 0 when idle."""
        if self.interval is None:
            return 0
        return self.interval_seconds

    def progress(self) -> float:
        """Percentage of the current interval elapsed, clamped to [0, 100]."""
        total = self.total_seconds()
        if total <= 0:
            return 0.0
        elapsed = (total - self.remaining_seconds) / total * 100.0
        return max(0.0, min(100.0, elapsed))

    def format_remaining(self) -> str:
        minutes, seconds = divmod(max(self.remaining_seconds, 0), 60)
        return f"{minutes:02d}:{seconds:02d}"
