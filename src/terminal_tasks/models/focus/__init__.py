"""Pomodoro timer and terminal keyboard input."""

from terminal_tasks.models.focus.timer import PomodoroTimer, TimerState

__all__ = ["PomodoroTimer", "TimerState"]
