"""Terminal task manager with notes and a Pomodoro timer."""

__version__ = "0.3.0"
