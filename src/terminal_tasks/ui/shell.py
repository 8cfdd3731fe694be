"""Application shell: the poll, tick and redraw loop."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Protocol

from rich.console import Console
from rich.live import Live

from terminal_tasks.models.focus.keyboard import KeyboardHandler
from terminal_tasks.ui.controller import SessionController
from terminal_tasks.ui.render import build_layout
from terminal_tasks.utils.logger import get_logger


class KeySource(Protocol):
    def read_key(self, timeout: float = 0.05) -> str | None: ...


class Shell:
    """Drives a :class:`SessionController` from the keyboard and the clock.

    Each :meth:`step` waits at most ``poll_interval`` seconds for one key,
    dispatches it, expires the status message and then advances the timer
    once for every whole second of monotonic time that has passed, however
    long the poll actually took.
    """

    def __init__(
        self,
        controller: SessionController,
        keyboard: KeySource | None = None,
        console: Console | None = None,
        poll_interval: float | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self.controller = controller
        self.keyboard = keyboard
        self.console = console or Console()
        if poll_interval is None:
            poll_interval = controller.config.ui.poll_interval_ms / 1000
        self.poll_interval = poll_interval
        self.monotonic = monotonic
        self._last_tick = monotonic()
        self.logger = get_logger()

    @property
    def state(self):
        return self.controller.state

    def step(self) -> None:
        """One loop iteration: input, status expiry, timer."""
        key = self.keyboard.read_key(timeout=self.poll_interval) if self.keyboard else None
        if key is not None:
            self.controller.handle_key(key)
        self.controller.expire_status()
        self.advance_timer()

    def advance_timer(self) -> int:
        """Tick once per whole elapsed second. Returns the number of ticks."""
        now = self.monotonic()
        elapsed = int(now - self._last_tick)
        if elapsed <= 0:
            return 0
        self._last_tick += elapsed

        ticks = 0
        for _ in range(elapsed):
            if not self.state.timer.is_running:
                break
            self.controller.on_second()
            ticks += 1
        return ticks

    def render(self):
        controller = self.controller
        height = max(self.console.size.height - 6, 5)
        return build_layout(self.state, controller.clock(), controller.tz, height)

    def run(self) -> None:
        """Run full-screen until a quit action or Ctrl+C."""
        self.logger.info("terminal UI started")
        owns_keyboard = self.keyboard is None
        if owns_keyboard:
            self.keyboard = KeyboardHandler()
        self._last_tick = self.monotonic()

        try:
            with Live(
                self.render(),
                console=self.console,
                auto_refresh=False,
                screen=True,
            ) as live:
                while not self.state.should_quit:
                    self.step()
                    live.update(self.render(), refresh=True)
        except KeyboardInterrupt:
            self.logger.info("interrupted")
        finally:
            if owns_keyboard:
                self.keyboard.stop()
                self.keyboard = None
            self.logger.info("terminal UI stopped")
