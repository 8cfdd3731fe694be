"""Tests for the poll/tick/redraw shell."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from terminal_tasks.models.focus import TimerState
from terminal_tasks.ui.controller import SessionController
from terminal_tasks.ui.shell import Shell


class FakeKeyboard:
    """Replays keys; advances the monotonic clock by *latency* per poll."""

    def __init__(self, keys=(), monotonic=None, latency=0.0):
        self.keys = list(keys)
        self.monotonic = monotonic
        self.latency = latency
        self.timeouts = []
        self.stopped = False

    def read_key(self, timeout: float = 0.05):
        self.timeouts.append(timeout)
        if self.monotonic is not None:
            self.monotonic.advance(self.latency)
        return self.keys.pop(0) if self.keys else None

    def stop(self):
        self.stopped = True


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=100, height=30)


@pytest.fixture
def controller(memory_store, clock, monotonic, local_tz, app_config):
    ctrl = SessionController(
        memory_store, config=app_config, clock=clock, monotonic=monotonic, tz=local_tz
    )
    ctrl.load()
    return ctrl


def make_shell(controller, monotonic, console, keys=(), latency=0.0):
    keyboard = FakeKeyboard(keys, monotonic, latency)
    return Shell(controller, keyboard=keyboard, console=console, monotonic=monotonic)


# ---------------------------------------------------------------------------
# Stepping
# ---------------------------------------------------------------------------


class TestStep:
    def test_poll_interval_comes_from_config(self, controller, monotonic, console):
        shell = make_shell(controller, monotonic, console)
        shell.step()
        assert shell.keyboard.timeouts == [0.05]

    def test_key_is_dispatched(self, controller, monotonic, console):
        shell = make_shell(controller, monotonic, console, keys=["2"])
        shell.step()
        assert controller.state.tab.name == "NOTES"

    def test_status_expires_during_step(self, controller, monotonic, console):
        shell = make_shell(controller, monotonic, console)
        controller.set_status("hi")
        monotonic.advance(10)
        shell.step()
        assert controller.state.status is None


class TestTicking:
    def test_one_tick_per_whole_second(self, controller, monotonic, console):
        shell = make_shell(controller, monotonic, console, latency=0.5)
        controller.state.timer.start_work()
        start = controller.state.timer.remaining_seconds

        for _ in range(4):  # 2.0 seconds of polling
            shell.step()

        assert controller.state.timer.remaining_seconds == start - 2

    def test_slow_poll_catches_up(self, controller, monotonic, console):
        shell = make_shell(controller, monotonic, console)
        controller.state.timer.start_work()
        start = controller.state.timer.remaining_seconds

        monotonic.advance(3.5)
        assert shell.advance_timer() == 3
        assert controller.state.timer.remaining_seconds == start - 3

        monotonic.advance(0.5)
        assert shell.advance_timer() == 1

    def test_no_ticks_while_idle(self, controller, monotonic, console):
        shell = make_shell(controller, monotonic, console)
        monotonic.advance(5)
        assert shell.advance_timer() == 0

    def test_paused_time_is_not_counted_later(self, controller, monotonic, console):
        shell = make_shell(controller, monotonic, console)
        timer = controller.state.timer
        timer.start_work()
        timer.pause()
        monotonic.advance(30)
        shell.advance_timer()
        timer.resume()
        monotonic.advance(1)
        assert shell.advance_timer() == 1
        assert timer.remaining_seconds == 25 * 60 - 1

    def test_ticks_stop_when_interval_finishes(self, controller, monotonic, console):
        shell = make_shell(controller, monotonic, console)
        controller.state.timer.set_durations(work_minutes=1, break_minutes=1)
        controller.state.timer.start_work()

        monotonic.advance(60)
        shell.advance_timer()
        assert controller.state.timer.state is TimerState.BREAK

        monotonic.advance(200)
        assert shell.advance_timer() == 60
        assert controller.state.timer.state is TimerState.IDLE


# ---------------------------------------------------------------------------
# Running
# ---------------------------------------------------------------------------


class TestRun:
    def test_runs_until_quit(self, controller, monotonic, console, mocker):
        live = mocker.patch("terminal_tasks.ui.shell.Live")
        shell = make_shell(controller, monotonic, console, keys=["j", "q"])

        shell.run()

        assert controller.state.should_quit
        live_instance = live.return_value.__enter__.return_value
        assert live_instance.update.call_count == 2

    def test_owns_and_stops_keyboard(self, controller, monotonic, console, mocker):
        mocker.patch("terminal_tasks.ui.shell.Live")
        handler_cls = mocker.patch("terminal_tasks.ui.shell.KeyboardHandler")
        handler_cls.return_value.read_key.side_effect = ["q"]

        shell = Shell(controller, console=console, monotonic=monotonic)
        shell.run()

        handler_cls.return_value.stop.assert_called_once()
        assert shell.keyboard is None

    def test_keyboard_interrupt_exits_cleanly(self, controller, monotonic, console, mocker):
        mocker.patch("terminal_tasks.ui.shell.Live")
        handler_cls = mocker.patch("terminal_tasks.ui.shell.KeyboardHandler")
        handler_cls.return_value.read_key.side_effect = KeyboardInterrupt

        Shell(controller, console=console, monotonic=monotonic).run()

        handler_cls.return_value.stop.assert_called_once()

    def test_render_produces_layout(self, controller, monotonic, console):
        shell = make_shell(controller, monotonic, console)
        console.print(shell.render())
        assert "Tasks" in console.file.getvalue()
