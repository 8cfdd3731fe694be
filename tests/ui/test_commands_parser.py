"""Tests for the colon command line parser."""

from __future__ import annotations

import pytest

from terminal_tasks.models import Priority
from terminal_tasks.ui.actions import (
    AdjustDuration,
    CyclePriority,
    DialogKind,
    DurationField,
    JumpToLine,
    MessageLevel,
    NewItem,
    NoOp,
    OpenDialog,
    Quit,
    SetDurations,
    SetPriority,
    ShowMessage,
    SortTasks,
    StartTimer,
    StopTimer,
    Tab,
)
from terminal_tasks.ui.commands import parse_command


def assert_error(action, fragment=""):
    assert isinstance(action, ShowMessage)
    assert action.level is MessageLevel.ERROR
    assert fragment in action.text


@pytest.mark.parametrize(
    "text, expected",
    [
        ("q", Quit()),
        ("wq", Quit()),
        ("quit", Quit()),
        ("new Buy milk", NewItem("Buy milk")),
        ("n", NewItem("")),
        ("d", OpenDialog(DialogKind.DELETE_CONFIRM)),
        ("delete", OpenDialog(DialogKind.DELETE_CONFIRM)),
        ("t", OpenDialog(DialogKind.SET_DEADLINE)),
        ("ddl", OpenDialog(DialogKind.SET_DEADLINE)),
        ("due", OpenDialog(DialogKind.SET_DEADLINE)),
        ("s", StartTimer()),
        ("start", StartTimer()),
        ("stop", StopTimer()),
        ("cancel", StopTimer()),
        ("help", OpenDialog(DialogKind.HELP)),
        ("sort", SortTasks()),
        ("work+", AdjustDuration(DurationField.WORK, 1)),
        ("break-", AdjustDuration(DurationField.BREAK, -1)),
        ("7", JumpToLine(7)),
        ("  7  ", JumpToLine(7)),
        ("QUIT", Quit()),
    ],
)
def test_commands(text, expected):
    assert parse_command(text) == expected


def test_empty_is_noop():
    assert parse_command("   ") == NoOp()


def test_edit_depends_on_tab():
    assert parse_command("e", Tab.TASKS) == OpenDialog(DialogKind.EDIT_TASK)
    assert parse_command("edit", Tab.NOTES) == OpenDialog(DialogKind.EDIT_NOTE)


def test_new_keeps_title_case():
    assert parse_command("new  Call Alice ") == NewItem("Call Alice")


class TestPriority:
    def test_without_argument_cycles(self):
        assert parse_command("p") == CyclePriority()

    @pytest.mark.parametrize(
        "arg, priority",
        [
            ("1", Priority.LOW),
            ("2", Priority.MEDIUM),
            ("3", Priority.HIGH),
            ("HIGH", Priority.HIGH),
        ],
    )
    def test_explicit(self, arg, priority):
        assert parse_command(f"priority {arg}") == SetPriority(priority)

    def test_invalid(self):
        assert_error(parse_command("p 4"), "Invalid priority")


class TestPomo:
    def test_both(self):
        assert parse_command("pomo work=50 break=10") == SetDurations(50, 10)

    def test_one(self):
        assert parse_command("pomo break=3") == SetDurations(break_minutes=3)

    def test_usage(self):
        assert_error(parse_command("pomo"), "Usage")

    @pytest.mark.parametrize(
        "args", ["work=0", "work=121", "break=61", "work=abc", "rest=5", "work"]
    )
    def test_rejects(self, args):
        assert_error(parse_command(f"pomo {args}"))

    def test_bounds_are_inclusive(self):
        assert parse_command("pomo work=120 break=60") == SetDurations(120, 60)
        assert parse_command("pomo work=1 break=1") == SetDurations(1, 1)


class TestErrors:
    def test_unknown(self):
        assert_error(parse_command("frobnicate"), "Unknown command: frobnicate")

    def test_line_zero(self):
        assert_error(parse_command("0"), "start at 1")

    def test_number_with_arguments(self):
        assert_error(parse_command("7 8"))

    def test_duration_command_with_argument(self):
        assert_error(parse_command("work+ 5"))
