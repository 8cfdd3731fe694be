"""Tests for the key interpreter."""

from __future__ import annotations

import pytest

from terminal_tasks.ui.actions import (
    AdjustDuration,
    BeginEdit,
    CancelCommand,
    CancelDialog,
    ClearDeadline,
    CommitDialog,
    CyclePriority,
    DeleteChar,
    DialogKind,
    DurationField,
    EnterCommandMode,
    InputMode,
    InsertChar,
    JumpTo,
    JumpToLine,
    MoveCursor,
    Navigate,
    NoOp,
    OpenDialog,
    PickerDigit,
    PickerField,
    PickerStep,
    Position,
    Quit,
    Scroll,
    ScrollTo,
    SelectField,
    StartTimer,
    StopTimer,
    SubmitCommand,
    SwitchTab,
    Tab,
    ToggleStatus,
    ToggleTimer,
)
from terminal_tasks.ui.keymap import (
    IDLE,
    AccumulatingPrefix,
    AwaitingChord,
    KeyContext,
    interpret,
)

TASKS = KeyContext(tab=Tab.TASKS)
NOTES = KeyContext(tab=Tab.NOTES)
POMODORO = KeyContext(tab=Tab.POMODORO)


def feed(context, keys):
    """Run a key sequence and collect the actions it produced."""
    pending = IDLE
    actions = []
    for key in keys:
        action, pending = interpret(context, pending, key)
        actions.append(action)
    return actions, pending


# ---------------------------------------------------------------------------
# Chords and counts
# ---------------------------------------------------------------------------


class TestChords:
    def test_gg_jumps_to_first(self):
        actions, pending = feed(TASKS, ["g", "g"])
        assert actions == [NoOp(), JumpTo(Position.FIRST)]
        assert pending == IDLE

    def test_dd_asks_to_delete(self):
        actions, _ = feed(TASKS, ["d", "d"])
        assert actions[-1] == OpenDialog(DialogKind.DELETE_CONFIRM)

    def test_dd_on_notes_tab(self):
        actions, _ = feed(NOTES, ["d", "d"])
        assert actions[-1] == OpenDialog(DialogKind.DELETE_CONFIRM)

    def test_d_is_ignored_on_pomodoro_tab(self):
        actions, pending = feed(POMODORO, ["d", "d"])
        assert actions == [NoOp(), NoOp()]
        assert pending == IDLE

    def test_leader_waits(self):
        _, pending = feed(TASKS, ["g"])
        assert pending == AwaitingChord("g")

    def test_other_key_drops_leader_and_is_read_alone(self):
        actions, pending = feed(TASKS, ["g", "j"])
        assert actions[-1] == Navigate(1)
        assert pending == IDLE

    def test_mixed_leaders_do_not_chord(self):
        actions, pending = feed(TASKS, ["g", "d"])
        assert actions[-1] == NoOp()
        assert pending == AwaitingChord("d")


class TestCounts:
    def test_count_repeats_move(self):
        actions, _ = feed(TASKS, ["5", "j"])
        assert actions[-1] == Navigate(5)

    def test_count_upwards(self):
        actions, _ = feed(TASKS, ["4", "up"])
        assert actions[-1] == Navigate(-4)

    def test_count_takes_any_digit_once_started(self):
        actions, pending = feed(TASKS, ["4", "2"])
        assert pending == AccumulatingPrefix("42")
        actions, _ = feed(TASKS, ["4", "2", "G"])
        assert actions[-1] == JumpToLine(42)

    def test_prefix_count(self):
        assert AccumulatingPrefix("17").count == 17

    def test_G_without_count_jumps_last(self):
        actions, _ = feed(TASKS, ["G"])
        assert actions == [JumpTo(Position.LAST)]

    @pytest.mark.parametrize(
        "digit, tab", [("1", Tab.TASKS), ("2", Tab.NOTES), ("3", Tab.POMODORO)]
    )
    def test_low_digits_switch_tabs(self, digit, tab):
        actions, pending = feed(TASKS, [digit])
        assert actions == [SwitchTab(tab=tab)]
        assert pending == IDLE

    def test_zero_is_ignored(self):
        actions, pending = feed(TASKS, ["0"])
        assert actions == [NoOp()]
        assert pending == IDLE

    def test_count_cleared_by_unrelated_key(self):
        actions, pending = feed(TASKS, ["5", "p"])
        assert actions[-1] == CyclePriority()
        assert pending == IDLE

    def test_count_pages(self):
        actions, _ = feed(TASKS, ["4", "pagedown"])
        assert actions[-1] == Navigate(40)


# ---------------------------------------------------------------------------
# Normal mode bindings
# ---------------------------------------------------------------------------


class TestNormalMode:
    @pytest.mark.parametrize(
        "key, expected",
        [
            ("q", Quit()),
            ("ctrl+c", Quit()),
            ("tab", SwitchTab(step=1)),
            ("l", SwitchTab(step=1)),
            ("backtab", SwitchTab(step=-1)),
            ("h", SwitchTab(step=-1)),
            (":", EnterCommandMode()),
            ("?", OpenDialog(DialogKind.HELP)),
            ("S", StopTimer()),
            ("home", JumpTo(Position.FIRST)),
            ("end", JumpTo(Position.LAST)),
        ],
    )
    def test_global_keys(self, key, expected):
        for context in (TASKS, NOTES, POMODORO):
            assert feed(context, [key])[0] == [expected]

    @pytest.mark.parametrize(
        "key, expected",
        [
            ("n", OpenDialog(DialogKind.CREATE_TASK)),
            ("a", OpenDialog(DialogKind.CREATE_TASK)),
            ("e", OpenDialog(DialogKind.EDIT_TASK)),
            ("enter", OpenDialog(DialogKind.EDIT_TASK)),
            (" ", ToggleStatus()),
            ("x", ToggleStatus()),
            ("p", CyclePriority()),
            ("t", OpenDialog(DialogKind.SET_DEADLINE)),
            ("s", StartTimer()),
        ],
    )
    def test_tasks_tab(self, key, expected):
        assert feed(TASKS, [key])[0] == [expected]

    @pytest.mark.parametrize(
        "key, expected",
        [
            ("n", OpenDialog(DialogKind.CREATE_NOTE)),
            ("e", OpenDialog(DialogKind.EDIT_NOTE)),
            ("enter", OpenDialog(DialogKind.VIEW_NOTE)),
            ("v", OpenDialog(DialogKind.VIEW_NOTE)),
            ("p", NoOp()),
        ],
    )
    def test_notes_tab(self, key, expected):
        assert feed(NOTES, [key])[0] == [expected]

    @pytest.mark.parametrize(
        "key, expected",
        [
            ("s", ToggleTimer()),
            (" ", ToggleTimer()),
            ("+", AdjustDuration(DurationField.WORK, 1)),
            ("-", AdjustDuration(DurationField.WORK, -1)),
            ("]", AdjustDuration(DurationField.BREAK, 1)),
            ("[", AdjustDuration(DurationField.BREAK, -1)),
            ("n", NoOp()),
        ],
    )
    def test_pomodoro_tab(self, key, expected):
        assert feed(POMODORO, [key])[0] == [expected]


# ---------------------------------------------------------------------------
# Command line and dialogs
# ---------------------------------------------------------------------------


class TestCommandLine:
    CONTEXT = KeyContext(mode=InputMode.COMMAND)

    @pytest.mark.parametrize(
        "key, expected",
        [
            ("esc", CancelCommand()),
            ("enter", SubmitCommand()),
            ("backspace", DeleteChar()),
            ("w", InsertChar("w")),
            ("left", MoveCursor(delta=-1)),
            ("up", NoOp()),
        ],
    )
    def test_keys(self, key, expected):
        assert interpret(self.CONTEXT, IDLE, key)[0] == expected

    def test_command_mode_ignores_pending(self):
        action, pending = interpret(self.CONTEXT, AccumulatingPrefix("5"), "j")
        assert action == InsertChar("j")
        assert pending == IDLE


class TestDialogs:
    def test_delete_confirm(self):
        context = KeyContext(dialog=DialogKind.DELETE_CONFIRM)
        assert interpret(context, IDLE, "y")[0] == CommitDialog()
        assert interpret(context, IDLE, "n")[0] == CancelDialog()
        assert interpret(context, IDLE, "esc")[0] == CancelDialog()
        assert interpret(context, IDLE, "q")[0] == NoOp()

    def test_dialog_swallows_global_keys(self):
        context = KeyContext(dialog=DialogKind.DELETE_CONFIRM)
        assert interpret(context, IDLE, ":")[0] == NoOp()

    def test_text_dialog_insert_mode(self):
        context = KeyContext(mode=InputMode.INSERT, dialog=DialogKind.CREATE_TASK)
        assert interpret(context, IDLE, "q")[0] == InsertChar("q")
        assert interpret(context, IDLE, "enter")[0] == CommitDialog()
        assert interpret(context, IDLE, "esc")[0] == CancelDialog()
        assert interpret(context, IDLE, "delete")[0] == DeleteChar(forward=True)
        assert interpret(context, IDLE, "end")[0] == MoveCursor(to=Position.LAST)

    def test_text_dialog_normal_mode(self):
        context = KeyContext(mode=InputMode.NORMAL, dialog=DialogKind.EDIT_NOTE)
        assert interpret(context, IDLE, "j")[0] == SelectField(1)
        assert interpret(context, IDLE, "k")[0] == SelectField(-1)
        assert interpret(context, IDLE, "i")[0] == BeginEdit()
        assert interpret(context, IDLE, "q")[0] == CancelDialog()

    def test_view_note(self):
        context = KeyContext(tab=Tab.NOTES, dialog=DialogKind.VIEW_NOTE)
        assert interpret(context, IDLE, "e")[0] == OpenDialog(DialogKind.EDIT_NOTE)
        assert interpret(context, IDLE, "j")[0] == Scroll(1)
        assert interpret(context, IDLE, "G")[0] == ScrollTo(Position.LAST)
        assert interpret(context, IDLE, "esc")[0] == CancelDialog()

    def test_help_does_not_edit(self):
        context = KeyContext(dialog=DialogKind.HELP)
        assert interpret(context, IDLE, "e")[0] == NoOp()
        assert interpret(context, IDLE, "?")[0] == CancelDialog()

    @pytest.mark.parametrize(
        "key, expected",
        [
            ("7", PickerDigit(7)),
            ("up", PickerStep(1)),
            ("-", PickerStep(-1)),
            ("tab", PickerField(1)),
            ("h", PickerField(-1)),
            ("x", ClearDeadline()),
            ("backspace", DeleteChar()),
            ("enter", CommitDialog()),
            ("esc", CancelDialog()),
            ("q", NoOp()),
        ],
    )
    def test_deadline_picker(self, key, expected):
        context = KeyContext(dialog=DialogKind.SET_DEADLINE)
        assert interpret(context, IDLE, key)[0] == expected

    def test_dialog_resets_pending(self):
        context = KeyContext(dialog=DialogKind.HELP)
        assert interpret(context, AwaitingChord("g"), "j")[1] == IDLE
