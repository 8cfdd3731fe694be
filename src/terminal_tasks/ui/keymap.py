"""Key interpretation.

:func:`interpret` is a pure reducer: given the current mode, tab, dialog,
the pending chord/count state and one key, it returns a semantic action and
the next pending state. Nothing here touches the terminal or the store.

Chords: ``gg`` jumps to the first item, ``dd`` asks to delete. Counts: a
run of digits before ``j``/``k``/arrows repeats the move, before ``G`` jumps
to that line. Un-prefixed ``1``-``3`` switch tabs, so a count must start
with 4-9; once started it takes any digit.
"""

from __future__ import annotations

from dataclasses import dataclass

from terminal_tasks.ui.actions import (
    SCROLL_DIALOGS,
    TEXT_DIALOGS,
    Action,
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

CHORD_LEADERS = frozenset({"g", "d"})
PAGE_SIZE = 10


@dataclass(frozen=True)
class KeyContext:
    """The parts of the application state that decide what a key means."""

    mode: InputMode = InputMode.NORMAL
    tab: Tab = Tab.TASKS
    dialog: DialogKind = DialogKind.NONE


class Pending:
    """Base class for pending chord/count state."""


@dataclass(frozen=True)
class Idle(Pending):
    pass


@dataclass(frozen=True)
class AwaitingChord(Pending):
    key: str


@dataclass(frozen=True)
class AccumulatingPrefix(Pending):
    digits: str

    @property
    def count(self) -> int:
        return int(self.digits)


IDLE = Idle()


def interpret(context: KeyContext, pending: Pending, key: str) -> tuple[Action, Pending]:
    """Translate one key into an action and the next pending state."""
    if context.dialog is not DialogKind.NONE:
        return dialog_action(context, key), IDLE
    if context.mode is InputMode.COMMAND:
        return command_line_action(key), IDLE
    return normal_action(context, pending, key)


def _text_edit_action(key: str) -> Action | None:
    """Editing keys shared by text dialogs and the command line."""
    match key:
        case "backspace":
            return DeleteChar()
        case "delete":
            return DeleteChar(forward=True)
        case "left":
            return MoveCursor(delta=-1)
        case "right":
            return MoveCursor(delta=1)
        case "home":
            return MoveCursor(to=Position.FIRST)
        case "end":
            return MoveCursor(to=Position.LAST)
    if len(key) == 1 and key.isprintable():
        return InsertChar(key)
    return None


def command_line_action(key: str) -> Action:
    match key:
        case "esc" | "ctrl+c":
            return CancelCommand()
        case "enter":
            return SubmitCommand()
    return _text_edit_action(key) or NoOp()


def dialog_action(context: KeyContext, key: str) -> Action:
    """Keys while a dialog is open. Only the dialog's own bindings apply."""
    dialog = context.dialog

    if dialog is DialogKind.DELETE_CONFIRM:
        match key:
            case "y" | "Y":
                return CommitDialog()
            case "n" | "N" | "esc":
                return CancelDialog()
        return NoOp()

    if dialog is DialogKind.SET_DEADLINE:
        return _picker_action(key)

    if dialog in SCROLL_DIALOGS:
        if dialog is DialogKind.VIEW_NOTE and key == "e":
            return OpenDialog(DialogKind.EDIT_NOTE)
        return _scroll_action(key)

    if dialog in TEXT_DIALOGS:
        if context.mode is InputMode.INSERT:
            match key:
                case "esc":
                    return CancelDialog()
                case "enter":
                    return CommitDialog()
            return _text_edit_action(key) or NoOp()
        match key:
            case "up" | "k":
                return SelectField(-1)
            case "down" | "j":
                return SelectField(1)
            case "i" | "enter":
                return BeginEdit()
            case "esc" | "q":
                return CancelDialog()
        return NoOp()

    return NoOp()


def _picker_action(key: str) -> Action:
    if len(key) == 1 and key.isdigit():
        return PickerDigit(int(key))
    match key:
        case "up" | "k" | "+" | "=":
            return PickerStep(1)
        case "down" | "j" | "-":
            return PickerStep(-1)
        case "left" | "h" | "backtab":
            return PickerField(-1)
        case "right" | "l" | "tab":
            return PickerField(1)
        case "backspace":
            return DeleteChar()
        case "delete" | "x":
            return ClearDeadline()
        case "enter":
            return CommitDialog()
        case "esc":
            return CancelDialog()
    return NoOp()


def _scroll_action(key: str) -> Action:
    match key:
        case "up" | "k":
            return Scroll(-1)
        case "down" | "j":
            return Scroll(1)
        case "pageup":
            return Scroll(-PAGE_SIZE)
        case "pagedown" | " ":
            return Scroll(PAGE_SIZE)
        case "home" | "g":
            return ScrollTo(Position.FIRST)
        case "end" | "G":
            return ScrollTo(Position.LAST)
        case "esc" | "q" | "enter" | "?":
            return CancelDialog()
    return NoOp()


def normal_action(
    context: KeyContext, pending: Pending, key: str
) -> tuple[Action, Pending]:
    """Keys in Normal mode with no dialog open."""
    if isinstance(pending, AwaitingChord):
        if key == pending.key:
            return _chord_action(context, key), IDLE
        # Any other key drops the leader and is read on its own.
        pending = IDLE

    count = pending.count if isinstance(pending, AccumulatingPrefix) else None

    if len(key) == 1 and key.isdigit():
        if count is not None:
            return NoOp(), AccumulatingPrefix(pending.digits + key)
        if key in "123":
            return SwitchTab(tab=Tab(int(key) - 1)), IDLE
        if key == "0":
            return NoOp(), IDLE
        return NoOp(), AccumulatingPrefix(key)

    if key in CHORD_LEADERS:
        if key == "d" and context.tab is Tab.POMODORO:
            return NoOp(), IDLE
        return NoOp(), AwaitingChord(key)

    match key:
        case "j" | "down":
            return Navigate(count or 1), IDLE
        case "k" | "up":
            return Navigate(-(count or 1)), IDLE
        case "pagedown":
            return Navigate(PAGE_SIZE * (count or 1)), IDLE
        case "pageup":
            return Navigate(-PAGE_SIZE * (count or 1)), IDLE
        case "G":
            if count is not None:
                return JumpToLine(count), IDLE
            return JumpTo(Position.LAST), IDLE
        case "end":
            return JumpTo(Position.LAST), IDLE
        case "home":
            return JumpTo(Position.FIRST), IDLE

    return _single_key_action(context, key), IDLE


def _chord_action(context: KeyContext, key: str) -> Action:
    if key == "g":
        return JumpTo(Position.FIRST)
    return OpenDialog(DialogKind.DELETE_CONFIRM)


def _single_key_action(context: KeyContext, key: str) -> Action:
    tab = context.tab

    match key:
        case "q" | "ctrl+c":
            return Quit()
        case "tab" | "l" | "right":
            return SwitchTab(step=1)
        case "backtab" | "h" | "left":
            return SwitchTab(step=-1)
        case ":":
            return EnterCommandMode()
        case "?":
            return OpenDialog(DialogKind.HELP)
        case "S":
            return StopTimer()

    if tab is Tab.TASKS:
        match key:
            case "n" | "a":
                return OpenDialog(DialogKind.CREATE_TASK)
            case "e" | "enter":
                return OpenDialog(DialogKind.EDIT_TASK)
            case " " | "x":
                return ToggleStatus()
            case "p":
                return CyclePriority()
            case "t":
                return OpenDialog(DialogKind.SET_DEADLINE)
            case "s":
                return StartTimer()
    elif tab is Tab.NOTES:
        match key:
            case "n" | "a":
                return OpenDialog(DialogKind.CREATE_NOTE)
            case "e":
                return OpenDialog(DialogKind.EDIT_NOTE)
            case "enter" | "v":
                return OpenDialog(DialogKind.VIEW_NOTE)
    else:
        match key:
            case "s" | " ":
                return ToggleTimer()
            case "+" | "=":
                return AdjustDuration(DurationField.WORK, 1)
            case "-":
                return AdjustDuration(DurationField.WORK, -1)
            case "]":
                return AdjustDuration(DurationField.BREAK, 1)
            case "[":
                return AdjustDuration(DurationField.BREAK, -1)

    return NoOp()
