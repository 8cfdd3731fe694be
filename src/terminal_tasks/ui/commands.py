"""Colon command line.

``parse_command`` turns the text typed after ``:`` into an action. Anything
it cannot make sense of becomes an error :class:`ShowMessage` so the caller
never has to handle a parse failure separately.
"""

from __future__ import annotations

from terminal_tasks.models import Priority
from terminal_tasks.ui.actions import (
    Action,
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

PRIORITY_ARGS = {
    "1": Priority.LOW,
    "2": Priority.MEDIUM,
    "3": Priority.HIGH,
    "low": Priority.LOW,
    "medium": Priority.MEDIUM,
    "high": Priority.HIGH,
}

_DURATION_COMMANDS = {
    "work+": AdjustDuration(DurationField.WORK, 1),
    "work-": AdjustDuration(DurationField.WORK, -1),
    "break+": AdjustDuration(DurationField.BREAK, 1),
    "break-": AdjustDuration(DurationField.BREAK, -1),
}


def _error(text: str) -> ShowMessage:
    return ShowMessage(text, MessageLevel.ERROR)


def parse_command(text: str, tab: Tab = Tab.TASKS) -> Action:
    """Parse one command line (without the leading colon)."""
    text = text.strip()
    if not text:
        return NoOp()

    name, _, rest = text.partition(" ")
    rest = rest.strip()
    name = name.lower()

    if name.isdigit():
        if rest:
            return _error(f"Unknown command: {text}")
        line = int(name)
        if line < 1:
            return _error("Line numbers start at 1")
        return JumpToLine(line)

    match name:
        case "q" | "wq" | "quit":
            return Quit()
        case "new" | "n":
            return NewItem(rest)
        case "e" | "edit":
            if tab is Tab.NOTES:
                return OpenDialog(DialogKind.EDIT_NOTE)
            return OpenDialog(DialogKind.EDIT_TASK)
        case "d" | "delete":
            return OpenDialog(DialogKind.DELETE_CONFIRM)
        case "p" | "priority":
            return _parse_priority(rest)
        case "t" | "ddl" | "deadline" | "due":
            return OpenDialog(DialogKind.SET_DEADLINE)
        case "s" | "start":
            return StartTimer()
        case "c" | "cancel" | "stop":
            return StopTimer()
        case "pomo":
            return _parse_pomo(rest)
        case "h" | "help" | "?":
            return OpenDialog(DialogKind.HELP)
        case "sort":
            return SortTasks()

    if name in _DURATION_COMMANDS and not rest:
        return _DURATION_COMMANDS[name]

    return _error(f"Unknown command: {text}")


def _parse_priority(arg: str) -> Action:
    if not arg:
        return CyclePriority()
    priority = PRIORITY_ARGS.get(arg.lower())
    if priority is None:
        return _error(f"Invalid priority: {arg} (use 1-3 or low/medium/high)")
    return SetPriority(priority)


def _parse_pomo(args: str) -> Action:
    """``pomo work=N break=M``; either assignment may be left out."""
    values: dict[str, int] = {}
    for part in args.split():
        key, sep, raw = part.partition("=")
        key = key.lower()
        if not sep or key not in ("work", "break"):
            return _error(f"Invalid pomo argument: {part}")
        try:
            values[key] = int(raw)
        except ValueError:
            return _error(f"Invalid number for {key}: {raw}")

    if not values:
        return _error("Usage: pomo work=N break=M")

    work = values.get("work")
    brk = values.get("break")
    if work is not None and not 1 <= work <= 120:
        return _error("Work duration must be between 1 and 120 minutes")
    if brk is not None and not 1 <= brk <= 60:
        return _error("Break duration must be between 1 and 60 minutes")
    return SetDurations(work_minutes=work, break_minutes=brk)
