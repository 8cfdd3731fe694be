"""Semantic actions produced by the key interpreter and the command line.

The controller only ever sees these; it never looks at raw keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from terminal_tasks.models import Priority


class Tab(Enum):
    TASKS = 0
    NOTES = 1
    POMODORO = 2

    @property
    def title(self) -> str:
        return self.name.capitalize()


class InputMode(Enum):
    NORMAL = "NORMAL"
    INSERT = "INSERT"
    COMMAND = "COMMAND"


class DialogKind(Enum):
    NONE = "none"
    CREATE_TASK = "create_task"
    EDIT_TASK = "edit_task"
    DELETE_CONFIRM = "delete_confirm"
    CREATE_NOTE = "create_note"
    EDIT_NOTE = "edit_note"
    VIEW_NOTE = "view_note"
    HELP = "help"
    SET_DEADLINE = "set_deadline"


TEXT_DIALOGS = frozenset(
    {
        DialogKind.CREATE_TASK,
        DialogKind.EDIT_TASK,
        DialogKind.CREATE_NOTE,
        DialogKind.EDIT_NOTE,
    }
)

SCROLL_DIALOGS = frozenset({DialogKind.HELP, DialogKind.VIEW_NOTE})


class Position(Enum):
    FIRST = "first"
    LAST = "last"


class DurationField(Enum):
    WORK = "work"
    BREAK = "break"


class MessageLevel(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Action:
    """Base class for semantic actions."""


# Navigation


@dataclass(frozen=True)
class Navigate(Action):
    delta: int


@dataclass(frozen=True)
class JumpTo(Action):
    position: Position


@dataclass(frozen=True)
class JumpToLine(Action):
    line: int  # 1-based, as typed by the user


@dataclass(frozen=True)
class SwitchTab(Action):
    tab: Tab | None = None
    step: int = 0


# Dialogs


@dataclass(frozen=True)
class OpenDialog(Action):
    kind: DialogKind


@dataclass(frozen=True)
class CommitDialog(Action):
    pass


@dataclass(frozen=True)
class CancelDialog(Action):
    pass


@dataclass(frozen=True)
class InsertChar(Action):
    char: str


@dataclass(frozen=True)
class DeleteChar(Action):
    forward: bool = False


@dataclass(frozen=True)
class MoveCursor(Action):
    delta: int = 0
    to: Position | None = None


@dataclass(frozen=True)
class SelectField(Action):
    delta: int


@dataclass(frozen=True)
class BeginEdit(Action):
    pass


@dataclass(frozen=True)
class PickerDigit(Action):
    digit: int


@dataclass(frozen=True)
class PickerStep(Action):
    delta: int


@dataclass(frozen=True)
class PickerField(Action):
    delta: int


@dataclass(frozen=True)
class ClearDeadline(Action):
    pass


@dataclass(frozen=True)
class Scroll(Action):
    delta: int


@dataclass(frozen=True)
class ScrollTo(Action):
    position: Position


# Command line


@dataclass(frozen=True)
class EnterCommandMode(Action):
    pass


@dataclass(frozen=True)
class SubmitCommand(Action):
    pass


@dataclass(frozen=True)
class CancelCommand(Action):
    pass


# Items


@dataclass(frozen=True)
class NewItem(Action):
    title: str


@dataclass(frozen=True)
class ToggleStatus(Action):
    pass


@dataclass(frozen=True)
class CyclePriority(Action):
    pass


@dataclass(frozen=True)
class SetPriority(Action):
    priority: Priority


@dataclass(frozen=True)
class SortTasks(Action):
    pass


# Timer


@dataclass(frozen=True)
class StartTimer(Action):
    pass


@dataclass(frozen=True)
class PauseTimer(Action):
    pass


@dataclass(frozen=True)
class ResumeTimer(Action):
    pass


@dataclass(frozen=True)
class ToggleTimer(Action):
    """Start when idle, pause when running, resume when paused."""


@dataclass(frozen=True)
class StopTimer(Action):
    pass


@dataclass(frozen=True)
class AdjustDuration(Action):
    field: DurationField
    steps: int  # multiples of the configured step size


@dataclass(frozen=True)
class SetDurations(Action):
    work_minutes: int | None = None
    break_minutes: int | None = None


# Misc


@dataclass(frozen=True)
class ShowMessage(Action):
    text: str
    level: MessageLevel = MessageLevel.INFO


@dataclass(frozen=True)
class Quit(Action):
    pass


@dataclass(frozen=True)
class NoOp(Action):
    pass
