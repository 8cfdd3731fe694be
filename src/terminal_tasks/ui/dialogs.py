"""Dialog variants, the text edit buffer and the date-time picker.

Each dialog is its own dataclass carrying only the fields it needs; the
controller holds at most one of them at a time.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import UTC, datetime, tzinfo
from enum import IntEnum
from typing import ClassVar

from terminal_tasks.exceptions import ValidationError
from terminal_tasks.ui.actions import DialogKind, Position, Tab

# ----------------------------------------------------------------------
# Text input
# ----------------------------------------------------------------------


@dataclass
class TextInput:
    """Single-line edit buffer with a cursor."""

    text: str = ""
    cursor: int = 0

    @classmethod
    def seeded(cls, text: str) -> TextInput:
        return cls(text=text, cursor=len(text))

    def insert(self, char: str) -> None:
        self.text = self.text[: self.cursor] + char + self.text[self.cursor :]
        self.cursor += len(char)

    def backspace(self) -> None:
        if self.cursor > 0:
            self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
            self.cursor -= 1

    def delete(self) -> None:
        if self.cursor < len(self.text):
            self.text = self.text[: self.cursor] + self.text[self.cursor + 1 :]

    def move(self, delta: int) -> None:
        self.cursor = max(0, min(len(self.text), self.cursor + delta))

    def move_to(self, position: Position) -> None:
        self.cursor = 0 if position is Position.FIRST else len(self.text)

    def set(self, text: str) -> None:
        self.text = text
        self.cursor = len(text)

    def clear(self) -> None:
        self.set("")


# ----------------------------------------------------------------------
# Date-time picker
# ----------------------------------------------------------------------


class DateField(IntEnum):
    YEAR = 0
    MONTH = 1
    DAY = 2
    HOUR = 3
    MINUTE = 4

    @property
    def width(self) -> int:
        return 4 if self is DateField.YEAR else 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


MIN_YEAR = 2000
MAX_YEAR = 2099


def days_in_month(year: int, month: int) -> int:
    """Days in *month* of *year*, honouring the Gregorian leap-year rule."""
    return calendar.monthrange(year, month)[1]


@dataclass
class DateTimePicker:
    """Five-field local date-time editor.

    Digits typed into a field are buffered until the field is full (four
    digits for the year, two otherwise), then validated and the cursor moves
    to the next field. Stepping wraps month, day, hour and minute; the year
    is clamped to 2000-2099.
    """

    year: int
    month: int
    day: int
    hour: int
    minute: int
    focus: DateField = DateField.YEAR
    buffer: str = ""

    @classmethod
    def from_datetime(cls, value: datetime, tz: tzinfo) -> DateTimePicker:
        local = value.astimezone(tz)
        return cls(
            year=min(max(local.year, MIN_YEAR), MAX_YEAR),
            month=local.month,
            day=local.day,
            hour=local.hour,
            minute=local.minute,
        )

    def get(self, which: DateField) -> int:
        return getattr(self, which.name.lower())

    def _set(self, which: DateField, value: int) -> None:
        setattr(self, which.name.lower(), value)

    def bounds(self, which: DateField) -> tuple[int, int]:
        match which:
            case DateField.YEAR:
                return MIN_YEAR, MAX_YEAR
            case DateField.MONTH:
                return 1, 12
            case DateField.DAY:
                return 1, days_in_month(self.year, self.month)
            case DateField.HOUR:
                return 0, 23
            case DateField.MINUTE:
                return 0, 59
        raise ValueError(which)

    def display(self, which: DateField) -> str:
        if which is self.focus and self.buffer:
            return self.buffer.ljust(which.width, "_")
        return f"{self.get(which):0{which.width}d}"

    def enter_digit(self, digit: int) -> None:
        """Buffer one digit; a full buffer is committed and the field advances.

        Raises:
            ValidationError: If the completed value is out of range
        """
        self.buffer += str(digit)
        if len(self.buffer) >= self.focus.width:
            self.commit_buffer()
            if self.focus < DateField.MINUTE:
                self.focus = DateField(self.focus + 1)

    def backspace(self) -> None:
        self.buffer = self.buffer[:-1]

    def commit_buffer(self) -> None:
        """Write the buffered digits into the current field.

        Raises:
            ValidationError: If the value is out of range (the buffer is
                discarded either way)
        """
        if not self.buffer:
            return
        value = int(self.buffer)
        self.buffer = ""
        low, high = self.bounds(self.focus)
        if not low <= value <= high:
            raise ValidationError(f"{self.focus.label} must be between {low} and {high}")
        self._set(self.focus, value)

    def step(self, delta: int) -> None:
        """Increment or decrement the current field."""
        self.buffer = ""
        which = self.focus
        low, high = self.bounds(which)
        if which is DateField.YEAR:
            self.year = min(max(self.year + delta, low), high)
            return
        current = min(self.get(which), high)
        span = high - low + 1
        self._set(which, (current - low + delta) % span + low)

    def move_field(self, delta: int) -> None:
        """Select the previous/next field, committing any buffered digits."""
        self.commit_buffer()
        self.focus = DateField((self.focus + delta) % len(DateField))

    def to_utc(self, tz: tzinfo) -> datetime:
        """The composed local date-time as an aware UTC instant.

        Raises:
            ValidationError: If the fields do not form a real calendar date
        """
        self.commit_buffer()
        try:
            local = datetime(self.year, self.month, self.day, self.hour, self.minute, tzinfo=tz)
        except ValueError as e:
            raise ValidationError(
                f"Invalid date {self.year:04d}-{self.month:02d}-{self.day:02d}"
            ) from e
        return local.astimezone(UTC)


# ----------------------------------------------------------------------
# Dialog variants
# ----------------------------------------------------------------------


class NoteField(IntEnum):
    TITLE = 0
    CONTENT = 1


class Dialog:
    """Base class for the dialog variants."""

    kind: ClassVar[DialogKind]


@dataclass
class CreateTaskDialog(Dialog):
    kind: ClassVar[DialogKind] = DialogKind.CREATE_TASK
    input: TextInput = field(default_factory=TextInput)


@dataclass
class EditTaskDialog(Dialog):
    kind: ClassVar[DialogKind] = DialogKind.EDIT_TASK
    task_id: int = 0
    input: TextInput = field(default_factory=TextInput)


@dataclass
class DeleteConfirmDialog(Dialog):
    kind: ClassVar[DialogKind] = DialogKind.DELETE_CONFIRM
    tab: Tab = Tab.TASKS
    item_id: int = 0
    label: str = ""


@dataclass
class CreateNoteDialog(Dialog):
    """Title first; Enter moves on to the content, a second Enter saves."""

    kind: ClassVar[DialogKind] = DialogKind.CREATE_NOTE
    title: str = ""
    phase: NoteField = NoteField.TITLE
    input: TextInput = field(default_factory=TextInput)


@dataclass
class EditNoteDialog(Dialog):
    """Holds the note's title and content while one of them is edited."""

    kind: ClassVar[DialogKind] = DialogKind.EDIT_NOTE
    note_id: int = 0
    title: str = ""
    content: str = ""
    selected: NoteField = NoteField.TITLE
    input: TextInput = field(default_factory=TextInput)

    def value(self, which: NoteField) -> str:
        return self.title if which is NoteField.TITLE else self.content

    def begin_edit(self) -> None:
        self.input = TextInput.seeded(self.value(self.selected))

    def select(self, delta: int) -> None:
        self.selected = NoteField(min(max(self.selected + delta, 0), len(NoteField) - 1))


@dataclass
class ScrollableDialog(Dialog):
    scroll: int = 0

    def lines(self) -> list[str]:
        raise NotImplementedError

    def scroll_by(self, delta: int) -> None:
        last = max(len(self.lines()) - 1, 0)
        self.scroll = max(0, min(last, self.scroll + delta))

    def scroll_to(self, position: Position) -> None:
        self.scroll = 0 if position is Position.FIRST else max(len(self.lines()) - 1, 0)


@dataclass
class ViewNoteDialog(ScrollableDialog):
    kind: ClassVar[DialogKind] = DialogKind.VIEW_NOTE
    note_id: int = 0
    title: str = ""
    content: str = ""

    def lines(self) -> list[str]:
        return self.content.splitlines() or [""]


@dataclass
class HelpDialog(ScrollableDialog):
    kind: ClassVar[DialogKind] = DialogKind.HELP
    tab: Tab = Tab.TASKS

    def lines(self) -> list[str]:
        return help_lines(self.tab)


@dataclass
class DeadlineDialog(Dialog):
    """Deadline picker for an existing task or for a task still being created.

    ``pending_title`` is set while creating: the task only reaches the store
    when the deadline is applied (or cleared), and Esc drops it.
    """

    kind: ClassVar[DialogKind] = DialogKind.SET_DEADLINE
    picker: DateTimePicker = field(
        default_factory=lambda: DateTimePicker(MIN_YEAR, 1, 1, 0, 0)
    )
    task_id: int | None = None
    pending_title: str | None = None


# ----------------------------------------------------------------------
# Help text
# ----------------------------------------------------------------------

_GENERAL_HELP = [
    "General",
    "  q, Ctrl+C        Quit",
    "  Tab / l          Next tab",
    "  Shift+Tab / h    Previous tab",
    "  1 2 3            Tasks / Notes / Pomodoro",
    "  j k / arrows     Move (accepts a count, e.g. 5j)",
    "  gg / Home        First item",
    "  G / End          Last item ({count}G jumps to a line)",
    "  S                Stop the Pomodoro timer",
    "  ?                This help",
    "  :                Command line",
    "",
]

_TAB_HELP = {
    Tab.TASKS: [
        "Tasks",
        "  n, a             New task (then pick a deadline)",
        "  e, Enter         Edit title",
        "  Space, x         Toggle completed",
        "  p                Cycle priority",
        "  t                Set deadline",
        "  dd               Delete",
        "  s                Start a Pomodoro for the selected task",
        "",
        "Deadline picker",
        "  digits           Type the field value",
        "  Up/Down, +/-     Change the field",
        "  Left/Right, Tab  Select field",
        "  Delete           No deadline",
        "  Enter / Esc      Apply / cancel",
    ],
    Tab.NOTES: [
        "Notes",
        "  n, a             New note",
        "  Enter, v         View note",
        "  e                Edit note",
        "  dd               Delete",
    ],
    Tab.POMODORO: [
        "Pomodoro",
        "  s, Space         Start / pause / resume",
        "  S                Stop",
        "  + / -            Work duration up / down",
        "  ] / [            Break duration up / down",
    ],
}

_COMMAND_HELP = [
    "",
    "Commands",
    "  :q :wq           Quit",
    "  :N               Jump to line N",
    "  :new TEXT        New item",
    "  :e :d            Edit / delete",
    "  :p [1-3|low|medium|high]  Priority",
    "  :t :ddl :due     Deadline",
    "  :s :c            Start / stop timer",
    "  :work+ :work- :break+ :break-",
    "  :pomo work=N break=M",
    "  :sort            Re-sort tasks",
]


def help_lines(tab: Tab) -> list[str]:
    """Help text for *tab*."""
    return _GENERAL_HELP + _TAB_HELP[tab] + _COMMAND_HELP
