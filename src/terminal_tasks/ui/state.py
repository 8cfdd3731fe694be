"""Application state owned by the controller and read by the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field

from terminal_tasks.models import Note, PomodoroStats, Task
from terminal_tasks.models.focus import PomodoroTimer
from terminal_tasks.ui.actions import DialogKind, InputMode, MessageLevel, Tab
from terminal_tasks.ui.dialogs import Dialog, TextInput
from terminal_tasks.ui.keymap import IDLE, KeyContext, Pending


@dataclass
class StatusMessage:
    """Transient message shown in the status bar until ``expires_at``."""

    text: str
    level: MessageLevel
    expires_at: float  # monotonic seconds


@dataclass
class AppState:
    tab: Tab = Tab.TASKS
    mode: InputMode = InputMode.NORMAL
    tasks: list[Task] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)
    task_index: int | None = None
    note_index: int | None = None
    dialog: Dialog | None = None
    pending: Pending = IDLE
    command: TextInput = field(default_factory=TextInput)
    timer: PomodoroTimer = field(default_factory=PomodoroTimer)
    stats: PomodoroStats = field(default_factory=PomodoroStats)
    status: StatusMessage | None = None
    should_quit: bool = False

    @property
    def dialog_kind(self) -> DialogKind:
        return self.dialog.kind if self.dialog is not None else DialogKind.NONE

    @property
    def key_context(self) -> KeyContext:
        return KeyContext(mode=self.mode, tab=self.tab, dialog=self.dialog_kind)

    @property
    def selected_task(self) -> Task | None:
        if self.task_index is None or not 0 <= self.task_index < len(self.tasks):
            return None
        return self.tasks[self.task_index]

    @property
    def selected_note(self) -> Note | None:
        if self.note_index is None or not 0 <= self.note_index < len(self.notes):
            return None
        return self.notes[self.note_index]

    def find_task(self, task_id: int | None) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None
