"""rich renderables for the terminal UI."""

from __future__ import annotations

from datetime import datetime, tzinfo

from rich.align import Align
from rich.console import Group, RenderableType
from rich.layout import Layout
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from terminal_tasks.models import Priority, Task, TaskStatus
from terminal_tasks.models.focus import TimerState
from terminal_tasks.ui.actions import InputMode, MessageLevel, Tab
from terminal_tasks.ui.dialogs import (
    CreateNoteDialog,
    CreateTaskDialog,
    DateField,
    DeadlineDialog,
    DeleteConfirmDialog,
    Dialog,
    EditNoteDialog,
    EditTaskDialog,
    HelpDialog,
    NoteField,
    TextInput,
    ViewNoteDialog,
)
from terminal_tasks.ui.state import AppState

PRIORITY_STYLES = {
    Priority.HIGH: "bold red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "green",
}

STATUS_ICONS = {
    TaskStatus.TODO: "○",
    TaskStatus.IN_PROGRESS: "◐",
    TaskStatus.COMPLETED: "●",
}

MESSAGE_STYLES = {
    MessageLevel.INFO: "cyan",
    MessageLevel.SUCCESS: "green",
    MessageLevel.WARNING: "yellow",
    MessageLevel.ERROR: "bold red",
}

TIMER_COLORS = {
    TimerState.IDLE: "dim",
    TimerState.WORKING: "red",
    TimerState.BREAK: "green",
    TimerState.PAUSED: "yellow",
}

DIALOG_HEIGHT = 20


def visible_window(length: int, index: int | None, height: int) -> range:
    """Rows to draw so that the selected row stays on screen."""
    if length <= height:
        return range(length)
    index = index or 0
    start = min(max(index - height + 1, 0), length - height)
    return range(start, start + height)


def format_local(value: datetime | None, tz: tzinfo) -> str:
    if value is None:
        return "-"
    return f"{value.astimezone(tz):%Y-%m-%d %H:%M}"


def render_tabs(state: AppState) -> Text:
    text = Text()
    for tab in Tab:
        label = f" {tab.value + 1} {tab.title} "
        if tab is state.tab:
            text.append(label, style="bold black on cyan")
        else:
            text.append(label, style="dim")
        text.append(" ")
    return text


def render_tasks(state: AppState, now: datetime, tz: tzinfo, height: int) -> RenderableType:
    if not state.tasks:
        return Align.center(
            Text("No tasks yet. Press n to add one.", style="dim"), vertical="middle"
        )

    table = Table(expand=True, box=None, show_edge=False, pad_edge=False)
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("", width=2)
    table.add_column("Title", ratio=1, no_wrap=True)
    table.add_column("Priority", width=8)
    table.add_column("Due", width=16)
    table.add_column("🍅", justify="right", width=3)

    for row in visible_window(len(state.tasks), state.task_index, height):
        task = state.tasks[row]
        table.add_row(*_task_cells(row, task, now, tz), style=_row_style(row, state.task_index))
    return table


def _task_cells(row: int, task: Task, now: datetime, tz: tzinfo) -> list[RenderableType]:
    done = task.status is TaskStatus.COMPLETED
    title = Text(task.title, style="strike dim" if done else "")
    due_style = "bold red" if task.is_overdue(now) else ""
    return [
        str(row + 1),
        STATUS_ICONS[task.status],
        title,
        Text(task.priority.label, style=PRIORITY_STYLES[task.priority]),
        Text(format_local(task.due_date, tz), style=due_style),
        str(task.pomodoro_count or ""),
    ]


def _row_style(row: int, selected: int | None) -> str:
    return "reverse" if row == selected else ""


def render_notes(state: AppState, tz: tzinfo, height: int) -> RenderableType:
    if not state.notes:
        return Align.center(
            Text("No notes yet. Press n to add one.", style="dim"), vertical="middle"
        )

    table = Table(expand=True, box=None, show_edge=False, pad_edge=False)
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("Title", ratio=1, no_wrap=True)
    table.add_column("Preview", ratio=2, no_wrap=True, style="dim")
    table.add_column("Updated", width=16)

    for row in visible_window(len(state.notes), state.note_index, height):
        note = state.notes[row]
        preview = note.content.splitlines()[0] if note.content else ""
        table.add_row(
            str(row + 1),
            note.title,
            preview,
            format_local(note.updated_at, tz),
            style=_row_style(row, state.note_index),
        )
    return table


def render_pomodoro(state: AppState) -> RenderableType:
    timer = state.timer
    color = TIMER_COLORS[timer.state]
    interval = timer.interval

    if interval is TimerState.WORKING:
        title = "Focus"
    elif interval is TimerState.BREAK:
        title = "Break"
    else:
        title = "Ready"
    if timer.state is TimerState.PAUSED:
        title += " (paused)"

    components: list[RenderableType] = [Text(title, style=f"bold {color}", justify="center")]

    bound = state.find_task(timer.task_id)
    if bound is not None:
        components.append(Text(bound.title[:50], style="bold white", justify="center"))
    components.append(Text(""))

    remaining = timer.format_remaining() if timer.is_active else f"{timer.work_minutes:02d}:00"
    components.append(Text(remaining, style=f"bold {color}", justify="center"))

    bar_width = 40
    progress = timer.progress()
    filled = int(bar_width * progress / 100)
    components.append(
        Text(
            "▓" * filled + "░" * (bar_width - filled) + f"  {int(progress)}%",
            style="dim",
            justify="center",
        )
    )
    components.append(Text(""))
    components.append(
        Text(
            f"Work {timer.work_minutes} min · Break {timer.break_minutes} min",
            justify="center",
        )
    )
    components.append(
        Text(
            f"Today: {state.stats.completed_count} pomodoros, {state.stats.total_minutes} min",
            style="dim",
            justify="center",
        )
    )
    return Align.center(Group(*components), vertical="middle")


def _cursor_text(buffer: TextInput) -> Text:
    before, after = buffer.text[: buffer.cursor], buffer.text[buffer.cursor :]
    text = Text(before)
    text.append(after[:1] or " ", style="reverse")
    text.append(after[1:])
    return text


def _input_line(label: str, buffer: TextInput, active: bool) -> Text:
    text = Text(f"{label}: ", style="bold")
    if active:
        text.append_text(_cursor_text(buffer))
    else:
        text.append(buffer.text)
    return text


def render_dialog(dialog: Dialog, mode: InputMode) -> Panel:
    editing = mode is InputMode.INSERT
    match dialog:
        case CreateTaskDialog():
            return Panel(
                _input_line("Title", dialog.input, editing), title="New task", border_style="cyan"
            )
        case EditTaskDialog():
            return Panel(
                _input_line("Title", dialog.input, editing), title="Edit task", border_style="cyan"
            )
        case DeleteConfirmDialog():
            body = Text.assemble(
                ("Delete ", ""),
                (dialog.label, "bold"),
                ("?\n\n", ""),
                ("y", "bold green"),
                (" yes   ", ""),
                ("n", "bold red"),
                (" no", ""),
            )
            return Panel(body, title="Confirm", border_style="red")
        case CreateNoteDialog():
            if dialog.phase is NoteField.TITLE:
                lines = [_input_line("Title", dialog.input, editing)]
            else:
                lines = [
                    Text(f"Title: {dialog.title}"),
                    _input_line("Content", dialog.input, editing),
                ]
            return Panel(Group(*lines), title="New note", border_style="cyan")
        case EditNoteDialog():
            return Panel(_edit_note_body(dialog, editing), title="Edit note", border_style="cyan")
        case ViewNoteDialog():
            lines = dialog.lines()[dialog.scroll : dialog.scroll + DIALOG_HEIGHT]
            return Panel(
                Text("\n".join(lines)),
                title=dialog.title,
                subtitle="e edit · Esc close",
                border_style="blue",
            )
        case HelpDialog():
            lines = dialog.lines()[dialog.scroll : dialog.scroll + DIALOG_HEIGHT]
            return Panel(
                Text("\n".join(lines)), title="Help", subtitle="Esc close", border_style="blue"
            )
        case DeadlineDialog():
            return Panel(_picker_body(dialog), title="Deadline", border_style="magenta")
    return Panel(Text(""))


def _edit_note_body(dialog: EditNoteDialog, editing: bool) -> Group:
    lines = []
    for field, label in ((NoteField.TITLE, "Title"), (NoteField.CONTENT, "Content")):
        if field is dialog.selected and editing:
            lines.append(_input_line(label, dialog.input, True))
            continue
        marker = "> " if field is dialog.selected else "  "
        lines.append(Text(f"{marker}{label}: {dialog.value(field)}"))
    if not editing:
        lines.append(Text("\nj/k select · i edit · Esc close", style="dim"))
    return Group(*lines)


def _picker_body(dialog: DeadlineDialog) -> Group:
    picker = dialog.picker
    line = Text()
    separators = {
        DateField.YEAR: "-",
        DateField.MONTH: "-",
        DateField.DAY: "  ",
        DateField.HOUR: ":",
    }
    for field in DateField:
        style = "bold black on magenta" if field is picker.focus else "bold"
        line.append(picker.display(field), style=style)
        line.append(separators.get(field, ""))

    lines: list[RenderableType] = []
    if dialog.pending_title is not None:
        lines.append(Text(f"New task: {dialog.pending_title}", style="bold"))
    lines.append(line)
    lines.append(
        Text(
            "\ndigits type · ↑/↓ change · ←/→ field · "
            "Enter apply · Del none · Esc cancel",
            style="dim",
        )
    )
    return Group(*lines)


def render_footer(state: AppState) -> Text:
    if state.mode is InputMode.COMMAND:
        text = Text(":")
        text.append_text(_cursor_text(state.command))
        return text

    if state.status is not None:
        return Text(state.status.text, style=MESSAGE_STYLES[state.status.level])

    text = Text(f" {state.mode.value} ", style="bold black on green")
    timer = state.timer
    if timer.is_active:
        text.append(f"  🍅 {timer.format_remaining()}", style=TIMER_COLORS[timer.state])
    text.append("  ? help  : command  q quit", style="dim")
    return text


def build_layout(state: AppState, now: datetime, tz: tzinfo, height: int = 20) -> Layout:
    """The whole screen for one frame."""
    layout = Layout()
    layout.split_column(
        Layout(name="header", size=1),
        Layout(name="body"),
        Layout(name="footer", size=1),
    )
    layout["header"].update(render_tabs(state))

    if state.dialog is not None:
        layout["body"].update(
            Align.center(render_dialog(state.dialog, state.mode), vertical="middle")
        )
    else:
        match state.tab:
            case Tab.TASKS:
                body = render_tasks(state, now, tz, height)
            case Tab.NOTES:
                body = render_notes(state, tz, height)
            case _:
                body = render_pomodoro(state)
        layout["body"].update(Panel(body, border_style="dim"))

    layout["footer"].update(render_footer(state))
    return layout
