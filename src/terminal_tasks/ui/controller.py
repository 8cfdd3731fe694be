"""Dialog and session controller.

The controller owns the application state and is the only place that turns
semantic actions into state changes and store calls. Every mutating commit
writes to the store first, then reloads and re-sorts the lists, then sets a
status message, so a failing write leaves the in-memory state untouched.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime, timedelta, tzinfo

import tzlocal

from terminal_tasks.adapters.sqlite import SqliteStore
from terminal_tasks.config import AppConfig
from terminal_tasks.exceptions import NotFoundError, StoreError, ValidationError
from terminal_tasks.models import (
    Note,
    PomodoroConfig,
    PomodoroSession,
    Priority,
    Task,
    TaskStatus,
    utc_now,
)
from terminal_tasks.models.focus import PomodoroTimer, TimerState
from terminal_tasks.services.notification_service import NotificationService
from terminal_tasks.ui.actions import (
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
    MessageLevel,
    MoveCursor,
    Navigate,
    NewItem,
    NoOp,
    OpenDialog,
    PauseTimer,
    PickerDigit,
    PickerField,
    PickerStep,
    Position,
    Quit,
    ResumeTimer,
    Scroll,
    ScrollTo,
    SelectField,
    SetDurations,
    SetPriority,
    ShowMessage,
    SortTasks,
    StartTimer,
    StopTimer,
    SubmitCommand,
    SwitchTab,
    Tab,
    ToggleStatus,
    ToggleTimer,
)
from terminal_tasks.ui.commands import parse_command
from terminal_tasks.ui.dialogs import (
    CreateNoteDialog,
    CreateTaskDialog,
    DateTimePicker,
    DeadlineDialog,
    DeleteConfirmDialog,
    Dialog,
    EditNoteDialog,
    EditTaskDialog,
    HelpDialog,
    NoteField,
    ScrollableDialog,
    TextInput,
    ViewNoteDialog,
)
from terminal_tasks.ui.keymap import interpret
from terminal_tasks.ui.sorting import restore_selection, sort_tasks
from terminal_tasks.ui.state import AppState, StatusMessage
from terminal_tasks.utils.logger import get_logger

_TABS = list(Tab)


class SessionController:
    """Applies actions to an :class:`AppState` backed by a store."""

    def __init__(
        self,
        store: SqliteStore,
        state: AppState | None = None,
        config: AppConfig | None = None,
        notifier: NotificationService | None = None,
        clock: Callable[[], datetime] = utc_now,
        monotonic: Callable[[], float] = time.monotonic,
        tz: tzinfo | None = None,
    ):
        self.store = store
        self.config = config or AppConfig()
        self.notifier = notifier
        self.clock = clock
        self.monotonic = monotonic
        self.tz = tz or tzlocal.get_localzone()
        self.state = state or AppState(timer=PomodoroTimer(clock=clock))
        self.logger = get_logger()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Read durations, today's stats and both lists from the store.

        A store failure is logged and shown in the status bar; the session
        starts with empty lists.
        """
        try:
            pomodoro = self.store.settings.get_pomodoro_config()
            self.state.timer.set_durations(pomodoro.work_minutes, pomodoro.break_minutes)
            self.state.stats = self.store.sessions.today_stats(self.clock())
            self.reload()
        except StoreError as e:
            self.logger.error("failed to load data: %s", e)
            self.set_status(f"Failed to load data: {e}", MessageLevel.ERROR)

    def handle_key(self, key: str) -> None:
        """Interpret one key in the current context and apply the result.

        Args:
            key: Key name as produced by the keyboard reader (``"j"``,
                ``"enter"``, ``"esc"``)
        """
        action, self.state.pending = interpret(self.state.key_context, self.state.pending, key)
        self.dispatch(action)

    def dispatch(self, action: Action) -> None:
        """Apply one action to the session.

        Validation errors, missing rows and store failures never escape:
        each is logged and turned into a status message, and a missing row
        also closes the open dialog and reloads the lists.

        Args:
            action: Semantic action from the key interpreter or a command
        """
        try:
            self._apply(action)
        except ValidationError as e:
            self.logger.info("rejected %s: %s", type(action).__name__, e)
            self.set_status(str(e), MessageLevel.ERROR)
        except NotFoundError as e:
            self.logger.warning("%s: %s", type(action).__name__, e)
            self._close_dialog()
            self._reload_quietly()
            self.set_status(str(e), MessageLevel.WARNING)
        except StoreError as e:
            self.logger.error("%s failed: %s", type(action).__name__, e)
            self.set_status(f"Store error: {e}", MessageLevel.ERROR)

    def on_second(self) -> None:
        """Advance the timer by one elapsed second.

        When a work interval reaches zero its session row is completed, the
        bound task's Pomodoro count is incremented and the break starts.
        When a break reaches zero the timer goes idle. Both send a desktop
        notification if enabled.
        """
        timer = self.state.timer
        if not timer.is_running:
            return
        if timer.tick():
            return
        if timer.state is TimerState.WORKING:
            self._finish_work()
        else:
            self._finish_break()

    def set_status(self, text: str, level: MessageLevel = MessageLevel.INFO) -> None:
        """Show *text* in the status bar for ``ui.status_ttl_seconds``."""
        expires_at = self.monotonic() + self.config.ui.status_ttl_seconds
        self.state.status = StatusMessage(text, level, expires_at)

    def expire_status(self) -> None:
        status = self.state.status
        if status is not None and self.monotonic() >= status.expires_at:
            self.state.status = None

    def reload(
        self, select_task_id: int | None = None, select_note_id: int | None = None
    ) -> None:
        """Re-read both lists from the store and restore the selection.

        Args:
            select_task_id: Task to select; defaults to the current selection
            select_note_id: Note to select; defaults to the current selection

        Raises:
            StoreError: If the store cannot be read
        """
        state = self.state
        if select_task_id is None and state.selected_task is not None:
            select_task_id = state.selected_task.id
        if select_note_id is None and state.selected_note is not None:
            select_note_id = state.selected_note.id

        tasks = self.store.tasks.list_all()
        notes = self.store.notes.list_all()

        state.tasks, state.task_index = sort_tasks(tasks, select_task_id)
        state.notes = notes
        state.note_index = restore_selection(notes, select_note_id)

    # ------------------------------------------------------------------
    # Action dispatch
    # ------------------------------------------------------------------

    def _apply(self, action: Action) -> None:
        state = self.state
        match action:
            case NoOp():
                pass
            case Quit():
                state.should_quit = True
            case Navigate(delta=delta):
                self._move(delta)
            case JumpTo(position=position):
                self._jump(position)
            case JumpToLine(line=line):
                self._jump_to_line(line)
            case SwitchTab(tab=tab, step=step):
                if tab is None:
                    tab = _TABS[(state.tab.value + step) % len(_TABS)]
                state.tab = tab
            case OpenDialog(kind=kind):
                self._open_dialog(kind)
            case CommitDialog():
                self._commit_dialog()
            case CancelDialog():
                self._cancel_dialog()
            case InsertChar(char=char):
                buffer = self._edit_buffer()
                if buffer is not None:
                    buffer.insert(char)
            case DeleteChar(forward=forward):
                self._delete_char(forward)
            case MoveCursor(delta=delta, to=to):
                buffer = self._edit_buffer()
                if buffer is not None:
                    if to is not None:
                        buffer.move_to(to)
                    else:
                        buffer.move(delta)
            case SelectField(delta=delta):
                if isinstance(state.dialog, EditNoteDialog):
                    state.dialog.select(delta)
            case BeginEdit():
                self._begin_edit()
            case PickerDigit(digit=digit):
                self._picker().enter_digit(digit)
            case PickerStep(delta=delta):
                self._picker().step(delta)
            case PickerField(delta=delta):
                self._picker().move_field(delta)
            case ClearDeadline():
                if isinstance(state.dialog, DeadlineDialog):
                    self._apply_deadline(state.dialog, None)
            case Scroll(delta=delta):
                if isinstance(state.dialog, ScrollableDialog):
                    state.dialog.scroll_by(delta)
            case ScrollTo(position=position):
                if isinstance(state.dialog, ScrollableDialog):
                    state.dialog.scroll_to(position)
            case EnterCommandMode():
                state.mode = InputMode.COMMAND
                state.command.clear()
            case SubmitCommand():
                text = state.command.text
                state.mode = InputMode.NORMAL
                state.command.clear()
                self._apply(parse_command(text, state.tab))
            case CancelCommand():
                state.mode = InputMode.NORMAL
                state.command.clear()
            case NewItem(title=title):
                self._new_item(title)
            case ToggleStatus():
                self._toggle_status()
            case CyclePriority():
                task = self._require_task()
                self._set_priority(task, task.priority.next())
            case SetPriority(priority=priority):
                self._set_priority(self._require_task(), priority)
            case SortTasks():
                selected = state.selected_task
                state.tasks, state.task_index = sort_tasks(
                    state.tasks, selected.id if selected else None
                )
                self.set_status("Tasks sorted")
            case StartTimer():
                self._start_timer(bind_selected=state.tab is Tab.TASKS)
            case PauseTimer():
                state.timer.pause()
            case ResumeTimer():
                state.timer.resume()
            case ToggleTimer():
                self._toggle_timer()
            case StopTimer():
                self._stop_timer()
            case AdjustDuration(field=field, steps=steps):
                self._adjust_duration(field, steps)
            case SetDurations(work_minutes=work, break_minutes=brk):
                self._save_durations(work, brk)
            case ShowMessage(text=text, level=level):
                self.set_status(text, level)
            case _:
                raise ValueError(f"Unhandled action: {action!r}")

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _list_length(self) -> int | None:
        match self.state.tab:
            case Tab.TASKS:
                return len(self.state.tasks)
            case Tab.NOTES:
                return len(self.state.notes)
        return None

    def _current_index(self) -> int | None:
        if self.state.tab is Tab.NOTES:
            return self.state.note_index
        return self.state.task_index

    def _select(self, index: int) -> None:
        length = self._list_length()
        if not length:
            return
        index = max(0, min(length - 1, index))
        if self.state.tab is Tab.NOTES:
            self.state.note_index = index
        else:
            self.state.task_index = index

    def _move(self, delta: int) -> None:
        if not self._list_length():
            return
        current = self._current_index()
        self._select(0 if current is None else current + delta)

    def _jump(self, position: Position) -> None:
        length = self._list_length()
        if not length:
            return
        self._select(0 if position is Position.FIRST else length - 1)

    def _jump_to_line(self, line: int) -> None:
        if not self._list_length():
            return
        self._select(line - 1)

    # ------------------------------------------------------------------
    # Dialogs
    # ------------------------------------------------------------------

    def _require_task(self) -> Task:
        if self.state.tab is not Tab.TASKS:
            raise ValidationError("Switch to the Tasks tab first")
        task = self.state.selected_task
        if task is None:
            raise ValidationError("No task selected")
        return task

    def _require_note(self) -> Note:
        note = self.state.selected_note
        if note is None:
            raise ValidationError("No note selected")
        return note

    def _show_dialog(self, dialog: Dialog, mode: InputMode = InputMode.NORMAL) -> None:
        self.state.dialog = dialog
        self.state.mode = mode

    def _close_dialog(self) -> None:
        self.state.dialog = None
        self.state.mode = InputMode.NORMAL

    def _default_picker(self, value: datetime | None) -> DateTimePicker:
        if value is None:
            value = self.clock() + timedelta(hours=1)
        return DateTimePicker.from_datetime(value, self.tz)

    def _open_dialog(self, kind: DialogKind) -> None:
        state = self.state
        match kind:
            case DialogKind.CREATE_TASK:
                self._show_dialog(CreateTaskDialog(), InputMode.INSERT)
            case DialogKind.EDIT_TASK:
                task = self._require_task()
                self._show_dialog(
                    EditTaskDialog(task_id=task.id, input=TextInput.seeded(task.title)),
                    InputMode.INSERT,
                )
            case DialogKind.SET_DEADLINE:
                task = self._require_task()
                self._show_dialog(
                    DeadlineDialog(picker=self._default_picker(task.due_date), task_id=task.id)
                )
            case DialogKind.CREATE_NOTE:
                self._show_dialog(CreateNoteDialog(), InputMode.INSERT)
            case DialogKind.EDIT_NOTE:
                if isinstance(state.dialog, ViewNoteDialog):
                    note_id = state.dialog.note_id
                    title, content = state.dialog.title, state.dialog.content
                else:
                    if state.tab is not Tab.NOTES:
                        raise ValidationError("Switch to the Notes tab first")
                    note = self._require_note()
                    note_id, title, content = note.id, note.title, note.content
                self._show_dialog(
                    EditNoteDialog(
                        note_id=note_id,
                        title=title,
                        content=content,
                        input=TextInput.seeded(title),
                    ),
                    InputMode.INSERT,
                )
            case DialogKind.VIEW_NOTE:
                note = self._require_note()
                self._show_dialog(
                    ViewNoteDialog(note_id=note.id, title=note.title, content=note.content)
                )
            case DialogKind.DELETE_CONFIRM:
                self._open_delete_confirm()
            case DialogKind.HELP:
                self._show_dialog(HelpDialog(tab=state.tab))

    def _open_delete_confirm(self) -> None:
        state = self.state
        match state.tab:
            case Tab.TASKS:
                task = self._require_task()
                dialog = DeleteConfirmDialog(tab=Tab.TASKS, item_id=task.id, label=task.title)
            case Tab.NOTES:
                note = self._require_note()
                dialog = DeleteConfirmDialog(tab=Tab.NOTES, item_id=note.id, label=note.title)
            case _:
                raise ValidationError("Nothing to delete here")
        self._show_dialog(dialog)

    def _begin_edit(self) -> None:
        dialog = self.state.dialog
        if isinstance(dialog, EditNoteDialog):
            dialog.begin_edit()
        self.state.mode = InputMode.INSERT

    def _edit_buffer(self) -> TextInput | None:
        state = self.state
        if state.mode is InputMode.COMMAND:
            return state.command
        if state.mode is InputMode.INSERT:
            return getattr(state.dialog, "input", None)
        return None

    def _delete_char(self, forward: bool) -> None:
        if isinstance(self.state.dialog, DeadlineDialog):
            self.state.dialog.picker.backspace()
            return
        buffer = self._edit_buffer()
        if buffer is None:
            return
        if forward:
            buffer.delete()
        else:
            buffer.backspace()

    def _picker(self) -> DateTimePicker:
        dialog = self.state.dialog
        if not isinstance(dialog, DeadlineDialog):
            raise ValidationError("No deadline picker open")
        return dialog.picker

    def _cancel_dialog(self) -> None:
        dialog = self.state.dialog
        if isinstance(dialog, EditNoteDialog) and self.state.mode is InputMode.INSERT:
            self.state.mode = InputMode.NORMAL
            return
        self._close_dialog()
        if isinstance(dialog, DeadlineDialog) and dialog.pending_title is not None:
            self.set_status("Task creation cancelled")

    def _commit_dialog(self) -> None:
        dialog = self.state.dialog
        match dialog:
            case CreateTaskDialog():
                title = dialog.input.text.strip()
                if not title:
                    raise ValidationError("Title cannot be empty")
                self._show_dialog(
                    DeadlineDialog(picker=self._default_picker(None), pending_title=title)
                )
            case EditTaskDialog():
                self._commit_task_title(dialog)
            case DeadlineDialog():
                self._apply_deadline(dialog, dialog.picker.to_utc(self.tz))
            case DeleteConfirmDialog():
                self._commit_delete(dialog)
            case CreateNoteDialog():
                self._commit_create_note(dialog)
            case EditNoteDialog():
                self._commit_edit_note(dialog)
            case _:
                self._close_dialog()

    def _commit_task_title(self, dialog: EditTaskDialog) -> None:
        title = dialog.input.text.strip()
        if not title:
            raise ValidationError("Title cannot be empty")
        task = self.store.tasks.get(dialog.task_id)
        self.store.tasks.update(task.model_copy(update={"title": title}).touch(self.clock()))
        self._close_dialog()
        self.reload(select_task_id=task.id)
        self.set_status("Task updated", MessageLevel.SUCCESS)

    def _apply_deadline(self, dialog: DeadlineDialog, due: datetime | None) -> None:
        now = self.clock()
        if dialog.pending_title is not None:
            task = Task.new(dialog.pending_title, due_date=due, now=now)
            task_id = self.store.tasks.create(task)
            self.logger.info("created task #%d %r", task_id, task.title)
            self._close_dialog()
            self.reload(select_task_id=task_id)
            self.set_status(f"Task created: {task.title}", MessageLevel.SUCCESS)
            return

        task = self.store.tasks.get(dialog.task_id)
        updated = task.model_copy(update={"due_date": due, "reminder_time": due}).touch(now)
        self.store.tasks.update(updated)
        self._close_dialog()
        self.reload(select_task_id=task.id)
        if due is None:
            self.set_status("Deadline cleared", MessageLevel.SUCCESS)
        else:
            local = due.astimezone(self.tz)
            self.set_status(f"Deadline set to {local:%Y-%m-%d %H:%M}", MessageLevel.SUCCESS)

    def _commit_delete(self, dialog: DeleteConfirmDialog) -> None:
        if dialog.tab is Tab.TASKS:
            self.store.tasks.delete(dialog.item_id)
            if self.state.timer.task_id == dialog.item_id:
                self.state.timer.task_id = None
            message = "Task deleted"
        else:
            self.store.notes.delete(dialog.item_id)
            message = "Note deleted"
        self.logger.info("deleted %s #%d", dialog.tab.title.lower(), dialog.item_id)
        self._close_dialog()
        self.reload()
        self.set_status(message, MessageLevel.SUCCESS)

    def _commit_create_note(self, dialog: CreateNoteDialog) -> None:
        if dialog.phase is NoteField.TITLE:
            title = dialog.input.text.strip()
            if not title:
                raise ValidationError("Title cannot be empty")
            dialog.title = title
            dialog.phase = NoteField.CONTENT
            dialog.input = TextInput()
            return

        note = Note.new(dialog.title, dialog.input.text, now=self.clock())
        note_id = self.store.notes.create(note)
        self.logger.info("created note #%d %r", note_id, note.title)
        self._close_dialog()
        self.reload(select_note_id=note_id)
        self.set_status(f"Note created: {note.title}", MessageLevel.SUCCESS)

    def _commit_edit_note(self, dialog: EditNoteDialog) -> None:
        if dialog.selected is NoteField.TITLE:
            title = dialog.input.text.strip()
            if not title:
                raise ValidationError("Title cannot be empty")
            dialog.title = title
            self.state.mode = InputMode.NORMAL
            return

        dialog.content = dialog.input.text
        note = self.store.notes.get(dialog.note_id)
        now = self.clock()
        updated = note.model_copy(
            update={
                "title": dialog.title,
                "content": dialog.content,
                "updated_at": max(now, note.updated_at),
            }
        )
        self.store.notes.update(updated)
        self._close_dialog()
        self.reload(select_note_id=note.id)
        self.set_status("Note updated", MessageLevel.SUCCESS)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def _new_item(self, title: str) -> None:
        title = title.strip()
        match self.state.tab:
            case Tab.TASKS:
                if not title:
                    self._open_dialog(DialogKind.CREATE_TASK)
                    return
                self._show_dialog(
                    DeadlineDialog(picker=self._default_picker(None), pending_title=title)
                )
            case Tab.NOTES:
                if not title:
                    self._open_dialog(DialogKind.CREATE_NOTE)
                    return
                self._show_dialog(
                    CreateNoteDialog(title=title, phase=NoteField.CONTENT), InputMode.INSERT
                )
            case _:
                raise ValidationError("Switch to Tasks or Notes to create items")

    def _toggle_status(self) -> None:
        task = self._require_task()
        updated = task.toggled(self.clock())
        self.store.tasks.update(updated)
        self.reload(select_task_id=task.id)
        if updated.status is TaskStatus.COMPLETED:
            self.set_status(f"Completed: {task.title}", MessageLevel.SUCCESS)
        else:
            self.set_status(f"Reopened: {task.title}")

    def _set_priority(self, task: Task, priority: Priority) -> None:
        updated = task.model_copy(update={"priority": priority}).touch(self.clock())
        self.store.tasks.update(updated)
        self.reload(select_task_id=task.id)
        self.set_status(f"Priority: {priority.label}")

    # ------------------------------------------------------------------
    # Pomodoro
    # ------------------------------------------------------------------

    def _start_timer(self, bind_selected: bool) -> None:
        timer = self.state.timer
        if timer.is_active:
            raise ValidationError("Timer already running, stop it first")

        task = self.state.selected_task if bind_selected else None
        task_id = task.id if task is not None else None
        now = self.clock()
        session_id = self.store.sessions.create(
            PomodoroSession(task_id=task_id, start_time=now, duration_minutes=timer.work_minutes)
        )
        if task is not None and task.status is TaskStatus.TODO:
            self.store.tasks.update(task.with_status(TaskStatus.IN_PROGRESS, now))
            self.reload(select_task_id=task.id)

        timer.start_work(task_id)
        timer.session_id = session_id
        self.logger.info("pomodoro started (task=%s, session=%s)", task_id, session_id)
        if task is not None:
            self.set_status(f"Pomodoro started: {task.title}")
        else:
            self.set_status("Pomodoro started")

    def _toggle_timer(self) -> None:
        timer = self.state.timer
        if timer.state is TimerState.IDLE:
            self._start_timer(bind_selected=False)
        elif timer.state is TimerState.PAUSED:
            timer.resume()
            self.set_status("Resumed")
        else:
            timer.pause()
            self.set_status("Paused")

    def _stop_timer(self) -> None:
        timer = self.state.timer
        if not timer.is_active:
            raise ValidationError("Timer is not running")
        session_id = timer.session_id
        timer.stop()
        # The session row stays incomplete.
        self.logger.info("pomodoro cancelled (session=%s)", session_id)
        self.set_status("Pomodoro cancelled")

    def _adjust_duration(self, field: DurationField, steps: int) -> None:
        timer = self.state.timer
        if field is DurationField.WORK:
            minutes = timer.work_minutes + steps * self.config.pomodoro.work_step_minutes
            self._save_durations(min(max(minutes, 1), 120), None)
        else:
            minutes = timer.break_minutes + steps * self.config.pomodoro.break_step_minutes
            self._save_durations(None, min(max(minutes, 1), 60))

    def _save_durations(self, work: int | None, brk: int | None) -> None:
        timer = self.state.timer
        config = PomodoroConfig(
            work_minutes=work if work is not None else timer.work_minutes,
            break_minutes=brk if brk is not None else timer.break_minutes,
        )
        self.store.settings.save_pomodoro_config(config)
        timer.set_durations(config.work_minutes, config.break_minutes)
        self.set_status(f"Work {config.work_minutes} min, break {config.break_minutes} min")

    def _finish_work(self) -> None:
        timer = self.state.timer
        end = self.clock()
        task_id = timer.task_id
        try:
            if timer.session_id is not None:
                self.store.sessions.complete(timer.session_id, end)
            if task_id is not None:
                self.store.tasks.increment_pomodoro_count(task_id, end)
            self.state.stats = self.store.sessions.today_stats(end)
            self.reload()
        except (StoreError, NotFoundError) as e:
            self.logger.error("failed to record pomodoro session: %s", e)
            self.set_status(f"Failed to record session: {e}", MessageLevel.ERROR)
        else:
            self.logger.info("pomodoro completed (task=%s)", task_id)
            self.set_status("Pomodoro complete, time for a break", MessageLevel.SUCCESS)

        timer.start_break()
        self._notify(is_break=False)

    def _finish_break(self) -> None:
        self.state.timer.stop()
        self.set_status("Break over")
        self._notify(is_break=True)

    def _notify(self, is_break: bool) -> None:
        if self.notifier is not None and self.config.ui.notifications:
            self.notifier.send_pomodoro_complete(is_break)

    def _reload_quietly(self) -> None:
        try:
            self.reload()
        except StoreError as e:
            self.logger.error("reload failed: %s", e)
