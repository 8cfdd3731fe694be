"""Main entry points: the ``tasks`` CLI and the ``taskd`` reminder daemon."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
import tzlocal

from terminal_tasks import __version__
from terminal_tasks.adapters.sqlite import SqliteStore, default_db_path
from terminal_tasks.commands import config
from terminal_tasks.commands.decorators import command_wrapper
from terminal_tasks.config import get_config_manager
from terminal_tasks.exceptions import ValidationError
from terminal_tasks.models import Priority, Task, TaskStatus, utc_now
from terminal_tasks.services import NotificationService, ReminderDaemon
from terminal_tasks.ui.commands import PRIORITY_ARGS
from terminal_tasks.ui.controller import SessionController
from terminal_tasks.ui.shell import Shell
from terminal_tasks.ui.sorting import sort_tasks
from terminal_tasks.utils.logger import get_logger, set_level
from terminal_tasks.utils.ui.console import get_console
from terminal_tasks.utils.ui.formatters import (
    format_info,
    format_notes_table,
    format_output,
    format_success,
    format_tasks_table,
)

app = typer.Typer(
    name="tasks",
    help="Terminal task manager with Pomodoro timer and notes",
)
app.add_typer(config.app, name="config", help="Configuration management")

console = get_console()

DUE_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%d")

_options: dict[str, Optional[Path]] = {"db_path": None}


def resolve_db_path(cli_path: Optional[Path] = None) -> Path:
    """Command-line option, then ``storage.db_path`` from the config, then the default."""
    if cli_path is not None:
        return cli_path
    configured = get_config_manager().config.storage.db_path
    if configured:
        return Path(configured).expanduser()
    return default_db_path()


@contextmanager
def open_store() -> Iterator[SqliteStore]:
    with SqliteStore(resolve_db_path(_options["db_path"])) as store:
        yield store


def parse_due(value: str) -> datetime:
    """Parse a local ``YYYY-MM-DD [HH:MM]`` into an aware datetime.

    Raises:
        ValidationError: If the value matches neither format
    """
    zone = tzlocal.get_localzone()
    for fmt in DUE_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=zone)
        except ValueError:
            continue
    raise ValidationError(f"Invalid due date '{value}', expected YYYY-MM-DD [HH:MM]")


def parse_priority(value: str) -> Priority:
    priority = PRIORITY_ARGS.get(value.lower())
    if priority is None:
        raise ValidationError(f"Invalid priority '{value}', expected low, medium or high")
    return priority


def version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]terminal-tasks[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    db_path: Optional[Path] = typer.Option(
        None, "--db-path", "-d", help="Database path (defaults to the user data directory)"
    ),
    version: bool = typer.Option(
        False, "--version", callback=version_callback, is_eager=True, help="Show version"
    ),
) -> None:
    """Launch the terminal UI when no command is given."""
    _options["db_path"] = db_path
    set_level(get_config_manager().config.logging.level)
    if ctx.invoked_subcommand is None:
        show()


@app.command()
@command_wrapper
def show() -> None:
    """Launch the terminal UI."""
    app_config = get_config_manager().config
    with open_store() as store:
        controller = SessionController(
            store,
            config=app_config,
            notifier=NotificationService(enabled=app_config.ui.notifications),
        )
        controller.load()
        Shell(controller, console=console).run()


@app.command("add")
@command_wrapper
def add(
    title: str = typer.Argument(..., help="Task title"),
    priority: str = typer.Option("medium", "--priority", "-p", help="low, medium or high"),
    due: Optional[str] = typer.Option(None, "--due", help='Deadline, "YYYY-MM-DD HH:MM" (local)'),
) -> None:
    """Add a new task."""
    if not title.strip():
        raise ValidationError("Title cannot be empty")
    due_date = parse_due(due) if due else None
    task = Task.new(title, priority=parse_priority(priority), due_date=due_date)
    with open_store() as store:
        task_id = store.tasks.create(task)
    format_success(f"Task created with ID: {task_id}")


@app.command("list")
@command_wrapper
def list_tasks(
    output: str = typer.Option(
        "table", "--output", "-o", help="Output format (table, json, count)"
    ),
    pending: bool = typer.Option(False, "--pending", help="Hide completed tasks"),
    priority: Optional[str] = typer.Option(
        None, "--priority", "-p", help="Only tasks of this priority (low, medium, high)"
    ),
) -> None:
    """List all tasks in display order."""
    wanted = parse_priority(priority) if priority else None
    with open_store() as store:
        tasks, _ = sort_tasks(store.tasks.list_all())
    if pending:
        tasks = [task for task in tasks if task.status is not TaskStatus.COMPLETED]
    if wanted is not None:
        tasks = [task for task in tasks if task.priority is wanted]

    if output == "count":
        print(len(tasks))
    elif output == "json":
        format_output([task.model_dump(mode="json") for task in tasks], "json")
    else:
        format_tasks_table(tasks, tzlocal.get_localzone(), utc_now())


@app.command("complete")
@command_wrapper
def complete(task_id: int = typer.Argument(..., help="Task ID")) -> None:
    """Mark a task as completed."""
    with open_store() as store:
        task = store.tasks.get(task_id)
        store.tasks.update(task.with_status(TaskStatus.COMPLETED))
    format_success(f"Completed: {task.title}")


@app.command("notes")
@command_wrapper
def notes(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Filter by text"),
    task_id: Optional[int] = typer.Option(None, "--task", "-t", help="Notes of one task"),
    output: str = typer.Option("table", "--output", "-o", help="Output format (table, json)"),
) -> None:
    """List notes, most recently updated first."""
    with open_store() as store:
        if task_id is not None:
            items = store.notes.list_for_task(task_id)
        else:
            items = store.notes.list_all()
    if search:
        items = [note for note in items if note.matches(search)]

    if output == "json":
        format_output([note.model_dump(mode="json") for note in items], "json")
    else:
        format_notes_table(items, tzlocal.get_localzone())


@app.command("stats")
@command_wrapper
def stats() -> None:
    """Show today's completed Pomodoros."""
    with open_store() as store:
        today = store.sessions.today_stats()
        pomodoro = store.settings.get_pomodoro_config()
    format_info(
        f"Today: {today.completed_count} pomodoros, {today.total_minutes} minutes "
        f"(work {pomodoro.work_minutes} min, break {pomodoro.break_minutes} min)"
    )


daemon_app = typer.Typer(name="taskd", help="Task reminder daemon")


@daemon_app.command()
@command_wrapper
def daemon(
    db_path: Optional[Path] = typer.Option(
        None, "--db-path", "-d", help="Database path (defaults to the user data directory)"
    ),
    interval: Optional[int] = typer.Option(
        None, "--interval", "-i", min=5, help="Seconds between reminder checks"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Poll the task list and send desktop reminders."""
    app_config = get_config_manager().config
    set_level("DEBUG" if debug else app_config.logging.level)
    logger = get_logger()

    path = resolve_db_path(db_path)
    logger.info("using database: %s", path)
    with SqliteStore(path) as store:
        reminder_daemon = ReminderDaemon(
            store.tasks,
            NotificationService(),
            interval_seconds=interval or app_config.daemon.interval_seconds,
        )
        try:
            reminder_daemon.run()
        except KeyboardInterrupt:
            logger.info("reminder daemon stopped")


def main() -> None:
    """Main entry point."""
    app()


def daemon_main() -> None:
    """Entry point for ``taskd``."""
    daemon_app()


if __name__ == "__main__":
    main()
