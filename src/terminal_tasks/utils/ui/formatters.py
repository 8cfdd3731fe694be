"""Output formatters for the command-line interface."""

import json
from datetime import datetime, tzinfo
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from terminal_tasks.models import Note, Priority, Task, TaskStatus

console = Console()

PRIORITY_STYLES = {
    Priority.HIGH: "bold red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "green",
}

STATUS_STYLES = {
    TaskStatus.TODO: "white",
    TaskStatus.IN_PROGRESS: "cyan",
    TaskStatus.COMPLETED: "dim",
}


def format_output(data: Any, output_format: str = "table") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    else:
        format_table(data)


def format_table(data: Any) -> None:
    """Format data as a table."""
    if not data:
        console.print("[yellow]No data to display[/yellow]")
        return

    if isinstance(data, list):
        if isinstance(data[0], dict):
            format_dict_table(data)
        else:
            for item in data:
                console.print(item)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def format_dict_table(items: list[dict]) -> None:
    """Format a list of dictionaries as a table."""
    if not items:
        console.print("[yellow]No items found[/yellow]")
        return

    columns = list(items[0].keys())
    table = Table(show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(col.replace("_", " ").title())

    for item in items:
        table.add_row(*(_format_value(item.get(col, "")) for col in columns))

    console.print(table)


def format_single_item(item: dict, prefix: str = "") -> None:
    """Format a single item as key-value pairs, flattening nested sections."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in _flatten(item, prefix):
        table.add_row(key, _format_value(value))

    console.print(table)


def _flatten(item: dict, prefix: str = "") -> list[tuple[str, Any]]:
    rows = []
    for key, value in item.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            rows.extend(_flatten(value, f"{name}."))
        else:
            rows.append((name, value))
    return rows


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if value is None:
        return "-"
    return str(value)


def format_local_time(value: datetime | None, tz: tzinfo) -> str:
    if value is None:
        return "-"
    return f"{value.astimezone(tz):%Y-%m-%d %H:%M}"


def format_tasks_table(tasks: list[Task], tz: tzinfo, now: datetime) -> None:
    """Print tasks in display order."""
    if not tasks:
        console.print("[yellow]No tasks found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Status")
    table.add_column("Title")
    table.add_column("Priority")
    table.add_column("Due")
    table.add_column("Pomodoros", justify="right")

    for task in tasks:
        due = Text(format_local_time(task.due_date, tz))
        if task.is_overdue(now):
            due.stylize("bold red")
        table.add_row(
            str(task.id),
            Text(task.status.label, style=STATUS_STYLES[task.status]),
            task.title,
            Text(task.priority.label, style=PRIORITY_STYLES[task.priority]),
            due,
            str(task.pomodoro_count),
        )

    console.print(table)


def format_notes_table(notes: list[Note], tz: tzinfo) -> None:
    """Print notes, most recently updated first."""
    if not notes:
        console.print("[yellow]No notes found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Title")
    table.add_column("Content", overflow="fold")
    table.add_column("Task", justify="right")
    table.add_column("Updated")

    for note in notes:
        table.add_row(
            str(note.id),
            note.title,
            note.content,
            str(note.task_id) if note.task_id is not None else "-",
            format_local_time(note.updated_at, tz),
        )

    console.print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")
