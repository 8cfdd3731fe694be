"""Configuration management commands."""

from typing import Optional

import typer
from pydantic import ValidationError as PydanticValidationError

from terminal_tasks.config import get_config_manager
from terminal_tasks.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND
from terminal_tasks.utils.ui.console import get_console
from terminal_tasks.utils.ui.formatters import (
    format_error,
    format_output,
    format_success,
    format_warning,
)

app = typer.Typer(help="Configuration management commands")
console = get_console()


def parse_value(value: str) -> str | int | float | bool:
    """Convert a command-line value to bool, int or float where it looks like one."""
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


@app.command("view")
def view_config(
    output: str = typer.Option("table", "--output", "-o", help="Output format (table, json)"),
) -> None:
    """View current configuration."""
    config_manager = get_config_manager()
    format_output(config_manager.config.model_dump(), output)


@app.command("get")
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., ui.poll_interval_ms)"),
) -> None:
    """Get a configuration value."""
    value = get_config_manager().get(key)
    if value is None:
        format_error(f"Configuration key '{key}' not found")
        raise typer.Exit(ERROR_NOT_FOUND)
    if hasattr(value, "model_dump"):
        format_output(value.model_dump())
    else:
        console.print(value)


@app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., ui.poll_interval_ms)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    parsed_value = parse_value(value)
    try:
        get_config_manager().set(key, parsed_value)
    except KeyError:
        format_error(f"Configuration key '{key}' not found")
        raise typer.Exit(ERROR_NOT_FOUND) from None
    except PydanticValidationError as e:
        format_error(f"Invalid value for '{key}': {e.errors()[0]['msg']}")
        raise typer.Exit(ERROR_INVALID_ARGS) from None
    format_success(f"Configuration '{key}' set to '{parsed_value}'")


@app.command("reset")
def reset_config(
    key: Optional[str] = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes:
        msg = "entire configuration" if not key else f"'{key}'"
        if not typer.confirm(f"Are you sure you want to reset {msg}?"):
            format_warning("Cancelled")
            raise typer.Exit(0)

    try:
        get_config_manager().reset(key)
    except KeyError:
        format_error(f"Configuration key '{key}' not found")
        raise typer.Exit(ERROR_NOT_FOUND) from None

    if key:
        format_success(f"Configuration '{key}' reset to default")
    else:
        format_success("Configuration reset to defaults")
