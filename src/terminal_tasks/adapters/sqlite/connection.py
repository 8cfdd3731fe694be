"""Database connection management for the local SQLite store.

Connections are opened with WAL journaling and foreign key enforcement, and
every write goes through :func:`transaction` so that another process reading
the same file (the reminder daemon) only ever sees committed state.
"""

from __future__ import annotations

import os
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from platformdirs import user_data_dir

from terminal_tasks.adapters.sqlite.migrations import ALL_MIGRATIONS, MigrationRunner
from terminal_tasks.exceptions import StoreError
from terminal_tasks.utils.logger import get_logger

APP_NAME = "terminal_tasks"
DB_FILENAME = "tasks.db"


def default_db_path() -> Path:
    """Location of the store when no path is configured."""
    return Path(user_data_dir(APP_NAME)) / DB_FILENAME


def connect(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Open a configured connection and bring the schema up to date.

    Args:
        db_path: Path to database file. If None, uses the default location.
            ``":memory:"`` opens a private in-memory database.

    Returns:
        sqlite3.Connection with ``sqlite3.Row`` rows

    Raises:
        StoreError: If the database cannot be opened or migrated
    """
    logger = get_logger()
    in_memory = str(db_path) == ":memory:"
    path = Path(db_path) if db_path is not None else default_db_path()

    try:
        if not in_memory:
            path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not in_memory and not path.exists()

        connection = sqlite3.connect(
            ":memory:" if in_memory else str(path),
            timeout=30.0,  # Wait up to 30s for another process's lock
        )
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        if not in_memory:
            connection.execute("PRAGMA journal_mode = WAL")

        if is_new_database:
            os.chmod(path, 0o600)

        applied = MigrationRunner(connection).run_migrations(ALL_MIGRATIONS)
    except (OSError, sqlite3.Error, RuntimeError) as e:
        logger.error("failed to open database %s: %s", path, e)
        raise StoreError(f"Cannot open database {path}: {e}") from e

    if applied:
        logger.info("applied %d migration(s) to %s", applied, path)
    return connection


@contextmanager
def transaction(connection: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run a block of writes atomically.

    Commits on success, rolls back on any error and re-raises sqlite errors
    as :class:`StoreError`.
    """
    try:
        with connection:
            yield connection
    except sqlite3.Error as e:
        raise StoreError(f"Database write failed: {e}") from e


@contextmanager
def reading(connection: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Wrap read queries so sqlite errors surface as :class:`StoreError`."""
    try:
        yield connection
    except sqlite3.Error as e:
        raise StoreError(f"Database read failed: {e}") from e
