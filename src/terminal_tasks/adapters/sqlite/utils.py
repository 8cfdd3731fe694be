"""Utility functions for the SQLite adapter."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from terminal_tasks.exceptions import StoreError


def to_iso(value: datetime | None) -> str | None:
    """Serialize an aware datetime as a fixed-width UTC ISO-8601 string.

    Fixed width keeps lexicographic order equal to chronological order, which
    the range queries rely on.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        raise StoreError(f"Refusing to store naive datetime {value!r}")
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def now_iso() -> str:
    """Get current timestamp in ISO format."""
    return to_iso(datetime.now(UTC))


def parse_datetime(value: str | None, column: str = "timestamp") -> datetime | None:
    """Parse a stored timestamp.

    Args:
        value: ISO-8601 string or None
        column: Column name, used in the error message

    Returns:
        Aware UTC datetime or None

    Raises:
        StoreError: If the stored value is not a valid ISO-8601 timestamp
    """
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError) as e:
        raise StoreError(f"Malformed {column} in store: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert sqlite3.Row to dictionary."""
    if row is None:
        return {}
    return dict(row)
