"""SQLite implementation of NoteRepository."""

from __future__ import annotations

import sqlite3
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from terminal_tasks.adapters.sqlite.connection import reading, transaction
from terminal_tasks.adapters.sqlite.utils import parse_datetime, row_to_dict, to_iso
from terminal_tasks.exceptions import NotFoundError, StoreError
from terminal_tasks.models import Note
from terminal_tasks.repositories import NoteRepository

_COLUMNS = "id, title, content, task_id, created_at, updated_at"


def note_from_row(row: sqlite3.Row) -> Note:
    data: dict[str, Any] = row_to_dict(row)
    data["created_at"] = parse_datetime(data["created_at"], "created_at")
    data["updated_at"] = parse_datetime(data["updated_at"], "updated_at")
    try:
        return Note(**data)
    except PydanticValidationError as e:
        raise StoreError(f"Malformed note #{data.get('id')}: {e}") from e


class SqliteNoteRepository(NoteRepository):
    """SQLite implementation of note repository."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection

    def create(self, note: Note) -> int:
        with transaction(self.connection) as conn:
            cursor = conn.execute(
                "INSERT INTO notes (title, content, task_id, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    note.title,
                    note.content,
                    note.task_id,
                    to_iso(note.created_at),
                    to_iso(note.updated_at),
                ),
            )
        return int(cursor.lastrowid)

    def list_all(self) -> list[Note]:
        return self._select("ORDER BY updated_at DESC, id DESC")

    def get(self, note_id: int) -> Note:
        notes = self._select("WHERE id = ?", (note_id,))
        if not notes:
            raise NotFoundError("Note", note_id)
        return notes[0]

    def update(self, note: Note) -> None:
        if note.id is None:
            raise StoreError("Cannot update a note that was never saved")
        with transaction(self.connection) as conn:
            cursor = conn.execute(
                "UPDATE notes SET title = ?, content = ?, task_id = ?, updated_at = ? "
                "WHERE id = ?",
                (
                    note.title,
                    note.content,
                    note.task_id,
                    to_iso(note.updated_at),
                    note.id,
                ),
            )
        if cursor.rowcount == 0:
            raise NotFoundError("Note", note.id)

    def delete(self, note_id: int) -> None:
        with transaction(self.connection) as conn:
            cursor = conn.execute("DELETE FROM notes WHERE id = ?", (note_id,))
        if cursor.rowcount == 0:
            raise NotFoundError("Note", note_id)

    def list_for_task(self, task_id: int) -> list[Note]:
        return self._select("WHERE task_id = ? ORDER BY updated_at DESC", (task_id,))

    def search(self, query: str) -> list[Note]:
        # LIKE is only case-insensitive for ASCII, so filter in Python.
        return [note for note in self.list_all() if note.matches(query)]

    def _select(self, clause: str, params: tuple = ()) -> list[Note]:
        with reading(self.connection) as conn:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM notes {clause}", params).fetchall()
        return [note_from_row(row) for row in rows]
