"""Tests for the SQLite note repository."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from terminal_tasks.exceptions import NotFoundError
from terminal_tasks.models import Note, Task

NOW = datetime(2030, 1, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def notes(memory_store):
    return memory_store.notes


def test_list_is_most_recently_updated_first(notes):
    old = notes.create(Note.new("old", now=NOW))
    new = notes.create(Note.new("new", now=NOW + timedelta(minutes=1)))
    assert [note.id for note in notes.list_all()] == [new, old]


def test_ties_break_by_newest_id(notes):
    first = notes.create(Note.new("a", now=NOW))
    second = notes.create(Note.new("b", now=NOW))
    assert [note.id for note in notes.list_all()] == [second, first]


def test_update_moves_note_to_top(notes):
    first = notes.create(Note.new("a", now=NOW))
    notes.create(Note.new("b", now=NOW + timedelta(minutes=1)))

    edited = notes.get(first).model_copy(
        update={"content": "edited", "updated_at": NOW + timedelta(minutes=2)}
    )
    notes.update(edited)

    listed = notes.list_all()
    assert listed[0].id == first
    assert listed[0].content == "edited"


def test_multiline_content_survives(notes):
    note_id = notes.create(Note.new("lines", "one\ntwo\n\nfour", now=NOW))
    assert notes.get(note_id).content == "one\ntwo\n\nfour"


def test_search_is_case_insensitive(notes):
    notes.create(Note.new("Groceries", "Milk and BREAD", now=NOW))
    notes.create(Note.new("Ideas", "Über app", now=NOW))
    assert [note.title for note in notes.search("bread")] == ["Groceries"]
    assert [note.title for note in notes.search("über")] == ["Ideas"]


def test_list_for_task(memory_store):
    task_id = memory_store.tasks.create(Task.new("t", now=NOW))
    memory_store.notes.create(Note.new("linked", task_id=task_id, now=NOW))
    memory_store.notes.create(Note.new("loose", now=NOW))
    linked = memory_store.notes.list_for_task(task_id)
    assert [note.title for note in linked] == ["linked"]


def test_note_requires_existing_task(memory_store):
    from terminal_tasks.exceptions import StoreError

    with pytest.raises(StoreError):
        memory_store.notes.create(Note.new("orphan", task_id=999, now=NOW))


def test_missing_note(notes):
    with pytest.raises(NotFoundError):
        notes.get(1)
    with pytest.raises(NotFoundError):
        notes.delete(1)
    with pytest.raises(NotFoundError):
        notes.update(Note.new("x", now=NOW).model_copy(update={"id": 1}))
