"""Tests for the text edit buffer, the date-time picker and scrollable dialogs."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from terminal_tasks.exceptions import ValidationError
from terminal_tasks.ui.actions import Position, Tab
from terminal_tasks.ui.dialogs import (
    DateField,
    DateTimePicker,
    EditNoteDialog,
    HelpDialog,
    NoteField,
    TextInput,
    ViewNoteDialog,
    days_in_month,
    help_lines,
)

PLUS_ONE = timezone(timedelta(hours=1))


def picker(**overrides) -> DateTimePicker:
    values = {"year": 2030, "month": 1, "day": 15, "hour": 9, "minute": 0}
    values.update(overrides)
    return DateTimePicker(**values)


# ---------------------------------------------------------------------------
# TextInput
# ---------------------------------------------------------------------------


class TestTextInput:
    def test_insert_at_cursor(self):
        text = TextInput.seeded("held")
        text.move(-2)
        text.insert("l")
        assert text.text == "helld"
        assert text.cursor == 3

    def test_backspace_at_start_is_noop(self):
        text = TextInput.seeded("ab")
        text.move_to(Position.FIRST)
        text.backspace()
        assert text.text == "ab"

    def test_delete_forward(self):
        text = TextInput.seeded("abc")
        text.move_to(Position.FIRST)
        text.delete()
        assert text.text == "bc"
        assert text.cursor == 0

    def test_delete_at_end_is_noop(self):
        text = TextInput.seeded("abc")
        text.delete()
        assert text.text == "abc"

    def test_move_is_clamped(self):
        text = TextInput.seeded("abc")
        text.move(10)
        assert text.cursor == 3
        text.move(-10)
        assert text.cursor == 0

    def test_clear(self):
        text = TextInput.seeded("abc")
        text.clear()
        assert (text.text, text.cursor) == ("", 0)


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "year, month, days",
    [(2024, 2, 29), (2023, 2, 28), (2000, 2, 29), (2100, 2, 28), (2030, 4, 30), (2030, 12, 31)],
)
def test_days_in_month(year, month, days):
    assert days_in_month(year, month) == days


# ---------------------------------------------------------------------------
# DateTimePicker
# ---------------------------------------------------------------------------


class TestPickerTyping:
    def test_typing_every_field(self):
        p = picker(year=2000, month=1, day=1, hour=0, minute=0)
        for digit in "203001150900":
            p.enter_digit(int(digit))
        assert (p.year, p.month, p.day, p.hour, p.minute) == (2030, 1, 15, 9, 0)
        assert p.focus is DateField.MINUTE

    def test_partial_buffer_is_displayed(self):
        p = picker()
        p.enter_digit(2)
        p.enter_digit(0)
        assert p.display(DateField.YEAR) == "20__"
        assert p.year == 2030

    def test_out_of_range_is_rejected_and_discarded(self):
        p = picker(focus=DateField.MONTH)
        p.enter_digit(1)
        with pytest.raises(ValidationError, match="Month"):
            p.enter_digit(3)
        assert p.month == 1
        assert p.buffer == ""
        assert p.focus is DateField.MONTH

    def test_day_bound_follows_month(self):
        p = picker(year=2023, month=2, focus=DateField.DAY)
        p.enter_digit(2)
        with pytest.raises(ValidationError):
            p.enter_digit(9)

    def test_backspace_edits_buffer(self):
        p = picker(focus=DateField.HOUR)
        p.enter_digit(2)
        p.backspace()
        assert p.buffer == ""
        assert p.hour == 9

    def test_moving_commits_buffer(self):
        p = picker(focus=DateField.HOUR)
        p.enter_digit(7)
        p.move_field(1)
        assert p.hour == 7
        assert p.focus is DateField.MINUTE

    def test_move_field_wraps(self):
        p = picker()
        p.move_field(-1)
        assert p.focus is DateField.MINUTE
        p.move_field(1)
        assert p.focus is DateField.YEAR


class TestPickerStepping:
    def test_minute_wraps(self):
        p = picker(minute=59, focus=DateField.MINUTE)
        p.step(1)
        assert p.minute == 0

    def test_month_wraps_down(self):
        p = picker(month=1, focus=DateField.MONTH)
        p.step(-1)
        assert p.month == 12

    def test_day_wraps_to_month_length(self):
        p = picker(year=2024, month=2, day=1, focus=DateField.DAY)
        p.step(-1)
        assert p.day == 29

    def test_year_is_clamped(self):
        p = picker(year=2099)
        p.step(1)
        assert p.year == 2099
        p = picker(year=2000)
        p.step(-1)
        assert p.year == 2000

    def test_day_clamped_before_stepping(self):
        p = picker(month=2, day=31, focus=DateField.DAY)
        p.step(1)
        assert p.day == 1

    def test_step_discards_buffer(self):
        p = picker(focus=DateField.HOUR)
        p.enter_digit(1)
        p.step(1)
        assert p.buffer == ""
        assert p.hour == 10


class TestPickerConversion:
    def test_to_utc(self):
        assert picker().to_utc(PLUS_ONE) == datetime(2030, 1, 15, 8, 0, tzinfo=UTC)

    def test_impossible_date(self):
        p = picker(year=2023, month=2, day=30)
        with pytest.raises(ValidationError, match="Invalid date 2023-02-30"):
            p.to_utc(UTC)

    def test_from_datetime_uses_local_zone(self):
        p = DateTimePicker.from_datetime(datetime(2030, 1, 15, 23, 30, tzinfo=UTC), PLUS_ONE)
        assert (p.year, p.month, p.day, p.hour, p.minute) == (2030, 1, 16, 0, 30)

    def test_from_datetime_clamps_year(self):
        p = DateTimePicker.from_datetime(datetime(2150, 6, 1, tzinfo=UTC), UTC)
        assert p.year == 2099


# ---------------------------------------------------------------------------
# Dialogs
# ---------------------------------------------------------------------------


class TestDialogs:
    def test_edit_note_selection_is_clamped(self):
        dialog = EditNoteDialog(note_id=1, title="t", content="c")
        dialog.select(5)
        assert dialog.selected is NoteField.CONTENT
        dialog.select(-5)
        assert dialog.selected is NoteField.TITLE

    def test_edit_note_begin_edit_seeds_input(self):
        dialog = EditNoteDialog(note_id=1, title="t", content="body", selected=NoteField.CONTENT)
        dialog.begin_edit()
        assert dialog.input.text == "body"
        assert dialog.input.cursor == 4

    def test_view_note_scroll_is_clamped(self):
        dialog = ViewNoteDialog(note_id=1, title="t", content="a\nb\nc")
        dialog.scroll_by(10)
        assert dialog.scroll == 2
        dialog.scroll_by(-10)
        assert dialog.scroll == 0
        dialog.scroll_to(Position.LAST)
        assert dialog.scroll == 2

    def test_empty_note_has_one_line(self):
        assert ViewNoteDialog(content="").lines() == [""]

    def test_help_covers_tab(self):
        assert "Pomodoro" in HelpDialog(tab=Tab.POMODORO).lines()
        assert any(":pomo" in line for line in help_lines(Tab.TASKS))
