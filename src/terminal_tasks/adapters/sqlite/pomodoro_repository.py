"""SQLite implementation of PomodoroRepository."""

from __future__ import annotations

import sqlite3
from datetime import datetime, time

import tzlocal

from terminal_tasks.adapters.sqlite.connection import reading, transaction
from terminal_tasks.adapters.sqlite.utils import parse_datetime, to_iso
from terminal_tasks.exceptions import NotFoundError
from terminal_tasks.models import PomodoroSession, PomodoroStats, utc_now
from terminal_tasks.repositories import PomodoroRepository


def local_midnight(now: datetime) -> datetime:
    """Start of the local calendar day containing *now*."""
    zone = tzlocal.get_localzone()
    local_now = now.astimezone(zone)
    return datetime.combine(local_now.date(), time(), tzinfo=zone)


def session_from_row(row: sqlite3.Row) -> PomodoroSession:
    return PomodoroSession(
        id=row["id"],
        task_id=row["task_id"],
        start_time=parse_datetime(row["start_time"], "start_time"),
        end_time=parse_datetime(row["end_time"], "end_time"),
        duration_minutes=row["duration_minutes"],
        completed=bool(row["completed"]),
    )


class SqlitePomodoroRepository(PomodoroRepository):
    """SQLite implementation of the Pomodoro session log."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection

    def create(self, session: PomodoroSession) -> int:
        with transaction(self.connection) as conn:
            cursor = conn.execute(
                "INSERT INTO pomodoro_sessions "
                "(task_id, start_time, end_time, duration_minutes, completed) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    session.task_id,
                    to_iso(session.start_time),
                    to_iso(session.end_time),
                    session.duration_minutes,
                    1 if session.completed else 0,
                ),
            )
        return int(cursor.lastrowid)

    def complete(self, session_id: int, end_time: datetime | None = None) -> None:
        end_time = end_time or utc_now()
        with transaction(self.connection) as conn:
            cursor = conn.execute(
                "UPDATE pomodoro_sessions SET end_time = ?, completed = 1 WHERE id = ?",
                (to_iso(end_time), session_id),
            )
        if cursor.rowcount == 0:
            raise NotFoundError("Session", session_id)

    def list_for_task(self, task_id: int) -> list[PomodoroSession]:
        with reading(self.connection) as conn:
            rows = conn.execute(
                "SELECT * FROM pomodoro_sessions WHERE task_id = ? "
                "ORDER BY start_time DESC",
                (task_id,),
            ).fetchall()
        return [session_from_row(row) for row in rows]

    def list_all(self) -> list[PomodoroSession]:
        with reading(self.connection) as conn:
            rows = conn.execute(
                "SELECT * FROM pomodoro_sessions ORDER BY start_time DESC"
            ).fetchall()
        return [session_from_row(row) for row in rows]

    def today_stats(self, now: datetime | None = None) -> PomodoroStats:
        since = to_iso(local_midnight(now or utc_now()))
        with reading(self.connection) as conn:
            count, minutes = conn.execute(
                "SELECT COUNT(*), SUM(duration_minutes) FROM pomodoro_sessions "
                "WHERE completed = 1 AND start_time >= ?",
                (since,),
            ).fetchone()
        return PomodoroStats(completed_count=count, total_minutes=minutes or 0)
