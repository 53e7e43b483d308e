"""Reading and submitting solutions to assignments."""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import replace
from datetime import datetime, timezone

from classboard.db import ApiError
from classboard.models import Solution


def _db_datetime(value: datetime | None) -> str | None:
    return None if value is None else value.isoformat(sep=" ")


def get_latest_solution(conn: sqlite3.Connection, user_id: str, assignment_id: str) -> Solution:
    """Return the most recently submitted solution of ``user_id`` for an assignment."""
    message = "Failed to execute a query"
    try:
        row = conn.execute(
            "SELECT s.* FROM assigments a "
            "JOIN user_solution_assignments usa ON usa.assigment_id = a.assigment_id "
            "JOIN solution s ON s.solution_id = usa.solution_id "
            "WHERE usa.user_id = ? AND a.assigment_id = ? "
            "ORDER BY s.submission_date DESC LIMIT 1",
            (user_id, assignment_id),
        ).fetchone()
        found = None if row is None else Solution.from_row(row)
    except (sqlite3.Error, ValueError) as exc:
        raise ApiError(message) from exc
    if found is None:
        raise ApiError(message)
    return found


def submit_solution(
    conn: sqlite3.Connection, user_id: str, assignment_id: str, solution: Solution
) -> Solution:
    """Store a solution with a fresh id and the current time; return what was stored."""
    try:
        allowed = conn.execute(
            "SELECT EXISTS(SELECT 1 FROM assigments a "
            "JOIN subjects s ON s.subject_id = a.subject_id "
            "JOIN user_subjects us ON us.subject_id = s.subject_id "
            "WHERE us.user_id = ? AND a.assigment_id = ?)",
            (user_id, assignment_id),
        ).fetchone()[0]
    except sqlite3.Error as exc:
        raise ApiError() from exc
    if not allowed:
        raise ApiError("User does not have access to the assignment")

    stored = replace(
        solution,
        solution_id=str(uuid.uuid4()),
        submission_date=datetime.now(timezone.utc).replace(tzinfo=None),
    )
    try:
        with conn:
            conn.execute(
                "INSERT INTO solution (solution_id, grade, submission_date, "
                "solution_data, reviewed_by, review_date) VALUES (?, ?, ?, ?, ?, ?)",
                (
                    stored.solution_id,
                    stored.grade,
                    _db_datetime(stored.submission_date),
                    stored.solution_data,
                    stored.reviewed_by,
                    _db_datetime(stored.review_date),
                ),
            )
    except sqlite3.Error as exc:
        raise ApiError() from exc
    return stored