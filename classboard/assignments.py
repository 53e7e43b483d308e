"""Reading, changing and creating assignments."""

from __future__ import annotations

import sqlite3

from classboard.db import ApiError
from classboard.models import Assignment, AssignmentUpdate

ADMIN_ROLE_ID = "0"


def _exists(conn: sqlite3.Connection, query: str, params: tuple) -> bool:
    try:
        row = conn.execute(f"SELECT EXISTS({query})", params).fetchone()
    except sqlite3.Error as exc:
        raise ApiError() from exc
    return bool(row[0])


def get_assignment(conn: sqlite3.Connection, user_id: str, assignment_id: str) -> Assignment:
    """Return an assignment that ``user_id`` is linked to."""
    try:
        row = conn.execute(
            "SELECT a.* FROM assigments a "
            "JOIN user_solution_assignments usa ON usa.assigment_id = a.assigment_id "
            "WHERE usa.user_id = ? AND a.assigment_id = ? LIMIT 1",
            (user_id, assignment_id),
        ).fetchone()
    except sqlite3.Error as exc:
        raise ApiError() from exc
    if row is None:
        raise ApiError()
    return Assignment.from_row(row)


def update_assignment(
    conn: sqlite3.Connection,
    user_id: str,
    assignment_id: str,
    update: AssignmentUpdate,
) -> None:
    """Change an assignment; the user must hold the subject's editor role."""
    is_editor = _exists(
        conn,
        "SELECT 1 FROM assigments a "
        "JOIN subjects s ON s.subject_id = a.subject_id "
        "JOIN user_subjects us ON us.role_id = s.editor_role_id "
        "WHERE us.user_id = ? AND a.assigment_id = ?",
        (user_id, assignment_id),
    )
    if not is_editor:
        raise ApiError("User is not editor")

    changes = update.changes()
    if not changes:
        raise ApiError()
    columns = ", ".join(f"{column} = ?" for column in changes)
    try:
        with conn:
            conn.execute(
                f"UPDATE assigments SET {columns} WHERE assigment_id = ?",
                (*changes.values(), assignment_id),
            )
    except sqlite3.Error as exc:
        raise ApiError() from exc


def create_assignment(conn: sqlite3.Connection, user_id: str, assignment: Assignment) -> None:
    """Store a new assignment; the user must hold the admin role."""
    is_admin = _exists(
        conn,
        "SELECT 1 FROM roles r "
        "JOIN user_subjects us ON us.role_id = r.role_id "
        "WHERE r.role_id = ? AND us.user_id = ?",
        (ADMIN_ROLE_ID, user_id),
    )
    if not is_admin:
        raise ApiError("User is not admin")
    try:
        with conn:
            conn.execute(
                "INSERT INTO assigments (assigment_id, subject_id, title, description) "
                "VALUES (?, ?, ?, ?)",
                (
                    assignment.assigment_id,
                    assignment.subject_id,
                    assignment.title,
                    assignment.description,
                ),
            )
    except sqlite3.Error as exc:
        raise ApiError() from exc