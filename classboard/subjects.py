"""Listing subjects and their assignments."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Any

from classboard.db import ApiError
from classboard.models import Assignment, Subject


@dataclass
class SubjectDetail:
    """A subject with its assignments."""

    subject_name: str
    assignments: list[Assignment] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject_name": self.subject_name,
            "assignments": [assignment.to_dict() for assignment in self.assignments],
        }


@dataclass
class SubjectSummary:
    """The id and name of a subject a user is enrolled in."""

    subject_id: str
    subject_name: str

    def to_dict(self) -> dict[str, Any]:
        return {"subject_id": self.subject_id, "subject_name": self.subject_name}


def get_subject(conn: sqlite3.Connection, user_id: str, subject_id: str) -> SubjectDetail:
    """Return the assignments of a subject that ``user_id`` is enrolled in."""
    try:
        rows = conn.execute(
            "SELECT a.* FROM subjects s "
            "JOIN user_subjects us ON us.subject_id = s.subject_id "
            "JOIN assigments a ON a.subject_id = s.subject_id "
            "WHERE us.user_id = ? AND s.subject_id = ?",
            (user_id, subject_id),
        ).fetchall()
    except sqlite3.Error as exc:
        raise ApiError() from exc
    return SubjectDetail(
        subject_name="", assignments=[Assignment.from_row(row) for row in rows]
    )


def list_subjects(conn: sqlite3.Connection, user_id: str) -> list[SubjectSummary]:
    """Return the subjects ``user_id`` is enrolled in; missing values become empty."""
    try:
        rows = conn.execute(
            "SELECT s.* FROM subjects s "
            "JOIN user_subjects us ON us.subject_id = s.subject_id "
            "WHERE us.user_id = ?",
            (user_id,),
        ).fetchall()
    except sqlite3.Error as exc:
        raise ApiError() from exc
    subjects = (Subject.from_row(row) for row in rows)
    return [
        SubjectSummary(
            subject_id=subject.subject_id or "",
            subject_name=subject.subject_name or "",
        )
        for subject in subjects
    ]