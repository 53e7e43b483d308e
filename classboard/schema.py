"""SQLite table definitions for the course board database."""

from __future__ import annotations

import sqlite3

TABLES: dict[str, str] = {
    "assigments": """
        CREATE TABLE IF NOT EXISTS assigments (
            assigment_id TEXT PRIMARY KEY,
            subject_id TEXT NOT NULL,
            title TEXT,
            description TEXT
        )
    """,
    "microsoft_logins": """
        CREATE TABLE IF NOT EXISTS microsoft_logins (
            microsoft_login_id TEXT PRIMARY KEY,
            microsoft_id TEXT,
            user_id TEXT
        )
    """,
    "roles": """
        CREATE TABLE IF NOT EXISTS roles (
            role_id TEXT PRIMARY KEY,
            name TEXT,
            permissions INTEGER
        )
    """,
    "session_refresh_keys": """
        CREATE TABLE IF NOT EXISTS session_refresh_keys (
            refresh_key_id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            expiration_time TIMESTAMP,
            refresh_count INTEGER,
            refresh_limit INTEGER
        )
    """,
    "solution": """
        CREATE TABLE IF NOT EXISTS solution (
            solution_id TEXT PRIMARY KEY,
            grade REAL,
            submission_date TIMESTAMP,
            solution_data BLOB,
            reviewed_by TEXT,
            review_date TIMESTAMP
        )
    """,
    "subjects": """
        CREATE TABLE IF NOT EXISTS subjects (
            subject_id TEXT PRIMARY KEY,
            subject_name TEXT,
            editor_role_id TEXT NOT NULL
        )
    """,
    "user_solution_assignments": """
        CREATE TABLE IF NOT EXISTS user_solution_assignments (
            user_id TEXT,
            solution_id TEXT,
            assigment_id TEXT,
            PRIMARY KEY (user_id, solution_id, assigment_id)
        )
    """,
    "user_subjects": """
        CREATE TABLE IF NOT EXISTS user_subjects (
            user_id TEXT,
            subject_id TEXT,
            role_id TEXT,
            grade REAL,
            PRIMARY KEY (user_id, subject_id)
        )
    """,
    "users": """
        CREATE TABLE IF NOT EXISTS users (
            user_id TEXT PRIMARY KEY,
            email TEXT NOT NULL,
            name TEXT NOT NULL,
            surname TEXT NOT NULL,
            student_id TEXT,
            user_disabled BOOLEAN,
            last_login_time TIMESTAMP
        )
    """,
}


def create_schema(conn: sqlite3.Connection) -> None:
    """Create every table that does not exist yet."""
    with conn:
        for ddl in TABLES.values():
            conn.execute(ddl)


def table_names(conn: sqlite3.Connection) -> list[str]:
    """Return the names of the user tables in the database, sorted."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master "
        "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
    )
    return [row[0] for row in rows]