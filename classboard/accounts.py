"""Reading and changing the signed-in user's account."""

from __future__ import annotations

import sqlite3

from classboard.db import ApiError
from classboard.models import User, UserUpdate

_NOT_FOUND = "Failed to find the user"
_UPDATE_FAILED = "Failed to update the record"


def get_account(conn: sqlite3.Connection, user_id: str) -> User:
    """Return the account of ``user_id``."""
    try:
        row = conn.execute(
            "SELECT * FROM users WHERE user_id = ? LIMIT 1", (user_id,)
        ).fetchone()
        user = None if row is None else User.from_row(row)
    except (sqlite3.Error, ValueError) as exc:
        raise ApiError(_NOT_FOUND) from exc
    if user is None:
        raise ApiError(_NOT_FOUND)
    return user


def update_account(conn: sqlite3.Connection, user_id: str, update: UserUpdate) -> None:
    """Write the given fields of ``update`` to the account of ``user_id``."""
    changes = update.changes()
    if not changes:
        raise ApiError(_UPDATE_FAILED)
    columns = ", ".join(f"{column} = ?" for column in changes)
    try:
        with conn:
            conn.execute(
                f"UPDATE users SET {columns} WHERE user_id = ?",
                (*changes.values(), user_id),
            )
    except sqlite3.Error as exc:
        raise ApiError(_UPDATE_FAILED) from exc