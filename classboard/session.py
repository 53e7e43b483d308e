"""Resolving the session cookie into the signed-in user."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from http import HTTPStatus

from classboard.models import SessionRefreshKeys

SESSION_COOKIE = "session_id"


class SessionError(Exception):
    """The request carries no usable session; ``status`` is the HTTP status to send."""

    def __init__(self, status: HTTPStatus, message: str = "") -> None:
        super().__init__(message or status.phrase)
        self.status = status


@dataclass(frozen=True)
class Session:
    """The user a request is made on behalf of."""

    user_id: str
    session_id: str


def load_session(conn: sqlite3.Connection, session_id: str | None) -> Session:
    """Look up the session key sent by the client.

    A missing key is unauthorized; a key that cannot be found or read is a
    server error.
    """
    if session_id is None:
        raise SessionError(HTTPStatus.UNAUTHORIZED)
    try:
        row = conn.execute(
            "SELECT * FROM session_refresh_keys WHERE refresh_key_id = ? LIMIT 1",
            (session_id,),
        ).fetchone()
        key = None if row is None else SessionRefreshKeys.from_row(row)
    except (sqlite3.Error, ValueError) as exc:
        raise SessionError(HTTPStatus.INTERNAL_SERVER_ERROR) from exc
    if key is None or key.refresh_key_id is None:
        raise SessionError(HTTPStatus.INTERNAL_SERVER_ERROR)
    return Session(user_id=key.user_id, session_id=key.refresh_key_id)