"""Database configuration and connections."""

from __future__ import annotations

import os
import sqlite3

from dotenv import find_dotenv, load_dotenv

from classboard.schema import create_schema


class ApiError(Exception):
    """A request failed; the message is sent to the client as a JSON string."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


def database_url() -> str:
    """Return DATABASE_URL, reading a .env file found from the working directory."""
    load_dotenv(find_dotenv(usecwd=True))
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL must be set")
    return url


def connect(database_url: str) -> sqlite3.Connection:
    """Open the SQLite database, creating missing tables."""
    uri = database_url.startswith("file:")
    conn = sqlite3.connect(database_url, uri=uri, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    create_schema(conn)
    return conn