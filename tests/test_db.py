import sqlite3

import pytest

from classboard.db import ApiError, connect, database_url
from classboard.schema import TABLES, table_names


@pytest.fixture
def no_database_url(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", "unused")
    monkeypatch.delenv("DATABASE_URL")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_api_error_carries_message():
    error = ApiError("User is not admin")
    assert error.message == "User is not admin"
    assert str(error) == "User is not admin"


def test_api_error_default_message_is_empty():
    assert ApiError().message == ""


def test_database_url_from_environment(monkeypatch, no_database_url):
    monkeypatch.setenv("DATABASE_URL", "app.db")
    assert database_url() == "app.db"


def test_database_url_missing(no_database_url):
    with pytest.raises(RuntimeError, match="DATABASE_URL must be set"):
        database_url()


def test_database_url_from_dotenv_file(no_database_url):
    (no_database_url / ".env").write_text("DATABASE_URL=from_file.db\n")
    assert database_url() == "from_file.db"


def test_connect_creates_schema(tmp_path):
    path = tmp_path / "board.db"
    conn = connect(str(path))
    try:
        assert table_names(conn) == sorted(TABLES)
    finally:
        conn.close()
    assert path.exists()


def test_connect_rows_are_addressable_by_name():
    conn = connect(":memory:")
    try:
        conn.execute(
            "INSERT INTO users (user_id, email, name, surname) VALUES (?, ?, ?, ?)",
            ("u1", "dave@example.com", "Dave", "Brown"),
        )
        row = conn.execute("SELECT * FROM users").fetchone()
        assert row["email"] == "dave@example.com"
        assert isinstance(row, sqlite3.Row)
    finally:
        conn.close()


def test_connect_keeps_existing_data(tmp_path):
    path = str(tmp_path / "board.db")
    first = connect(path)
    with first:
        first.execute("INSERT INTO roles (role_id, name) VALUES ('0', 'admin')")
    first.close()
    second = connect(path)
    try:
        assert second.execute("SELECT name FROM roles").fetchone()["name"] == "admin"
    finally:
        second.close()