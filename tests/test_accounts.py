from datetime import datetime

import pytest

from classboard.accounts import get_account, update_account
from classboard.db import ApiError, connect
from classboard.models import User, UserUpdate


@pytest.fixture
def conn():
    connection = connect(":memory:")
    with connection:
        connection.execute(
            "INSERT INTO users (user_id, email, name, surname, student_id) "
            "VALUES (?, ?, ?, ?, ?)",
            ("u1", "ann@example.com", "Ann", "Lee", "s100"),
        )
        connection.execute(
            "INSERT INTO users (user_id, email, name, surname) VALUES (?, ?, ?, ?)",
            ("u2", "bob@example.com", "Bob", "Kay"),
        )
    yield connection
    connection.close()


def test_get_account_returns_user(conn):
    assert get_account(conn, "u1") == User(
        user_id="u1",
        email="ann@example.com",
        name="Ann",
        surname="Lee",
        student_id="s100",
    )


def test_get_unknown_account_fails(conn):
    with pytest.raises(ApiError) as info:
        get_account(conn, "missing")
    assert info.value.message == "Failed to find the user"


def test_update_changes_only_given_fields(conn):
    update_account(conn, "u1", UserUpdate(email="new@example.com"))
    user = get_account(conn, "u1")
    assert user.email == "new@example.com"
    assert (user.name, user.surname, user.student_id) == ("Ann", "Lee", "s100")


def test_update_leaves_other_users_alone(conn):
    before = get_account(conn, "u2")
    update_account(conn, "u1", UserUpdate(name="Anna"))
    assert get_account(conn, "u2") == before


def test_update_with_nothing_to_change_fails(conn):
    with pytest.raises(ApiError) as info:
        update_account(conn, "u1", UserUpdate())
    assert info.value.message == "Failed to update the record"


def test_update_bool_and_datetime_round_trip(conn):
    moment = datetime(2024, 5, 6, 7, 8, 9)
    update_account(conn, "u2", UserUpdate(user_disabled=True, last_login_time=moment))
    user = get_account(conn, "u2")
    assert user.user_disabled is True
    assert user.last_login_time == moment


def test_update_of_unknown_user_changes_nothing(conn):
    update_account(conn, "missing", UserUpdate(name="Ghost"))
    names = sorted(row["name"] for row in conn.execute("SELECT name FROM users"))
    assert names == ["Ann", "Bob"]