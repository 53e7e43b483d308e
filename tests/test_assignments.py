import pytest

from classboard.assignments import (
    ADMIN_ROLE_ID,
    create_assignment,
    get_assignment,
    update_assignment,
)
from classboard.db import ApiError, connect
from classboard.models import Assignment, AssignmentUpdate


def _insert(conn, table, **values):
    columns = ", ".join(values)
    marks = ", ".join("?" for _ in values)
    with conn:
        conn.execute(f"INSERT INTO {table} ({columns}) VALUES ({marks})", tuple(values.values()))


@pytest.fixture
def conn():
    connection = connect(":memory:")
    _insert(connection, "subjects", subject_id="s1", subject_name="Maths", editor_role_id="editor")
    _insert(connection, "assigments", assigment_id="a1", subject_id="s1", title="One")
    _insert(connection, "assigments", assigment_id="a2", subject_id="s1", title="Two")
    _insert(connection, "user_subjects", user_id="teacher", subject_id="s1", role_id="editor")
    _insert(connection, "user_subjects", user_id="pupil", subject_id="s1", role_id="student")
    _insert(connection, "user_solution_assignments", user_id="pupil", solution_id="x1", assigment_id="a1")
    _insert(connection, "user_solution_assignments", user_id="pupil", solution_id="x2", assigment_id="a2")
    _insert(connection, "roles", role_id=ADMIN_ROLE_ID, name="admin")
    _insert(connection, "user_subjects", user_id="boss", subject_id="s1", role_id=ADMIN_ROLE_ID)
    yield connection
    connection.close()


def _title(conn, assignment_id):
    row = conn.execute(
        "SELECT title FROM assigments WHERE assigment_id = ?", (assignment_id,)
    ).fetchone()
    return row["title"]


def test_get_assignment_of_linked_user(conn):
    assert get_assignment(conn, "pupil", "a2") == Assignment(
        assigment_id="a2", subject_id="s1", title="Two"
    )


def test_get_assignment_of_unlinked_user_fails(conn):
    with pytest.raises(ApiError):
        get_assignment(conn, "teacher", "a1")


def test_editor_can_update(conn):
    update_assignment(conn, "teacher", "a1", AssignmentUpdate(title="Renamed"))
    assert _title(conn, "a1") == "Renamed"
    assert _title(conn, "a2") == "Two"


def test_non_editor_cannot_update(conn):
    with pytest.raises(ApiError) as info:
        update_assignment(conn, "pupil", "a1", AssignmentUpdate(title="Hack"))
    assert info.value.message == "User is not editor"
    assert _title(conn, "a1") == "One"


def test_empty_update_fails(conn):
    with pytest.raises(ApiError) as info:
        update_assignment(conn, "teacher", "a1", AssignmentUpdate())
    assert info.value.message == ""


def test_admin_can_create(conn):
    create_assignment(conn, "boss", Assignment(assigment_id="a3", subject_id="s1", title="Three"))
    assert _title(conn, "a3") == "Three"


def test_non_admin_cannot_create(conn):
    with pytest.raises(ApiError) as info:
        create_assignment(conn, "teacher", Assignment(assigment_id="a3", subject_id="s1"))
    assert info.value.message == "User is not admin"
    count = conn.execute("SELECT COUNT(*) FROM assigments").fetchone()[0]
    assert count == 2


def test_duplicate_id_fails(conn):
    with pytest.raises(ApiError):
        create_assignment(conn, "boss", Assignment(assigment_id="a1", subject_id="s1"))
    assert _title(conn, "a1") == "One"