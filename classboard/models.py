"""Records stored in the database and exchanged as JSON."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

_EPOCH = datetime(1970, 1, 1)
_DATETIME_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[T ](\d{2}:\d{2}:\d{2})(?:\.(\d+))?$"
)


def from_timestamp(value: Any) -> datetime:
    """Turn a count of seconds since the Unix epoch into a naive UTC datetime."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("invalid timestamp")
    try:
        return _EPOCH + timedelta(seconds=value)
    except OverflowError:
        raise ValueError("invalid timestamp") from None


def _parse_datetime(value: Any, field: str) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        match = _DATETIME_RE.match(value.strip())
        if match:
            date_part, time_part, fraction = match.groups()
            try:
                parsed = datetime.strptime(
                    f"{date_part} {time_part}", "%Y-%m-%d %H:%M:%S"
                )
            except ValueError:
                pass
            else:
                micros = int((fraction or "")[:6].ljust(6, "0"))
                return parsed.replace(microsecond=micros)
    raise ValueError(f"invalid datetime for field {field!r}")


def _db_datetime(value: datetime | None) -> str | None:
    return None if value is None else value.isoformat(sep=" ")


def _json_datetime(value: datetime | None) -> str | None:
    return None if value is None else value.isoformat()


def _require_mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError("expected a JSON object")
    return data


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _required_str(data: Mapping[str, Any], key: str) -> str:
    if key not in data:
        raise ValueError(f"missing field {key!r}")
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _optional_bool(data: Mapping[str, Any], key: str) -> bool | None:
    value = data.get(key)
    if value is not None and not isinstance(value, bool):
        raise ValueError(f"field {key!r} must be a boolean")
    return value


def _row_bool(value: Any) -> bool | None:
    return None if value is None else bool(value)


def _row_float(value: Any) -> float | None:
    return None if value is None else float(value)


def _row_bytes(value: Any) -> bytes | None:
    return None if value is None else bytes(value)


def _json_bytes(value: Any, key: str) -> bytes | None:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, list):
        if all(
            isinstance(item, int) and not isinstance(item, bool) and 0 <= item <= 255
            for item in value
        ):
            return bytes(value)
    raise ValueError(f"field {key!r} must be a byte array")


def _changes(values: dict[str, Any]) -> dict[str, Any]:
    return {
        column: _db_datetime(value) if isinstance(value, datetime) else value
        for column, value in values.items()
        if value is not None
    }


@dataclass
class User:
    """A user account."""

    user_id: str | None
    email: str
    name: str
    surname: str
    student_id: str | None = None
    user_disabled: bool | None = None
    last_login_time: datetime | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> User:
        return cls(
            user_id=row["user_id"],
            email=row["email"],
            name=row["name"],
            surname=row["surname"],
            student_id=row["student_id"],
            user_disabled=_row_bool(row["user_disabled"]),
            last_login_time=_parse_datetime(row["last_login_time"], "last_login_time"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "name": self.name,
            "surname": self.surname,
            "student_id": self.student_id,
            "user_disabled": self.user_disabled,
            "last_login_time": _json_datetime(self.last_login_time),
        }


@dataclass
class UserUpdate:
    """A partial change to a user account; absent fields stay as they are."""

    email: str | None = None
    name: str | None = None
    surname: str | None = None
    student_id: str | None = None
    user_disabled: bool | None = None
    last_login_time: datetime | None = None

    @classmethod
    def from_dict(cls, data: Any) -> UserUpdate:
        data = _require_mapping(data)
        return cls(
            email=_optional_str(data, "email"),
            name=_optional_str(data, "name"),
            surname=_optional_str(data, "surname"),
            student_id=_optional_str(data, "student_id"),
            user_disabled=_optional_bool(data, "user_disabled"),
            last_login_time=_parse_datetime(data.get("last_login_time"), "last_login_time"),
        )

    def changes(self) -> dict[str, Any]:
        """Column values to write, leaving out fields that were not given."""
        return _changes(
            {
                "email": self.email,
                "name": self.name,
                "surname": self.surname,
                "student_id": self.student_id,
                "user_disabled": self.user_disabled,
                "last_login_time": self.last_login_time,
            }
        )


@dataclass
class Assignment:
    """An assignment belonging to a subject."""

    assigment_id: str | None
    subject_id: str
    title: str | None = None
    description: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Assignment:
        return cls(
            assigment_id=row["assigment_id"],
            subject_id=row["subject_id"],
            title=row["title"],
            description=row["description"],
        )

    @classmethod
    def from_dict(cls, data: Any) -> Assignment:
        data = _require_mapping(data)
        return cls(
            assigment_id=_optional_str(data, "assigment_id"),
            subject_id=_required_str(data, "subject_id"),
            title=_optional_str(data, "title"),
            description=_optional_str(data, "description"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "assigment_id": self.assigment_id,
            "subject_id": self.subject_id,
            "title": self.title,
            "description": self.description,
        }


@dataclass
class AssignmentUpdate:
    """A partial change to an assignment."""

    title: str | None = None
    description: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> AssignmentUpdate:
        data = _require_mapping(data)
        return cls(
            title=_optional_str(data, "title"),
            description=_optional_str(data, "description"),
        )

    def changes(self) -> dict[str, Any]:
        """Column values to write, leaving out fields that were not given."""
        return _changes({"title": self.title, "description": self.description})


@dataclass
class Subject:
    """A subject that users are enrolled in."""

    subject_id: str | None
    subject_name: str | None
    editor_role_id: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Subject:
        return cls(
            subject_id=row["subject_id"],
            subject_name=row["subject_name"],
            editor_role_id=row["editor_role_id"],
        )


@dataclass
class SubjectUpdate:
    """A partial change to a subject."""

    subject_name: str | None = None
    editor_role_id: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> SubjectUpdate:
        data = _require_mapping(data)
        return cls(
            subject_name=_optional_str(data, "subject_name"),
            editor_role_id=_optional_str(data, "editor_role_id"),
        )

    def changes(self) -> dict[str, Any]:
        """Column values to write, leaving out fields that were not given."""
        return _changes(
            {"subject_name": self.subject_name, "editor_role_id": self.editor_role_id}
        )


@dataclass
class Solution:
    """A submitted solution.

    Only the id and the data travel as JSON; grading and dates are kept
    on the server side.
    """

    solution_id: str | None = None
    grade: float | None = None
    submission_date: datetime | None = None
    solution_data: bytes | None = None
    reviewed_by: str | None = None
    review_date: datetime | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Solution:
        return cls(
            solution_id=row["solution_id"],
            grade=_row_float(row["grade"]),
            submission_date=_parse_datetime(row["submission_date"], "submission_date"),
            solution_data=_row_bytes(row["solution_data"]),
            reviewed_by=row["reviewed_by"],
            review_date=_parse_datetime(row["review_date"], "review_date"),
        )

    @classmethod
    def from_dict(cls, data: Any) -> Solution:
        data = _require_mapping(data)
        if "solution_data" not in data:
            raise ValueError("missing field 'solution_data'")
        return cls(
            solution_id=_optional_str(data, "solution_id"),
            solution_data=_json_bytes(data["solution_data"], "solution_data"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "solution_id": self.solution_id,
            "solution_data": None if self.solution_data is None else list(self.solution_data),
        }


@dataclass
class SessionRefreshKeys:
    """A stored session key and its refresh limits."""

    refresh_key_id: str | None
    user_id: str
    expiration_time: datetime | None = None
    refresh_count: int | None = None
    refresh_limit: int | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> SessionRefreshKeys:
        return cls(
            refresh_key_id=row["refresh_key_id"],
            user_id=row["user_id"],
            expiration_time=_parse_datetime(row["expiration_time"], "expiration_time"),
            refresh_count=row["refresh_count"],
            refresh_limit=row["refresh_limit"],
        )