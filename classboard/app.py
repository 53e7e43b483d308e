"""The HTTP application: routes, error handling, CORS and the command entry point."""

from __future__ import annotations

import argparse
import functools
import json
import threading
from collections.abc import Callable
from http import HTTPStatus
from typing import Any

from flask import Blueprint, Flask, Response, current_app, jsonify, request

from classboard import db as _db
from classboard.accounts import get_account, update_account
from classboard.assignments import create_assignment, get_assignment, update_assignment
from classboard.models import Assignment, AssignmentUpdate, Solution, UserUpdate
from classboard.session import SESSION_COOKIE, Session, SessionError, load_session
from classboard.solutions import get_latest_solution, submit_solution
from classboard.subjects import get_subject, list_subjects

API_PREFIX = "/api"
CORS_ALLOWED_METHODS = ("POST", "OPTIONS")
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

_EXTENSION = "classboard"

# (method, path, tag, operation id) for every endpoint, used for the OpenAPI document.
_OPERATIONS: tuple[tuple[str, str, str, str], ...] = (
    ("get", "/assignments/{assignment_id}/solution", "Assignments", "assignment_solution_get"),
    ("get", "/account", "Account", "account_get"),
    ("put", "/account", "Account", "account_put"),
    ("get", "/subjects/{subject_id}", "Account", "subject_get"),
    ("get", "/subjects", "Account", "subjects_get"),
    ("get", "/assignments/{assignment_id}", "Account", "assignment_get"),
    ("post", "/assignments/{assignment_id}/solution", "Account", "assignment_solution_post"),
    ("post", "/assignments", "Account", "assignments_post"),
    ("put", "/assignments/{assignment_id}", "Account", "assignment_put"),
)


class _InvalidBody(Exception):
    """The request body is not the JSON the endpoint expects."""


def _status_response(status: HTTPStatus) -> Response:
    return Response(status.phrase, status=status.value, mimetype="text/plain")


def _empty_ok() -> Response:
    return Response("", status=HTTPStatus.OK.value)


def _body(model: Any) -> Any:
    try:
        return model.from_dict(json.loads(request.get_data(as_text=True)))
    except ValueError as exc:
        raise _InvalidBody from exc


def _endpoint(view: Callable[..., Any]) -> Callable[..., Any]:
    """Resolve the session, run the view under the database lock and map errors."""

    @functools.wraps(view)
    def wrapper(**kwargs: Any) -> Any:
        conn, lock = current_app.extensions[_EXTENSION]
        with lock:
            try:
                session = load_session(conn, request.cookies.get(SESSION_COOKIE))
            except SessionError as exc:
                return _status_response(exc.status)
            try:
                return view(conn, session, **kwargs)
            except _InvalidBody:
                return _status_response(HTTPStatus.UNPROCESSABLE_ENTITY)
            except _db.ApiError as exc:
                return jsonify(exc.message), HTTPStatus.BAD_REQUEST.value

    return wrapper


def _openapi_spec() -> dict[str, Any]:
    paths: dict[str, dict[str, Any]] = {}
    for method, path, tag, operation_id in _OPERATIONS:
        parameters = [
            {"name": segment[1:-1], "in": "path", "required": True, "schema": {"type": "string"}}
            for segment in path.split("/")
            if segment.startswith("{") and segment.endswith("}")
        ]
        operation: dict[str, Any] = {
            "tags": [tag],
            "operationId": operation_id,
            "responses": {
                "200": {"description": "Success"},
                "400": {"description": "Bad request", "content": {
                    "application/json": {"schema": {"type": "string"}}}},
            },
        }
        if parameters:
            operation["parameters"] = parameters
        paths.setdefault(path, {})[method] = operation
    return {
        "openapi": "3.0.0",
        "info": {"title": "classboard", "version": "0.1.0"},
        "servers": [{"url": API_PREFIX}],
        "paths": paths,
    }


def _build_api() -> Blueprint:
    api = Blueprint("api", __name__, url_prefix=API_PREFIX)
    no_options = {"provide_automatic_options": False}

    @api.get("/openapi.json", **no_options)
    def openapi() -> Any:
        return jsonify(_openapi_spec())

    @api.get("/assignments/<assignment_id>/solution", **no_options)
    @_endpoint
    def assignment_solution_get(conn: Any, session: Session, assignment_id: str) -> Any:
        return jsonify(get_latest_solution(conn, session.user_id, assignment_id).to_dict())

    @api.get("/account", **no_options)
    @_endpoint
    def account_get(conn: Any, session: Session) -> Any:
        return jsonify(get_account(conn, session.user_id).to_dict())

    @api.put("/account", **no_options)
    @_endpoint
    def account_put(conn: Any, session: Session) -> Any:
        update_account(conn, session.user_id, _body(UserUpdate))
        return _empty_ok()

    @api.get("/subjects/<subject_id>", **no_options)
    @_endpoint
    def subject_get(conn: Any, session: Session, subject_id: str) -> Any:
        return jsonify(get_subject(conn, session.user_id, subject_id).to_dict())

    @api.get("/subjects", **no_options)
    @_endpoint
    def subjects_get(conn: Any, session: Session) -> Any:
        return jsonify([summary.to_dict() for summary in list_subjects(conn, session.user_id)])

    @api.get("/assignments/<assignment_id>", **no_options)
    @_endpoint
    def assignment_get(conn: Any, session: Session, assignment_id: str) -> Any:
        return jsonify(get_assignment(conn, session.user_id, assignment_id).to_dict())

    @api.post("/assignments/<assignment_id>/solution", **no_options)
    @_endpoint
    def assignment_solution_post(conn: Any, session: Session, assignment_id: str) -> Any:
        submit_solution(conn, session.user_id, assignment_id, _body(Solution))
        return _empty_ok()

    @api.post("/assignments", **no_options)
    @_endpoint
    def assignments_post(conn: Any, session: Session) -> Any:
        create_assignment(conn, session.user_id, _body(Assignment))
        return _empty_ok()

    @api.put("/assignments/<assignment_id>", **no_options)
    @_endpoint
    def assignment_put(conn: Any, session: Session, assignment_id: str) -> Any:
        update_assignment(conn, session.user_id, assignment_id, _body(AssignmentUpdate))
        return _empty_ok()

    return api


def _is_preflight() -> bool:
    return (
        request.method == "OPTIONS"
        and "Origin" in request.headers
        and "Access-Control-Request-Method" in request.headers
    )


def create_app(database_url: str | None = None) -> Flask:
    """Build the application on the given database, or on DATABASE_URL if none is given."""
    url = database_url if database_url is not None else _db.database_url()
    conn = _db.connect(url)

    app = Flask(__name__, static_folder=None)
    app.extensions[_EXTENSION] = (conn, threading.Lock())
    app.register_blueprint(_build_api())

    def not_found(_error: Exception) -> Response:
        uri = request.path
        if request.query_string:
            uri += "?" + request.query_string.decode("utf-8", "replace")
        return Response(
            f"The route '{uri}' was not found.",
            status=HTTPStatus.NOT_FOUND.value,
            mimetype="text/plain",
        )

    app.register_error_handler(HTTPStatus.NOT_FOUND.value, not_found)
    app.register_error_handler(HTTPStatus.METHOD_NOT_ALLOWED.value, not_found)

    @app.before_request
    def preflight() -> Response | None:
        if not _is_preflight():
            return None
        wanted = request.headers["Access-Control-Request-Method"].strip().upper()
        if wanted not in CORS_ALLOWED_METHODS:
            return _status_response(HTTPStatus.FORBIDDEN)
        response = Response("", status=HTTPStatus.NO_CONTENT.value)
        response.headers["Access-Control-Allow-Methods"] = ", ".join(CORS_ALLOWED_METHODS)
        requested_headers = request.headers.get("Access-Control-Request-Headers")
        if requested_headers:
            response.headers["Access-Control-Allow-Headers"] = requested_headers
        return response

    @app.after_request
    def cors_headers(response: Response) -> Response:
        origin = request.headers.get("Origin")
        if origin is not None:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.vary.add("Origin")
        return response

    return app


def main(argv: list[str] | None = None) -> int:
    """Start the HTTP server."""
    parser = argparse.ArgumentParser(prog="classboard", description="Course board HTTP server.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    parser.add_argument(
        "--database-url", default=None, help="SQLite database (default: DATABASE_URL)"
    )
    args = parser.parse_args(argv)
    app = create_app(args.database_url)
    app.run(host=args.host, port=args.port)
    return 0