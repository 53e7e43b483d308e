# classboard

classboard is a small JSON API for subjects, assignments and the solutions
that students submit. It keeps all of its data in one SQLite database. The
HTTP layer is a Flask application. Each request handler is also a plain
function that you can call with an open SQLite connection.

## Installation

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Running the server

```
classboard [--host HOST] [--port PORT] [--database-url URL]
```

The server listens on `127.0.0.1:8000` by default. It runs on Flask's
built-in server.

If `--database-url` is not given, the database location comes from the
`DATABASE_URL` environment variable. That variable can also be set in a
`.env` file in the working directory:

```
DATABASE_URL=classboard.sqlite3
```

If neither is set, the server stops with the error `DATABASE_URL must be set`.
The value is passed to SQLite as a file name. A value that starts with
`file:` is opened as an SQLite URI. Any tables that are missing are created
when the database is opened.

## Sessions

Every endpoint under `/api` needs a `session_id` cookie, except
`/api/openapi.json`. The cookie's value must match `refresh_key_id` in a row
of the `session_refresh_keys` table. The `user_id` of that row is the caller.
The server responds as follows:

- A request without the cookie gets `401`.
- A cookie that matches no row gets `500`.

Expiration time and refresh limits are stored but never checked.

## Endpoints

All routes are under `/api`.

| Method | Path | Result |
|--------|------|--------|
| GET  | `/api/account` | The caller's user record |
| PUT  | `/api/account` | Updates the fields given in the body of the caller's user record |
| GET  | `/api/subjects` | `[{"subject_id", "subject_name"}]` for every subject the caller belongs to |
| GET  | `/api/subjects/<subject_id>` | `{"subject_name": "", "assignments": [...]}` for one of the caller's subjects |
| POST | `/api/assignments` | Creates an assignment. The caller must hold role `"0"` (admin) in `user_subjects` |
| GET  | `/api/assignments/<assignment_id>` | An assignment linked to the caller via `user_solution_assignments` |
| PUT  | `/api/assignments/<assignment_id>` | Updates title or description. The caller must hold the subject's editor role |
| GET  | `/api/assignments/<assignment_id>/solution` | The caller's most recently submitted solution |
| POST | `/api/assignments/<assignment_id>/solution` | Stores a solution with a new UUID and the current UTC time |
| GET  | `/api/openapi.json` | An OpenAPI 3.0 description of the endpoints above |

### Solutions as JSON

A solution is sent and returned as `{"solution_id": ..., "solution_data": [...]}`.
The `solution_data` field holds a list of byte values. When you submit a
solution, `solution_data` is required. It may be a list of integers from 0 to
255, or a string, which is stored UTF-8 encoded.

### Errors

- A failed request returns `400`. The body is a JSON string, for example
  `"User is not admin"`. The string may be empty.
- A request body that is not valid JSON of the expected shape returns `422`.
- An unknown route, or a known route with the wrong method, returns `404`
  with the text `The route '<path>' was not found.`

### CORS

- A request that carries an `Origin` header gets that origin back in
  `Access-Control-Allow-Origin`.
- A preflight `OPTIONS` request is answered with `204` if the requested
  method is `POST` or `OPTIONS`, and with `403` for any other method.

## Using it as a library

```python
from classboard.db import connect
from classboard.subjects import list_subjects

conn = connect("classboard.sqlite3")
for subject in list_subjects(conn, "user-1"):
    print(subject.to_dict())
```

The package is made of these modules:

- `classboard.db`: `connect` and `database_url`.
- `classboard.schema`: `create_schema` and `table_names`.
- `classboard.models`: the record dataclasses.
- `classboard.session`: `load_session`.
- `classboard.accounts`: `get_account` and `update_account`.
- `classboard.assignments`: `get_assignment`, `update_assignment` and
  `create_assignment`.
- `classboard.solutions`: `get_latest_solution` and `submit_solution`.
- `classboard.subjects`: `get_subject` and `list_subjects`.

When a handler fails, it raises `classboard.db.ApiError`. A missing or
unknown session raises `classboard.session.SessionError`, which carries the
HTTP status to send.

`classboard.app.create_app(database_url=None)` returns the Flask application.

## What it does not do

- There are no endpoints for logging in or out. Nothing creates rows in
  `session_refresh_keys`, so you have to insert sessions into the database
  yourself.
- Subjects cannot be created or changed through the API.
- The subject detail endpoint always returns an empty `subject_name`.
- There is no Swagger UI page. Only the OpenAPI JSON document is served.