"""
In-memory fake of the hosted auth/data backend.

Implements the same methods as ``SupabaseBackend`` with dictionaries
instead of HTTP. Access tokens are real HS256 JWTs signed with the test
secret, so the session gate verifies them exactly as it would in
production. Every call is recorded in ``calls`` and any method can be made
to fail once with ``fail_next``.
"""

from __future__ import annotations

import itertools
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from taskflow_app.backend import AuthError, AuthSession, BackendError

from tests.helpers import TEST_JWT_SECRET, create_test_token

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeBackend:
    """Dictionary-backed backend with the ``SupabaseBackend`` interface."""

    def __init__(self, secret: str = TEST_JWT_SECRET, auto_confirm: bool = True):
        self.secret = secret
        self.auto_confirm = auto_confirm
        self.users: dict[str, dict[str, str]] = {}
        self.rows: list[dict[str, Any]] = []
        self.refresh_tokens: dict[str, str] = {}
        self.calls: list[tuple[str, tuple]] = []
        self._failures: dict[str, BackendError] = {}
        self._clock = itertools.count(1)

    # -----------------------------------------------------------------
    # Test controls
    # -----------------------------------------------------------------

    def fail_next(self, method: str, error: BackendError) -> None:
        """Make the next call to ``method`` raise ``error``."""
        self._failures[method] = error

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, args))
        error = self._failures.pop(name, None)
        if error is not None:
            raise error

    def add_user(self, email: str, password: str, full_name: str = "Test User") -> str:
        user_id = str(uuid.uuid4())
        self.users[email] = {"id": user_id, "password": password, "full_name": full_name}
        return user_id

    def issue_session(self, user_id: str, email: str, expired: bool = False) -> AuthSession:
        refresh_token = uuid.uuid4().hex
        self.refresh_tokens[refresh_token] = email
        return AuthSession(
            access_token=create_test_token(user_id, email, secret=self.secret, expired=expired),
            refresh_token=refresh_token,
            user_id=user_id,
            email=email,
        )

    def seed_task(self, user_id: str, **fields) -> dict[str, Any]:
        """Insert a row directly, bypassing call recording."""
        row = {
            "id": str(uuid.uuid4()),
            "title": "Seeded task",
            "description": None,
            "status": None,
            "due_date": "2024-06-01",
            **fields,
            "user_id": user_id,
            "created_at": self._timestamp(),
        }
        self.rows.append(row)
        return dict(row)

    def _timestamp(self) -> str:
        return (_EPOCH + timedelta(seconds=next(self._clock))).isoformat()

    def _find(self, task_id: str) -> dict[str, Any] | None:
        for row in self.rows:
            if row["id"] == task_id:
                return row
        return None

    # -----------------------------------------------------------------
    # Auth API
    # -----------------------------------------------------------------

    def sign_in(self, email: str, password: str) -> AuthSession:
        self._record("sign_in", email)
        user = self.users.get(email)
        if user is None or user["password"] != password:
            raise AuthError("Invalid login credentials", status_code=400)
        return self.issue_session(user["id"], email)

    def sign_up(self, email: str, password: str, full_name: str) -> AuthSession | None:
        self._record("sign_up", email, full_name)
        if email in self.users:
            raise AuthError("User already registered", status_code=422)
        user_id = self.add_user(email, password, full_name)
        if not self.auto_confirm:
            return None
        return self.issue_session(user_id, email)

    def refresh_session(self, refresh_token: str) -> AuthSession:
        self._record("refresh_session", refresh_token)
        email = self.refresh_tokens.pop(refresh_token, None)
        if email is None:
            raise AuthError("Invalid Refresh Token: Refresh Token Not Found", status_code=400)
        return self.issue_session(self.users[email]["id"], email)

    def sign_out(self, access_token: str) -> None:
        self._record("sign_out", access_token)

    # -----------------------------------------------------------------
    # Data API
    # -----------------------------------------------------------------

    def list_tasks(self, access_token: str, user_id: str) -> list[dict[str, Any]]:
        self._record("list_tasks", user_id)
        rows = [dict(row) for row in self.rows if row["user_id"] == user_id]
        return sorted(rows, key=lambda row: row["created_at"], reverse=True)

    def insert_task(self, access_token: str, record: dict[str, Any]) -> dict[str, Any]:
        self._record("insert_task", dict(record))
        row = {**record, "id": str(uuid.uuid4()), "created_at": self._timestamp()}
        self.rows.append(row)
        return dict(row)

    def update_task(self, access_token: str, task_id: str, fields: dict[str, Any]) -> None:
        self._record("update_task", task_id, dict(fields))
        row = self._find(task_id)
        if row is None:
            raise BackendError("Task not found", status_code=404)
        row.update(fields)

    def delete_task(self, access_token: str, task_id: str) -> None:
        self._record("delete_task", task_id)
        row = self._find(task_id)
        if row is None:
            raise BackendError("Task not found", status_code=404)
        self.rows.remove(row)
