"""
HTTP client for the hosted auth/data backend.

TaskFlow owns no database. Accounts, sessions and task rows live in a hosted
backend-as-a-service exposing two REST surfaces:

- an auth API under ``/auth/v1`` (sign-up, password sign-in, token refresh,
  sign-out), which issues HS256 JWT access tokens plus refresh tokens;
- a data API under ``/rest/v1`` (PostgREST-style filters such as
  ``user_id=eq.<id>`` and ``order=created_at.desc``) guarded by row-level
  security, so every data call carries the user's access token.

Every call is attempted exactly once with the configured timeout. Failures of
any kind (HTTP error status, timeout, connection error) are raised as
``BackendError`` carrying a human-readable message that the views flash to
the user verbatim.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests
from flask import current_app

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "Backend timed out. Please try again."
UNAVAILABLE_MESSAGE = "Backend unavailable. Please try again later."
NOT_FOUND_MESSAGE = "Task not found"

# Keys the auth and data APIs use for their error text, most specific first.
_ERROR_MESSAGE_KEYS = ("msg", "message", "error_description", "error")


class BackendError(Exception):
    """A backend call failed; ``message`` is safe to show to the user."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthError(BackendError):
    """The auth API rejected the request (bad credentials, duplicate user, ...)."""


@dataclass(frozen=True)
class AuthSession:
    """
    Tokens and identity returned by a successful sign-in.

    Attributes:
        access_token: Short-lived JWT sent as the bearer token on data calls.
        refresh_token: Long-lived token exchanged for a new access token.
        user_id: The authenticated user's id (the JWT ``sub`` claim).
        email: The user's email address.
        expires_at: Access-token expiry as epoch seconds, if reported.
    """

    access_token: str
    refresh_token: str
    user_id: str
    email: str
    expires_at: int | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "AuthSession":
        """Build a session from an auth API token response."""
        user = payload.get("user") or {}
        return cls(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token", ""),
            user_id=str(user.get("id", "")),
            email=user.get("email", ""),
            expires_at=payload.get("expires_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise for storage in the Flask session cookie."""
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "user_id": self.user_id,
            "email": self.email,
            "expires_at": self.expires_at,
        }


def _response_error_message(response: requests.Response, default: str) -> str:
    """
    Extract an error message from a JSON API response if possible.

    Args:
        response: The :class:`requests.Response` from a backend call.
        default: Fallback message returned when extraction fails.

    Returns:
        The extracted error string, or *default*.
    """
    try:
        payload = response.json()
    except ValueError:
        return default
    if not isinstance(payload, dict):
        return default
    for key in _ERROR_MESSAGE_KEYS:
        message = payload.get(key)
        if isinstance(message, str) and message.strip():
            return message
    return default


class SupabaseBackend:
    """
    Client for the hosted backend's auth and data APIs.

    Args:
        base_url: Project URL, e.g. ``https://xyz.supabase.co``.
        anon_key: Public API key sent as ``apikey`` on every request.
        timeout: Per-request timeout in seconds.
        tasks_table: Name of the table holding task rows.
    """

    def __init__(self, base_url: str, anon_key: str, timeout: int = 5, tasks_table: str = "tasks"):
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.tasks_table = tasks_table

    # -----------------------------------------------------------------
    # Transport
    # -----------------------------------------------------------------

    def _url(self, path: str) -> str:
        """
        Build an absolute backend URL.

        Args:
            path: API path, with or without a leading slash.

        Returns:
            The path joined onto the project URL.
        """
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        """
        Build request headers for the backend.

        Args:
            access_token: User access token. When omitted, the anon key is
                sent as the bearer token.

        Returns:
            Header dict with the API key, authorization and JSON content type.
        """
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {access_token or self.anon_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _request(
        self,
        method: str,
        path: str,
        *,
        access_token: str | None = None,
        default_error: str,
        error_class: type[BackendError] = BackendError,
        **kwargs,
    ) -> requests.Response:
        """
        Send one request and raise ``error_class`` on any failure.

        Args:
            method: HTTP method.
            path: Path relative to the project URL.
            access_token: User access token; the anon key is used when omitted.
            default_error: Message used when the response carries none.
            error_class: Exception type raised for HTTP error statuses.
            **kwargs: Forwarded to :func:`requests.request`.

        Returns:
            The successful :class:`requests.Response`.
        """
        extra_headers = kwargs.pop("headers", {})
        headers = {**self._headers(access_token), **extra_headers}
        try:
            response = requests.request(
                method=method,
                url=self._url(path),
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            logger.warning("%s %s timed out", method, path)
            raise BackendError(TIMEOUT_MESSAGE) from exc
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise BackendError(UNAVAILABLE_MESSAGE) from exc

        if response.status_code >= 400:
            message = _response_error_message(response, default_error)
            logger.warning("%s %s rejected with %s: %s", method, path, response.status_code, message)
            raise error_class(message, status_code=response.status_code)
        return response

    # -----------------------------------------------------------------
    # Auth API
    # -----------------------------------------------------------------

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Exchange email + password for a session."""
        logger.info("Signing in %s", email)
        response = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            default_error="Invalid login credentials",
            error_class=AuthError,
        )
        return AuthSession.from_payload(response.json())

    def sign_up(self, email: str, password: str, full_name: str) -> AuthSession | None:
        """
        Register a new account.

        Returns:
            The new session when the project auto-confirms sign-ups, or
            ``None`` when the user must confirm their email first.
        """
        logger.info("Signing up %s", email)
        response = self._request(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": {"full_name": full_name}},
            default_error="Sign up failed",
            error_class=AuthError,
        )
        payload = response.json()
        if payload.get("access_token"):
            return AuthSession.from_payload(payload)
        return None

    def refresh_session(self, refresh_token: str) -> AuthSession:
        """Exchange a refresh token for a fresh session."""
        response = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
            default_error="Session expired",
            error_class=AuthError,
        )
        return AuthSession.from_payload(response.json())

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind ``access_token``."""
        self._request(
            "POST",
            "/auth/v1/logout",
            access_token=access_token,
            default_error="Sign out failed",
            error_class=AuthError,
        )

    # -----------------------------------------------------------------
    # Data API
    # -----------------------------------------------------------------

    def _table_path(self) -> str:
        """Data API path of the tasks table."""
        return f"/rest/v1/{self.tasks_table}"

    def list_tasks(self, access_token: str, user_id: str) -> list[dict[str, Any]]:
        """Return the user's task rows, newest first."""
        response = self._request(
            "GET",
            self._table_path(),
            access_token=access_token,
            params={
                "select": "*",
                "user_id": f"eq.{user_id}",
                "order": "created_at.desc",
            },
            default_error="Error loading tasks",
        )
        rows = response.json()
        logger.info("Fetched %d tasks for user %s", len(rows), user_id)
        return rows

    def insert_task(self, access_token: str, record: dict[str, Any]) -> dict[str, Any]:
        """Insert a row and return it with its backend-assigned id."""
        response = self._request(
            "POST",
            self._table_path(),
            access_token=access_token,
            json=record,
            headers={"Prefer": "return=representation"},
            default_error="Error creating task",
        )
        rows = response.json()
        if not rows:
            raise BackendError("Error creating task", status_code=response.status_code)
        logger.info("Inserted task %s", rows[0].get("id"))
        return rows[0]

    def update_task(self, access_token: str, task_id: str, fields: dict[str, Any]) -> None:
        """Overwrite ``fields`` on the row with ``task_id``."""
        response = self._request(
            "PATCH",
            self._table_path(),
            access_token=access_token,
            params={"id": f"eq.{task_id}"},
            json=fields,
            headers={"Prefer": "return=representation"},
            default_error="Error updating task",
        )
        if not response.json():
            # Row-level security hides other users' rows, so "not yours"
            # and "gone" look the same: zero rows affected.
            raise BackendError(NOT_FOUND_MESSAGE, status_code=404)
        logger.info("Updated task %s", task_id)

    def delete_task(self, access_token: str, task_id: str) -> None:
        """Delete the row with ``task_id``."""
        response = self._request(
            "DELETE",
            self._table_path(),
            access_token=access_token,
            params={"id": f"eq.{task_id}"},
            headers={"Prefer": "return=representation"},
            default_error="Error deleting task",
        )
        if not response.json():
            raise BackendError(NOT_FOUND_MESSAGE, status_code=404)
        logger.info("Deleted task %s", task_id)


EXTENSION_KEY = "taskflow_backend"


def get_backend() -> SupabaseBackend:
    """Return the backend client registered on the current app."""
    return current_app.extensions[EXTENSION_KEY]
