"""Test helper functions shared across the unit and integration suites."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

TEST_JWT_SECRET = "test-jwt-secret-with-at-least-32-bytes!!"
DEFAULT_TEST_USER_ID = "0b7c2f1e-5d3a-4c1b-9e8f-1a2b3c4d5e6f"
DEFAULT_TEST_EMAIL = "test_user@example.com"
TEST_EMAIL = "demo@example.com"
TEST_PASSWORD = "correct-horse"


def create_test_token(
    user_id: str = DEFAULT_TEST_USER_ID,
    email: str = DEFAULT_TEST_EMAIL,
    secret: str = TEST_JWT_SECRET,
    expired: bool = False,
    audience: str = "authenticated",
) -> str:
    """Create an HS256 access token shaped like the backend's."""
    now = datetime.now(timezone.utc)
    expiry_time = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload: dict[str, Any] = {
        "sub": user_id,
        "email": email,
        "aud": audience,
        "role": "authenticated",
        "iat": int(now.timestamp()),
        "exp": int(expiry_time.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


class FakeResponse:
    """
    Minimal stand-in for :class:`requests.Response`.

    Provides just enough interface (``status_code`` and ``json()``) for
    the backend client, which only inspects these two attributes.
    """

    def __init__(self, status_code: int, payload: Any = None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        """Return the pre-configured JSON payload, or fail like a non-JSON body."""
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload
