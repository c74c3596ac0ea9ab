"""
Session gate: who is allowed to see which page.

The backend issues an HS256-signed JWT access token and a refresh token at
sign-in. Both are kept in the signed Flask session cookie. On every gated
request the access token is verified locally with PyJWT (signature, expiry,
audience, required claims) so that routing never needs a backend round-trip.
When the access token has lapsed and a refresh token is held, one refresh
is attempted; any failure there means "no session".

Session changes (sign-in, sign-out, token refresh) are published as blinker
signals. ``on_session_change`` subscribes a handler to all three and
``off_session_change`` removes it again.

Key Concepts Demonstrated:
- Local JWT verification with PyJWT
- Decorator-based access control (``login_required`` / ``anonymous_only``)
- Using ``flask.g`` to store request-scoped user identity
- Signals for session lifecycle notifications
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps
from typing import Any

import jwt
from blinker import Namespace
from flask import current_app, g, redirect, session, url_for

from .backend import AuthSession, BackendError, get_backend

logger = logging.getLogger(__name__)

SESSION_KEY = "auth_session"
ALLOWED_ALGORITHMS = ["HS256"]
REQUIRED_TOKEN_CLAIMS = ["sub", "exp"]

_signals = Namespace()
signed_in = _signals.signal("signed-in")
signed_out = _signals.signal("signed-out")
token_refreshed = _signals.signal("token-refreshed")

SESSION_EVENTS = {
    "signed_in": signed_in,
    "signed_out": signed_out,
    "token_refreshed": token_refreshed,
}


def on_session_change(handler: Callable[..., Any]) -> Callable[..., Any]:
    """
    Subscribe ``handler`` to every session event.

    The handler is called as ``handler(sender, event=<name>, user_id=<id>)``
    where ``sender`` is the Flask app. Returns the handler so this can be
    used as a decorator. Handlers stay connected until passed to
    :func:`off_session_change`.
    """
    for signal in SESSION_EVENTS.values():
        signal.connect(handler, weak=False)
    return handler


def off_session_change(handler: Callable[..., Any]) -> None:
    """Unsubscribe ``handler`` from every session event; unknown handlers are ignored."""
    for signal in SESSION_EVENTS.values():
        signal.disconnect(handler)


def emit_session_change(event: str, user_id: str | None) -> None:
    """Publish one session event from inside a request."""
    SESSION_EVENTS[event].send(
        current_app._get_current_object(), event=event, user_id=user_id
    )


def _clear_on_sign_out(sender, event: str, user_id: str | None) -> None:
    """Log every session event and forget the stored session on sign-out."""
    logger.info("Session event %s for user %s", event, user_id)
    if event == "signed_out":
        session.pop(SESSION_KEY, None)


def init_app(app) -> None:
    """Register the gate's own session-change handler."""
    on_session_change(_clear_on_sign_out)


def verify_token(token: str, secret: str) -> dict[str, Any] | None:
    """
    Decode and validate an access token, returning its claims on success.

    Args:
        token: The encoded JWT string to verify.
        secret: The backend's HS256 signing secret.

    Returns:
        The decoded payload dictionary if the token is valid, or ``None``
        if verification fails for any reason.
    """
    try:
        decoded = jwt.decode(
            token,
            secret,
            algorithms=ALLOWED_ALGORITHMS,
            audience=current_app.config.get("JWT_AUDIENCE", "authenticated"),
            options={"require": REQUIRED_TOKEN_CLAIMS},
            leeway=int(current_app.config.get("JWT_CLOCK_SKEW_SECONDS", 30)),
        )
    except jwt.InvalidTokenError:
        return None

    subject = decoded.get("sub")
    if not isinstance(subject, str) or not subject.strip():
        return None
    return decoded


def store_session(auth_session: AuthSession) -> None:
    """Persist the backend session in the signed session cookie."""
    session[SESSION_KEY] = auth_session.to_dict()


def _refresh(stored: dict[str, Any]) -> AuthSession | None:
    """
    Try one token refresh for a stored session whose access token failed.

    Args:
        stored: Session dict as kept in the cookie.

    Returns:
        The refreshed session, already stored, or None when refresh fails.
    """
    refresh_token = stored.get("refresh_token")
    if not refresh_token:
        return None
    try:
        refreshed = get_backend().refresh_session(refresh_token)
    except BackendError as error:
        logger.warning("Session refresh failed: %s", error.message)
        return None
    if verify_token(refreshed.access_token, current_app.config["SUPABASE_JWT_SECRET"]) is None:
        logger.warning("Backend returned an unverifiable access token on refresh")
        return None
    store_session(refreshed)
    emit_session_change("token_refreshed", refreshed.user_id)
    return refreshed


def get_session() -> AuthSession | None:
    """
    Return the current session, or ``None`` when the visitor is anonymous.

    A missing cookie, a token that fails verification and a failed refresh
    are all reported the same way.
    """
    stored = session.get(SESSION_KEY)
    if not isinstance(stored, dict) or not stored.get("access_token"):
        return None

    claims = verify_token(stored["access_token"], current_app.config["SUPABASE_JWT_SECRET"])
    if claims is None:
        return _refresh(stored)

    return AuthSession(
        access_token=stored["access_token"],
        refresh_token=stored.get("refresh_token", ""),
        user_id=claims["sub"],
        email=claims.get("email") or stored.get("email", ""),
        expires_at=claims["exp"],
    )


def login_required(view_func):
    """
    Decorator that requires a valid session for view routes.

    On success the user's id, email and access token are stashed on
    ``g``. On failure stale session state is cleared and the user is
    redirected to the login page.
    """

    @wraps(view_func)
    def wrapper(*args, **kwargs):
        auth_session = get_session()
        if auth_session is None:
            session.pop(SESSION_KEY, None)
            return redirect(url_for("auth.login"))

        g.user_id = auth_session.user_id
        g.user_email = auth_session.email
        g.access_token = auth_session.access_token
        return view_func(*args, **kwargs)

    return wrapper


def anonymous_only(view_func):
    """Decorator that sends already signed-in users to their task list."""

    @wraps(view_func)
    def wrapper(*args, **kwargs):
        if get_session() is not None:
            return redirect(url_for("tasks.index"))
        return view_func(*args, **kwargs)

    return wrapper
