"""
Authentication routes: login, signup and logout.

Each form runs its local checks first; only a submission that passes them
reaches the backend. Outcomes are reported with flash messages, and the
backend's own error text is shown as-is when it rejects a request.

Routes:
    GET  /health                   - Health check
    GET  /login                    - Login page
    POST /login                    - Login form submission
    GET  /signup                   - Signup page
    POST /signup                   - Signup form submission
    POST /signup/password-strength - Strength meter value for a password
    POST /logout                   - End the session
"""

from __future__ import annotations

import logging
import os

from flask import Blueprint, flash, jsonify, redirect, render_template, request, url_for

from ..auth_forms import password_strength, validate_login, validate_signup
from ..backend import AuthError, BackendError, get_backend
from ..session_gate import anonymous_only, emit_session_change, get_session, store_session

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def _failure_status(error: BackendError, rejected_status: int) -> int:
    """HTTP status for a failed auth call: rejection vs. unreachable backend."""
    return rejected_status if isinstance(error, AuthError) else 503


@auth_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint for deployment verification."""
    return jsonify({
        "status": "healthy",
        "service": "taskflow",
        "environment": os.getenv("ENVIRONMENT", "unknown"),
        "version": os.getenv("APP_VERSION", "unknown"),
    }), 200


@auth_bp.route("/login", methods=["GET"])
@anonymous_only
def login():
    """Render the login page."""
    return render_template("login.html", email="")


@auth_bp.route("/login", methods=["POST"])
@anonymous_only
def login_submit():
    """
    Handle login form submission.

    Both fields must be non-empty; otherwise the form is rejected without
    contacting the backend. A successful sign-in stores the session and
    redirects to the task list.
    """
    email = request.form.get("email", "").strip()
    password = request.form.get("password", "")

    is_valid, error = validate_login(email, password)
    if not is_valid:
        logger.warning("Login rejected locally: %s", error)
        flash(f"Login failed: {error}", "error")
        return render_template("login.html", email=email), 400

    try:
        auth_session = get_backend().sign_in(email, password)
    except BackendError as error:
        flash(f"Login failed: {error.message}", "error")
        return render_template("login.html", email=email), _failure_status(error, 401)

    store_session(auth_session)
    emit_session_change("signed_in", auth_session.user_id)
    flash("Login successful! Welcome back to TaskFlow", "success")
    return redirect(url_for("tasks.index"))


@auth_bp.route("/signup", methods=["GET"])
@anonymous_only
def signup():
    """Render the signup page."""
    return render_template(
        "signup.html", full_name="", email="", strength=password_strength("")
    )


@auth_bp.route("/signup", methods=["POST"])
@anonymous_only
def signup_submit():
    """
    Handle signup form submission.

    Requires all three fields and a password of at least six characters
    before calling the backend. When the backend auto-confirms the account
    the returned session is stored; either way the user is sent to the
    task list, where the session gate decides what they see.
    """
    full_name = request.form.get("full_name", "").strip()
    email = request.form.get("email", "").strip()
    password = request.form.get("password", "")

    def _rerender(status_code: int):
        return render_template(
            "signup.html",
            full_name=full_name,
            email=email,
            strength=password_strength(password),
        ), status_code

    is_valid, error = validate_signup(full_name, email, password)
    if not is_valid:
        logger.warning("Signup rejected locally: %s", error)
        flash(f"Signup failed: {error}", "error")
        return _rerender(400)

    try:
        auth_session = get_backend().sign_up(email, password, full_name)
    except BackendError as error:
        flash(f"Signup failed: {error.message}", "error")
        return _rerender(_failure_status(error, 400))

    if auth_session is not None:
        store_session(auth_session)
        emit_session_change("signed_in", auth_session.user_id)
    flash("Account created! Welcome to TaskFlow", "success")
    return redirect(url_for("tasks.index"))


@auth_bp.route("/signup/password-strength", methods=["POST"])
def signup_password_strength():
    """Return the strength meter value for the posted password."""
    data = request.get_json(silent=True) or {}
    password = data.get("password", "")
    if not isinstance(password, str):
        return jsonify({"error": "'password' must be a string"}), 400
    strength = password_strength(password)
    return jsonify({"strength": strength.score, "label": strength.label}), 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    """
    Sign out at the backend and clear the local session.

    A failed backend sign-out is logged but does not keep the user signed
    in locally.
    """
    auth_session = get_session()
    user_id = None
    if auth_session is not None:
        user_id = auth_session.user_id
        try:
            get_backend().sign_out(auth_session.access_token)
        except BackendError as error:
            logger.warning("Backend sign-out failed for user %s: %s", user_id, error.message)

    emit_session_change("signed_out", user_id)
    flash("Logged out. Come back soon!", "success")
    return redirect(url_for("auth.login"))
