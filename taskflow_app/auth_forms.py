"""
Local checks for the login and signup forms.

These run before any backend call. A failing check blocks the submission;
everything beyond "required fields present" and the signup minimum
password length is left to the backend.
"""

from __future__ import annotations

from typing import NamedTuple

MIN_PASSWORD_LENGTH = 6


class PasswordStrength(NamedTuple):
    """Meter value (0-100) and label shown under the signup password field."""

    score: int
    label: str


def password_strength(password: str) -> PasswordStrength:
    """
    Classify a password by length for the signup strength meter.

    This is a UI hint only; the length gate in ``validate_signup`` is the
    only rule enforced.
    """
    length = len(password)
    if length == 0:
        return PasswordStrength(0, "")
    if length < MIN_PASSWORD_LENGTH:
        return PasswordStrength(25, "Weak")
    if length < 10:
        return PasswordStrength(50, "Fair")
    if length < 14:
        return PasswordStrength(75, "Good")
    return PasswordStrength(100, "Strong")


def validate_login(email: str, password: str) -> tuple[bool, str | None]:
    """
    Validate login form data.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not email or not password:
        return False, "Please enter valid credentials"
    return True, None


def validate_signup(full_name: str, email: str, password: str) -> tuple[bool, str | None]:
    """
    Validate signup form data.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not full_name or not email or not password:
        return False, "Please fill in all fields"
    if len(password) < MIN_PASSWORD_LENGTH:
        return False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return True, None
