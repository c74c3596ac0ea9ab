"""
Unit tests for the login/signup local checks and the password meter.

Key SDET Concepts Demonstrated:
- Boundary value analysis on password length bands
- Parametrized negative testing for required fields
"""

from __future__ import annotations

import pytest

from taskflow_app.auth_forms import (
    PasswordStrength,
    password_strength,
    validate_login,
    validate_signup,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "length, expected",
    [
        (0, PasswordStrength(0, "")),
        (1, PasswordStrength(25, "Weak")),
        (5, PasswordStrength(25, "Weak")),
        (6, PasswordStrength(50, "Fair")),
        (9, PasswordStrength(50, "Fair")),
        (10, PasswordStrength(75, "Good")),
        (13, PasswordStrength(75, "Good")),
        (14, PasswordStrength(100, "Strong")),
        (40, PasswordStrength(100, "Strong")),
    ],
)
def test_password_strength_bands(length, expected):
    """Test each length band boundary of the strength meter."""
    assert password_strength("x" * length) == expected


def test_validate_login_accepts_any_non_empty_pair():
    """Test that login needs nothing beyond two non-empty fields."""
    assert validate_login("a@b.com", "p") == (True, None)


@pytest.mark.parametrize("email, password", [("a@b.com", ""), ("", "secret"), ("", "")])
def test_validate_login_rejects_blank_fields(email, password):
    """Test that a blank email or password blocks the submission."""
    is_valid, error = validate_login(email, password)

    assert is_valid is False
    assert error == "Please enter valid credentials"


@pytest.mark.parametrize(
    "full_name, email, password",
    [("", "a@b.com", "secret1"), ("Ann", "", "secret1"), ("Ann", "a@b.com", "")],
)
def test_validate_signup_requires_all_fields(full_name, email, password):
    """Test that every signup field is required."""
    is_valid, error = validate_signup(full_name, email, password)

    assert is_valid is False
    assert error == "Please fill in all fields"


def test_validate_signup_rejects_five_character_password():
    """Test that a 5-character password is rejected before submission."""
    is_valid, error = validate_signup("Ann", "a@b.com", "12345")

    assert is_valid is False
    assert error == "Password must be at least 6 characters"


def test_validate_signup_accepts_six_character_password():
    """Test that the minimum length itself is accepted."""
    assert validate_signup("Ann", "a@b.com", "123456") == (True, None)
