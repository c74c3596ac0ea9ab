"""
Application configuration module.

This module defines configuration classes for different environments
(development, testing, production). TaskFlow keeps no database of its own:
the values below point the app at the hosted auth/data backend and tune
the session cookie that carries the backend-issued tokens.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent


def _load_secret(raw_env_var: str, path_env_var: str) -> str:
    """Load a secret from direct env content or from a path env variable."""
    raw_secret = os.environ.get(raw_env_var, "").strip()
    if raw_secret:
        return raw_secret

    secret_path = os.environ.get(path_env_var, "").strip()
    if secret_path:
        try:
            return Path(secret_path).read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise RuntimeError(
                f"Unable to read JWT secret file at '{secret_path}' from {path_env_var}."
            ) from exc

    raise RuntimeError(
        f"Missing JWT secret configuration: set {raw_env_var} or {path_env_var}."
    )


def _has_secret_source(raw_env_var: str, path_env_var: str) -> bool:
    """Return True when at least one secret source variable is configured."""
    return bool(
        os.environ.get(raw_env_var, "").strip()
        or os.environ.get(path_env_var, "").strip()
    )


def load_jwt_secret(*, testing: bool) -> str:
    """Resolve the backend's JWT signing secret for the selected environment."""
    if testing and _has_secret_source("TEST_SUPABASE_JWT_SECRET", "TEST_SUPABASE_JWT_SECRET_PATH"):
        return _load_secret("TEST_SUPABASE_JWT_SECRET", "TEST_SUPABASE_JWT_SECRET_PATH")
    return _load_secret("SUPABASE_JWT_SECRET", "SUPABASE_JWT_SECRET_PATH")


class Config:
    """Base configuration with default settings."""

    SECRET_KEY: str = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-production")

    SUPABASE_URL: str = os.environ.get("SUPABASE_URL", "http://localhost:54321")
    SUPABASE_ANON_KEY: str = os.environ.get("SUPABASE_ANON_KEY", "")
    TASKS_TABLE: str = os.environ.get("TASKS_TABLE", "tasks")
    BACKEND_TIMEOUT: int = int(os.environ.get("BACKEND_TIMEOUT", "5"))

    JWT_AUDIENCE: str = os.environ.get("JWT_AUDIENCE", "authenticated")
    JWT_CLOCK_SKEW_SECONDS: int = int(os.environ.get("JWT_CLOCK_SKEW_SECONDS", "30"))

    SESSION_COOKIE_HTTPONLY: bool = True
    SESSION_COOKIE_SAMESITE: str = os.environ.get("SESSION_COOKIE_SAMESITE", "Lax")
    SESSION_COOKIE_SECURE: bool = (
        os.environ.get("SESSION_COOKIE_SECURE", "false").strip().lower() == "true"
    )


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """Testing environment configuration."""

    DEBUG: bool = True
    TESTING: bool = True

    SUPABASE_URL: str = os.environ.get("TEST_SUPABASE_URL", "http://backend.test")
    SUPABASE_ANON_KEY: str = os.environ.get("TEST_SUPABASE_ANON_KEY", "test-anon-key")
    BACKEND_TIMEOUT: int = int(os.environ.get("TEST_BACKEND_TIMEOUT", "1"))


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG: bool = False
    TESTING: bool = False
    SESSION_COOKIE_SECURE: bool = (
        os.environ.get("SESSION_COOKIE_SECURE", "true").strip().lower() == "true"
    )


# Configuration mapping for easy access
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Get the configuration class for the specified environment.

    Args:
        env: Environment name (development, testing, production).
             If None, uses FLASK_ENV environment variable.

    Returns:
        Configuration class for the specified environment.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
