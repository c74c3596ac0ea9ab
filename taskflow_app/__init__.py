"""
TaskFlow Flask application factory.

TaskFlow is a thin server-rendered front end over a hosted auth/data
backend: it serves Jinja pages, keeps the backend-issued session in a
signed cookie, and forwards every sign-in and task change to the backend
over HTTP. It never touches a database directly.

Key Concepts Demonstrated:
- Application factory pattern (``create_app``)
- Backend-for-Frontend (BFF) architecture
- Blueprint-based route registration
- Injectable backend client for testing
"""

from __future__ import annotations

import logging

from flask import Flask

from config import get_config, load_jwt_secret

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(config_name: str | None = None, backend=None) -> Flask:
    """
    Create and configure the TaskFlow application.

    Args:
        config_name: Configuration environment name (``"development"``,
            ``"testing"``, ``"production"``). When *None*, the value is
            read from the ``FLASK_ENV`` environment variable.
        backend: Backend client to use instead of the configured
            :class:`~taskflow_app.backend.SupabaseBackend`.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__, instance_relative_config=True)
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    app.config["SUPABASE_JWT_SECRET"] = load_jwt_secret(testing=bool(app.config.get("TESTING")))

    logger.info("Creating TaskFlow app with config: %s", config_class.__name__)

    # Import inside the factory to avoid circular imports -- the route and
    # gate modules reference helpers from this package, which must exist first.
    from . import session_gate
    from .backend import EXTENSION_KEY, SupabaseBackend
    from .routes.auth import auth_bp
    from .routes.tasks import tasks_bp
    from .task_list import format_due_date

    if backend is None:
        backend = SupabaseBackend(
            app.config["SUPABASE_URL"],
            app.config["SUPABASE_ANON_KEY"],
            timeout=app.config["BACKEND_TIMEOUT"],
            tasks_table=app.config["TASKS_TABLE"],
        )
    app.extensions[EXTENSION_KEY] = backend
    session_gate.init_app(app)

    app.add_template_filter(format_due_date, "due_date")
    app.register_blueprint(auth_bp)
    app.register_blueprint(tasks_bp)
    return app
