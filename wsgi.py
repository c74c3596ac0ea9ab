"""WSGI entry point for TaskFlow."""

import os

from taskflow_app import create_app

app = create_app(os.getenv("FLASK_ENV", "production"))
