"""
Shared pytest fixtures for the TaskFlow test suite.

The application never talks to a real backend under test: every app is
built with a ``FakeBackend`` injected through ``create_app``. Fixtures
follow the Arrange-Act-Assert (AAA) pattern and give each test a fresh
backend, app and client so no state leaks between tests.

Key Concepts Demonstrated:
- Fixture dependencies (backend -> app -> client -> signed_in_client)
- Environment variable overrides before importing the app
- Test data factories with Faker
"""

from __future__ import annotations

import os

import pytest
from faker import Faker

from tests.helpers import TEST_EMAIL, TEST_JWT_SECRET, TEST_PASSWORD

# Set testing environment before importing app
os.environ["FLASK_ENV"] = "testing"
os.environ["TEST_SUPABASE_JWT_SECRET"] = TEST_JWT_SECRET

from taskflow_app import create_app
from taskflow_app.models import TaskStatus
from taskflow_app.session_gate import SESSION_KEY, off_session_change, on_session_change

from tests.fakes import FakeBackend

fake = Faker()


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def backend():
    """Provide an empty in-memory backend for one test."""
    return FakeBackend()


@pytest.fixture
def app(backend):
    """Create a testing app wired to the fake backend."""
    application = create_app("testing", backend=backend)
    yield application


@pytest.fixture
def client(app):
    """
    Provide a Flask test client scoped to a single test function.

    Opens a new test-client context for every test so that request
    state (cookies, sessions) never leaks between tests.
    """
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def user_id(backend):
    """Register the demo user and return their id."""
    return backend.add_user(TEST_EMAIL, TEST_PASSWORD, full_name="Demo User")


@pytest.fixture
def signed_in_client(client, backend, user_id):
    """Test client whose session cookie already holds a valid backend session."""
    auth_session = backend.issue_session(user_id, TEST_EMAIL)
    with client.session_transaction() as sess:
        sess[SESSION_KEY] = auth_session.to_dict()
    return client


@pytest.fixture
def session_events():
    """Record every session-change event as ``(event, user_id)`` for one test."""
    received = []

    def _spy(sender, event, user_id):
        received.append((event, user_id))

    on_session_change(_spy)
    yield received
    off_session_change(_spy)


# -----------------------------------------------------------------------------
# Test Data Factory Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def task_factory(backend, user_id):
    """
    Factory fixture for seeding task rows owned by the demo user.

    Example:
        def test_something(task_factory):
            row = task_factory(title="My Task", status="done")
            assert row["id"]
    """

    def _create_task(**overrides):
        fields = {
            "title": fake.sentence(nb_words=4).rstrip("."),
            "description": fake.paragraph(nb_sentences=2),
            "status": TaskStatus.TODO.value,
            "due_date": fake.date_between(start_date="-30d", end_date="+30d").isoformat(),
        }
        fields.update(overrides)
        return backend.seed_task(user_id, **fields)

    return _create_task
