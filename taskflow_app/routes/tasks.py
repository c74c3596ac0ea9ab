"""
Task list routes.

The list page is the only task page. The create/edit modal is the same
page rendered with an open ``TaskEditor``; its single submit route
decides between create and update from the editor's hidden
``editing_id`` field.

Every route here sits behind ``login_required``. Each request builds a
fresh ``TaskStore`` for the signed-in user, so changes are only ever
applied after the backend confirms them.

Routes:
    GET  /                        - Redirect to the task list
    GET  /tasks                   - Task list (``?status=`` filter)
    GET  /tasks/new               - Task list with the editor open for a new task
    GET  /tasks/<task_id>/edit    - Task list with the editor open on a task
    POST /tasks/save              - Editor submission (create or update)
    POST /tasks/<task_id>/delete  - Delete a task
"""

from __future__ import annotations

import logging

from flask import Blueprint, flash, g, redirect, render_template, request, session, url_for

from ..backend import BackendError, get_backend
from ..models import TaskStatus
from ..session_gate import SESSION_KEY, login_required
from ..task_editor import TaskEditor
from ..task_list import FILTER_ALL, FILTER_OPTIONS, filter_tasks, normalize_filter, status_presentation
from ..task_store import TaskStore

logger = logging.getLogger(__name__)

tasks_bp = Blueprint("tasks", __name__)


# =====================================================================
# Helper Functions
# =====================================================================


def _store() -> TaskStore:
    """Task store for the signed-in user."""
    return TaskStore(get_backend(), g.access_token, g.user_id)


def _current_filter() -> str:
    """Status filter from the ``status`` query parameter; unknown values mean ``all``."""
    return normalize_filter(request.args.get("status"))


def _submitted_filter() -> str:
    """Filter carried through a form post as the hidden ``filter`` field."""
    return normalize_filter(request.form.get("filter"))


def _index_url(status_filter: str):
    """
    Build the task list URL for a filter.

    Args:
        status_filter: Normalized filter value.

    Returns:
        ``/tasks`` for ``all``, otherwise ``/tasks?status=<filter>``.
    """
    if status_filter == FILTER_ALL:
        return url_for("tasks.index")
    return url_for("tasks.index", status=status_filter)


def _session_expired():
    """
    Drop the stored session after the backend rejected its token.

    Returns:
        Redirect to the login page with an "expired" flash message.
    """
    session.pop(SESSION_KEY, None)
    flash("Session expired. Please log in again.", "error")
    return redirect(url_for("auth.login"))


def _render_index(
    store: TaskStore,
    *,
    status_filter: str,
    editor: TaskEditor | None = None,
    status_code: int = 200,
):
    """
    Render the task list page with standard template context.

    Args:
        store: Loaded task store.
        status_filter: Active filter (``all`` or a status value).
        editor: Open editor modal, or ``None`` when closed.
        status_code: HTTP status code for the response.
    """
    return (
        render_template(
            "tasks.html",
            tasks=filter_tasks(store.tasks, status_filter),
            total_count=len(store.tasks),
            current_filter=status_filter,
            filter_options=FILTER_OPTIONS,
            statuses=TaskStatus,
            present=status_presentation,
            editor=editor,
            current_email=g.user_email,
        ),
        status_code,
    )


def _load_or_error(store: TaskStore) -> BackendError | None:
    """Load the store, returning the error instead of raising it."""
    try:
        store.load()
    except BackendError as error:
        return error
    return None


# =====================================================================
# Task Routes
# =====================================================================


@tasks_bp.route("/")
def home():
    """Send visitors to the task list; the gate takes it from there."""
    return redirect(url_for("tasks.index"))


@tasks_bp.route("/tasks")
@login_required
def index():
    """Render the user's tasks, optionally filtered by status."""
    status_filter = _current_filter()
    logger.info("GET /tasks - Rendering task list (filter=%s)", status_filter)

    store = _store()
    error = _load_or_error(store)
    if error is not None:
        if error.status_code == 401:
            return _session_expired()
        flash(error.message, "error")
        return _render_index(store, status_filter=status_filter, status_code=502 if error.status_code else 503)
    return _render_index(store, status_filter=status_filter)


@tasks_bp.route("/tasks/new")
@login_required
def new_task():
    """Open the editor for a new task; the due date defaults to today."""
    status_filter = _current_filter()
    store = _store()
    error = _load_or_error(store)
    if error is not None:
        if error.status_code == 401:
            return _session_expired()
        flash(error.message, "error")
    return _render_index(store, status_filter=status_filter, editor=TaskEditor.for_create())


@tasks_bp.route("/tasks/<task_id>/edit")
@login_required
def edit_task(task_id: str):
    """Open the editor pre-filled from an existing task."""
    status_filter = _current_filter()
    store = _store()
    error = _load_or_error(store)
    if error is not None:
        if error.status_code == 401:
            return _session_expired()
        flash(error.message, "error")
        return redirect(_index_url(status_filter))

    task = store.get(task_id)
    if task is None:
        logger.warning("Task %s not found for edit", task_id)
        flash("Task not found", "error")
        return redirect(_index_url(status_filter))

    return _render_index(store, status_filter=status_filter, editor=TaskEditor.for_edit(task))


@tasks_bp.route("/tasks/save", methods=["POST"])
@login_required
def save_task():
    """
    Handle the editor modal submission.

    Creates a task when the editor had no editing target, otherwise
    updates that task. On any failure the modal is shown again with the
    submitted values and the list is left as the backend last reported it.
    """
    editor = TaskEditor.from_form(request.form)
    status_filter = _submitted_filter()
    store = _store()

    def _reopen(status_code: int):
        error = _load_or_error(store)
        if error is not None and error.status_code != 401:
            flash(error.message, "error")
        return _render_index(store, status_filter=status_filter, editor=editor, status_code=status_code)

    is_valid, message = editor.validate()
    if not is_valid:
        logger.warning("Task form rejected: %s", message)
        flash(message, "error")
        return _reopen(400)

    try:
        if editor.is_editing:
            store.update(editor.editing_id, editor.fields())
        else:
            store.create(editor.fields())
    except BackendError as error:
        if error.status_code == 401:
            return _session_expired()
        flash(error.message, "error")
        return _reopen(502 if error.status_code else 503)

    if editor.is_editing:
        flash("Task updated: Your task has been updated successfully", "success")
    else:
        flash("Task created: Your new task has been added", "success")
    return redirect(_index_url(status_filter))


@tasks_bp.route("/tasks/<task_id>/delete", methods=["POST"])
@login_required
def delete_task(task_id: str):
    """Delete a task and return to the list."""
    status_filter = _submitted_filter()
    logger.info("POST /tasks/%s/delete - Deleting task", task_id)

    try:
        _store().delete(task_id)
    except BackendError as error:
        if error.status_code == 401:
            return _session_expired()
        flash(error.message, "error")
        return redirect(_index_url(status_filter))

    flash("Task deleted: Task has been removed", "success")
    return redirect(_index_url(status_filter))
