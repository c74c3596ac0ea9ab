"""
Pure helpers behind the task list page.

The list renders whatever order the fetch returned; the only derived data
is the status filter and the per-status badge styling.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, NamedTuple

from .models import Task, TaskStatus

FILTER_ALL = "all"


class StatusPresentation(NamedTuple):
    """How a status is drawn on a task card."""

    label: str
    color: str
    struck_through: bool
    dimmed: bool


STATUS_PRESENTATION: dict[TaskStatus, StatusPresentation] = {
    TaskStatus.TODO: StatusPresentation("To-Do", "red", False, False),
    TaskStatus.IN_PROGRESS: StatusPresentation("In Progress", "amber", False, False),
    TaskStatus.DONE: StatusPresentation("Done", "green", True, True),
}

# Filter buttons in display order: value, label.
FILTER_OPTIONS: list[tuple[str, str]] = [(FILTER_ALL, "All")] + [
    (status.value, STATUS_PRESENTATION[status].label) for status in TaskStatus
]


def normalize_filter(value: str | None) -> str:
    """Map a query-string value to a known filter; anything else means ``all``."""
    if value in TaskStatus.values():
        return value
    return FILTER_ALL


def filter_tasks(tasks: Iterable[Task], status_filter: str) -> list[Task]:
    """Keep tasks whose status equals ``status_filter``; ``all`` keeps every task."""
    if status_filter == FILTER_ALL:
        return list(tasks)
    return [task for task in tasks if task.status.value == status_filter]


def status_presentation(status: TaskStatus | str) -> StatusPresentation:
    """Return the badge label/colour and card styling for ``status``."""
    return STATUS_PRESENTATION[TaskStatus.coerce(status)]


def format_due_date(value: str) -> str:
    """Render ``YYYY-MM-DD`` as e.g. ``Jun 1, 2024``; unparseable values pass through."""
    try:
        parsed = date.fromisoformat(value)
    except (TypeError, ValueError):
        return value or ""
    return f"{parsed:%b} {parsed.day}, {parsed.year}"
