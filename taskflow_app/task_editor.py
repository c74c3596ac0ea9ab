"""
Task editor modal state.

The editor knows nothing about persistence: it holds the four editable
fields, pre-fills them for an edit or resets them for a new task, and hands
back a plain dict on submit. Whoever opened it decides whether that dict
becomes a create or an update, based on ``editing_id``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping

from .models import Task, TaskStatus

REQUIRED_FIELDS = ("title", "status", "due_date")


@dataclass
class TaskEditor:
    """
    Form state for the create/edit modal.

    Attributes:
        title: Task title.
        description: Task description.
        status: Raw status value from the select input.
        due_date: Due date as ``YYYY-MM-DD``.
        editing_id: Id of the task being edited, ``None`` when creating.
    """

    title: str = ""
    description: str = ""
    status: str = TaskStatus.TODO.value
    due_date: str = ""
    editing_id: str | None = None

    @classmethod
    def for_create(cls, today: date | None = None) -> "TaskEditor":
        """Blank editor with the due date set to today."""
        today = today or date.today()
        return cls(due_date=today.isoformat())

    @classmethod
    def for_edit(cls, task: Task) -> "TaskEditor":
        """Editor pre-populated from ``task``."""
        return cls(
            title=task.title,
            description=task.description,
            status=task.status.value,
            due_date=task.due_date,
            editing_id=task.id,
        )

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "TaskEditor":
        """Read a submitted modal form; the free-text description is kept verbatim."""
        return cls(
            title=form.get("title", "").strip(),
            description=form.get("description", ""),
            status=form.get("status", "").strip(),
            due_date=form.get("due_date", "").strip(),
            editing_id=form.get("editing_id", "").strip() or None,
        )

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    @property
    def heading(self) -> str:
        return "Edit Task" if self.is_editing else "Add New Task"

    @property
    def submit_label(self) -> str:
        return "Update Task" if self.is_editing else "Add Task"

    def missing_fields(self) -> list[str]:
        """Required fields left blank, mirroring the inputs' ``required`` attribute."""
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]

    def validate(self) -> tuple[bool, str | None]:
        """
        Validate the editor fields.

        Returns:
            Tuple of (is_valid, error_message).
        """
        missing = self.missing_fields()
        if missing:
            return False, f"'{missing[0]}' is required"
        if self.status not in TaskStatus.values():
            return False, f"Invalid status. Must be one of: {TaskStatus.values()}"
        return True, None

    def fields(self) -> dict[str, Any]:
        """The four editable fields as emitted on submit; never includes the id."""
        return {
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "due_date": self.due_date,
        }
