"""
Data models for the TaskFlow application.

TaskFlow stores nothing itself, so these are plain in-memory shapes rather
than ORM models: the ``Task`` the views work with, and the mapping to and
from the ``tasks`` rows the hosted backend returns.

Backend rows use snake_case wire names (``due_date``, ``user_id``,
``created_at``) and may omit ``description`` and ``status``; ``Task`` always
carries all five fields.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class TaskStatus(str, Enum):
    """Enumeration of possible task statuses."""

    TODO = "todo"
    IN_PROGRESS = "inprogress"
    DONE = "done"

    @classmethod
    def values(cls) -> list[str]:
        """Return the raw status strings in display order."""
        return [status.value for status in cls]

    @classmethod
    def coerce(cls, value: Any) -> "TaskStatus":
        """Read a stored status, falling back to ``TODO`` when absent or unknown."""
        try:
            return cls(value)
        except ValueError:
            return cls.TODO


EDITABLE_FIELDS = ("title", "description", "status", "due_date")


@dataclass(frozen=True)
class Task:
    """
    A user-owned task.

    Attributes:
        id: Opaque identifier assigned by the backend.
        title: Short title describing the task.
        description: Free-form description, empty when not provided.
        status: Current status (todo, inprogress, done).
        due_date: Calendar date encoded as ``YYYY-MM-DD``.
    """

    id: str
    title: str
    description: str
    status: TaskStatus
    due_date: str

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Task":
        """
        Build a task from a backend row.

        Args:
            record: Row dictionary as returned by the data API.

        Returns:
            Task with ``description`` defaulted to ``""`` and ``status``
            defaulted to ``todo``.
        """
        return cls(
            id=str(record["id"]),
            title=record.get("title") or "",
            description=record.get("description") or "",
            status=TaskStatus.coerce(record.get("status")),
            due_date=record.get("due_date") or "",
        )

    def with_fields(self, fields: dict[str, Any]) -> "Task":
        """Return a copy with the editable ``fields`` overwritten; the id never changes."""
        changes = {key: fields[key] for key in EDITABLE_FIELDS if key in fields}
        if "status" in changes:
            changes["status"] = TaskStatus.coerce(changes["status"])
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the task to a dictionary representation.

        Returns:
            Dictionary containing all task fields.
        """
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "due_date": self.due_date,
        }


def to_record(fields: dict[str, Any], user_id: str | None = None) -> dict[str, Any]:
    """
    Convert editable task fields into a backend row payload.

    Args:
        fields: Mapping holding the editable fields.
        user_id: Owning user; included for inserts only.

    Returns:
        Dictionary ready to be sent as JSON to the data API.
    """
    record: dict[str, Any] = {}
    for key in EDITABLE_FIELDS:
        if key not in fields:
            continue
        value = fields[key]
        record[key] = value.value if isinstance(value, TaskStatus) else value
    if user_id is not None:
        record["user_id"] = user_id
    return record
