"""
View-local task store.

Holds the signed-in user's tasks for the duration of one request and
applies each change only after the backend has confirmed it. A failed
backend call raises ``BackendError`` and leaves ``tasks`` exactly as it was.

There is no version check: two sessions editing the same task both
succeed and the later write wins.
"""

from __future__ import annotations

import logging
from typing import Any

from .backend import SupabaseBackend
from .models import Task, to_record

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory list of one user's tasks backed by the data API.

    Args:
        backend: Client used for every read and write.
        access_token: The user's access token.
        user_id: Owner of the tasks; scopes the list query and new rows.
    """

    def __init__(self, backend: SupabaseBackend, access_token: str, user_id: str):
        self.backend = backend
        self.access_token = access_token
        self.user_id = user_id
        self.tasks: list[Task] = []

    def load(self) -> list[Task]:
        """Replace the list with the user's tasks, newest first."""
        rows = self.backend.list_tasks(self.access_token, self.user_id)
        self.tasks = [Task.from_record(row) for row in rows]
        return self.tasks

    def get(self, task_id: str) -> Task | None:
        """Return the loaded task with ``task_id``, if any."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def create(self, fields: dict[str, Any]) -> Task:
        """
        Insert a task and put it at the top of the list.

        Args:
            fields: The four editable fields.

        Returns:
            The new task carrying its backend-assigned id.
        """
        row = self.backend.insert_task(self.access_token, to_record(fields, user_id=self.user_id))
        task = Task.from_record(row)
        self.tasks.insert(0, task)
        logger.info("Created task %s", task.id)
        return task

    def update(self, task_id: str, fields: dict[str, Any]) -> Task:
        """
        Overwrite a task's editable fields.

        The replacement is built from the id and exactly the fields sent;
        nothing returned by the backend is merged in.

        Raises:
            BackendError: The backend rejected the update.
        """
        record = to_record(fields)
        self.backend.update_task(self.access_token, task_id, record)

        current = self.get(task_id)
        if current is None:
            updated = Task.from_record({**record, "id": task_id})
        else:
            updated = current.with_fields(fields)
        self.tasks = [updated if task.id == task_id else task for task in self.tasks]
        logger.info("Updated task %s", task_id)
        return updated

    def delete(self, task_id: str) -> None:
        """Delete a task and drop it from the list."""
        self.backend.delete_task(self.access_token, task_id)
        self.tasks = [task for task in self.tasks if task.id != task_id]
        logger.info("Deleted task %s", task_id)
