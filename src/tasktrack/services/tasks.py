"""TaskRegistry — tasks scoped per (user, todo).

The registry trusts its caller on the todo reference: it does not check
that ``todo_id`` names a todo of ``user_id``. The access layer does that
before calling in.

``add_task`` validates in a fixed order so each bad input reports its own
error code: empty description, negative priority, non-numeric priority,
then duplicate description.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from tasktrack.domain.errors import ConflictError, NotFoundError
from tasktrack.domain.models import Task
from tasktrack.domain.validation import check_priority, require_text
from tasktrack.services._helpers import now_utc
from tasktrack.services.base import BaseRegistry

if TYPE_CHECKING:
    from tasktrack.domain.ids import IdGenerator
    from tasktrack.infrastructure.store import Collection

logger = logging.getLogger(__name__)


class TaskRegistry(BaseRegistry):
    """Owns the ``tasks`` collection."""

    def __init__(
        self,
        collection: Collection,
        id_generator: IdGenerator,
        *,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        super().__init__(collection, id_generator)
        self._clock = clock

    @staticmethod
    def _scope(user_id: int, todo_id: int, **extra: Any) -> dict[str, Any]:
        return {"user_id": user_id, "todo_id": todo_id, **extra}

    def get_all_tasks(self, user_id: int, todo_id: int | None = None) -> list[Task]:
        """All tasks of *user_id*, or only those under *todo_id* when given."""
        filters: dict[str, Any] = {"user_id": user_id}
        if todo_id is not None:
            filters["todo_id"] = todo_id
        return [Task.model_validate(doc) for doc in self._collection.find(filters)]

    def get_task_by_id(self, user_id: int, todo_id: int, task_id: int) -> Task | None:
        doc = self._collection.find_one(self._scope(user_id, todo_id, id=task_id))
        return Task.model_validate(doc) if doc is not None else None

    def has_task_id(self, user_id: int, todo_id: int, task_id: int) -> bool:
        return self._exists(self._scope(user_id, todo_id, id=task_id))

    def has_task_description(self, user_id: int, todo_id: int, description: str) -> bool:
        return self._exists(self._scope(user_id, todo_id, description=description))

    def add_task(
        self,
        user_id: int,
        todo_id: int,
        description: str,
        priority: float = 0,
    ) -> int:
        """Create a task under *todo_id* and return its id.

        Raises:
            ValidationError: ``EMPTY_DESCRIPTION``, ``NEGATIVE_PRIORITY`` or
                ``INVALID_PRIORITY``.
            ConflictError: ``DUPLICATE_TASK`` — same description already
                exists under this todo.
        """
        description = require_text(
            description, "Task description cannot be empty!", code="EMPTY_DESCRIPTION"
        )
        priority = check_priority(priority)

        if self.has_task_description(user_id, todo_id, description):
            raise ConflictError("Task description already exists!", code="DUPLICATE_TASK")

        task_id = self._next_id()
        self._insert(
            self._scope(
                user_id,
                todo_id,
                id=task_id,
                description=description,
                done=False,
                priority=priority,
                created_at=self._clock().isoformat(timespec="microseconds"),
            ),
            conflict="Task description already exists!",
            code="DUPLICATE_TASK",
        )
        logger.debug("Created task %s under todo %s of user %s", task_id, todo_id, user_id)
        return task_id

    def toggle_task_done(self, user_id: int, todo_id: int, task_id: int) -> bool:
        """Flip ``done``; returns whether the store reported a modification.

        Raises:
            NotFoundError: No such task under this user and todo.
        """
        task = self.get_task_by_id(user_id, todo_id, task_id)
        if task is None:
            raise NotFoundError("Task not found!", code="TASK_NOT_FOUND")

        result = self._collection.update_one(
            self._scope(user_id, todo_id, id=task_id),
            {"done": not task.done},
        )
        logger.debug("Toggled task %s to done=%s", task_id, not task.done)
        return result.modified_count > 0

    def remove_task(self, user_id: int, todo_id: int, task_id: int) -> bool:
        """Delete a task, returning whether a record was removed.

        Raises:
            NotFoundError: No such task under this user and todo.
        """
        if not self.has_task_id(user_id, todo_id, task_id):
            raise NotFoundError("Task not found!", code="TASK_NOT_FOUND")

        result = self._collection.delete_one(self._scope(user_id, todo_id, id=task_id))
        logger.debug("Removed task %s", task_id)
        return result.deleted_count > 0

    def tasks_of(self, user_id: int, todo_id: int) -> tuple[Collection, dict[str, Any]]:
        """The collection and filters selecting every task under *todo_id*."""
        return self._collection, self._scope(user_id, todo_id)

    def remove_all_tasks(self, user_id: int, todo_id: int) -> int:
        """Delete every task under *todo_id*; returns how many went."""
        return self._collection.delete_many(self._scope(user_id, todo_id)).deleted_count
