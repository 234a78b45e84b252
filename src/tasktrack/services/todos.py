"""TodoRegistry — todo lists scoped per user.

Every lookup filters by ``user_id`` as well as the todo key, so another
user's todo is indistinguishable from a missing one.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tasktrack.domain.errors import ConflictError, NotFoundError
from tasktrack.domain.models import Todo
from tasktrack.domain.validation import require_text
from tasktrack.services.base import BaseRegistry

if TYPE_CHECKING:
    from tasktrack.domain.ids import IdGenerator
    from tasktrack.infrastructure.store import Collection
    from tasktrack.services.tasks import TaskRegistry

logger = logging.getLogger(__name__)


class TodoRegistry(BaseRegistry):
    """Owns the ``todos`` collection.

    When a :class:`TaskRegistry` is supplied, removing a todo also removes
    its tasks.
    """

    def __init__(
        self,
        collection: Collection,
        id_generator: IdGenerator,
        tasks: TaskRegistry | None = None,
    ) -> None:
        super().__init__(collection, id_generator)
        self._tasks = tasks

    def get_all_todos(self, user_id: int) -> list[Todo]:
        return [Todo.model_validate(doc) for doc in self._collection.find({"user_id": user_id})]

    def get_todo_by_id(self, user_id: int, todo_id: int) -> Todo | None:
        doc = self._collection.find_one({"id": todo_id, "user_id": user_id})
        return Todo.model_validate(doc) if doc is not None else None

    def has_todo_id(self, user_id: int, todo_id: int) -> bool:
        return self._exists({"id": todo_id, "user_id": user_id}, exactly_one=True)

    def has_todo_title(self, user_id: int, title: str) -> bool:
        return self._exists({"title": title, "user_id": user_id}, exactly_one=True)

    def add_todo(self, user_id: int, title: str) -> int:
        """Create a todo titled *title* (trimmed) for *user_id*.

        Raises:
            ValidationError: The trimmed title is empty.
            ConflictError: The user already has a todo with that title.
        """
        title = require_text(title, "Title cannot be empty", code="EMPTY_TITLE")
        if self.has_todo_title(user_id, title):
            raise ConflictError("Todo with this title already exists", code="DUPLICATE_TODO")

        todo_id = self._next_id()
        self._insert(
            {"id": todo_id, "user_id": user_id, "title": title},
            conflict="Todo with this title already exists",
            code="DUPLICATE_TODO",
        )
        logger.debug("Created todo %s for user %s", todo_id, user_id)
        return todo_id

    def remove_todo(self, user_id: int, todo_id: int) -> bool:
        """Delete a todo (and its tasks, when wired to a task registry).

        The todo and its tasks go in a single transaction. Returns whether
        exactly one todo was removed.

        Raises:
            NotFoundError: The user has no such todo.
        """
        if not self.has_todo_id(user_id, todo_id):
            raise NotFoundError("Todo not found", code="TODO_NOT_FOUND")

        target = {"id": todo_id, "user_id": user_id}
        if self._tasks is None:
            removed = self._collection.delete_one(target).deleted_count
        else:
            result = self._collection.delete_one_cascading(
                target, [self._tasks.tasks_of(user_id, todo_id)]
            )
            removed = result.deleted_count
            logger.debug("Removed %d tasks of todo %s", result.cascaded_count, todo_id)
        logger.debug("Removed todo %s of user %s", todo_id, user_id)
        return removed == 1
