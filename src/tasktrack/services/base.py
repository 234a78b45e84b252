"""BaseRegistry — shared foundation for the four entity registries.

Every registry receives its own collection and id generator at
construction time. Registries are stateless between calls: everything
they know is read from the store on each operation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tasktrack.domain.errors import ConflictError
from tasktrack.infrastructure.store import DuplicateKeyError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from tasktrack.domain.ids import IdGenerator
    from tasktrack.infrastructure.store import Collection


class BaseRegistry:
    """Abstract base for the registry classes.

    Usage::

        class TodoRegistry(BaseRegistry):
            def add_todo(self, user_id: int, title: str) -> int:
                todo_id = self._next_id()
                self._insert(
                    {...},
                    conflict="Todo with this title already exists",
                    code="DUPLICATE_TODO",
                )
                return todo_id
    """

    def __init__(self, collection: Collection, id_generator: IdGenerator) -> None:
        self._collection = collection
        self._ids = id_generator

    def _next_id(self) -> int:
        return self._ids.next_id()

    def _exists(self, filters: Mapping[str, Any], *, exactly_one: bool = False) -> bool:
        count = self._collection.count(filters)
        return count == 1 if exactly_one else count > 0

    def _insert(self, document: Mapping[str, Any], *, conflict: str, code: str) -> None:
        """Insert *document*, reporting a unique-constraint hit as a conflict.

        The pre-insert lookups in the registries cover the common path;
        this covers a concurrent insert that won the race between the
        lookup and the write.
        """
        try:
            self._collection.insert_one(document)
        except DuplicateKeyError as exc:
            raise ConflictError(conflict, code=code) from exc
