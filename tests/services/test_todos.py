"""Tests for TodoRegistry."""

from __future__ import annotations

import pytest
from sqlalchemy.engine import Engine

from tasktrack.domain.errors import ConflictError, NotFoundError, ValidationError
from tasktrack.domain.ids import SequentialIdGenerator
from tasktrack.infrastructure.database.schema import todos
from tasktrack.infrastructure.store import Collection
from tasktrack.services.tasks import TaskRegistry
from tasktrack.services.todos import TodoRegistry


class TestAddTodo:
    def test_first_todo_is_zero(self, todo_registry: TodoRegistry) -> None:
        assert todo_registry.add_todo(0, "Groceries") == 0

    def test_title_trimmed(self, todo_registry: TodoRegistry) -> None:
        todo_id = todo_registry.add_todo(0, "  Groceries  ")
        todo = todo_registry.get_todo_by_id(0, todo_id)
        assert todo is not None
        assert todo.title == "Groceries"

    @pytest.mark.parametrize("title", ["", "   "])
    def test_empty_title(self, todo_registry: TodoRegistry, title: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            todo_registry.add_todo(0, title)
        assert exc_info.value.code == "EMPTY_TITLE"
        assert exc_info.value.message == "Title cannot be empty"

    def test_duplicate_title_same_user(self, todo_registry: TodoRegistry) -> None:
        todo_registry.add_todo(0, "Groceries")
        with pytest.raises(ConflictError) as exc_info:
            todo_registry.add_todo(0, " Groceries ")
        assert exc_info.value.code == "DUPLICATE_TODO"
        assert exc_info.value.message == "Todo with this title already exists"

    def test_unique_constraint_catches_missed_lookup(
        self, todo_registry: TodoRegistry, db_engine: Engine, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        todo_registry.add_todo(0, "Groceries")
        monkeypatch.setattr(todo_registry, "has_todo_title", lambda _user_id, _title: False)
        with pytest.raises(ConflictError) as exc_info:
            todo_registry.add_todo(0, "Groceries")
        assert exc_info.value.code == "DUPLICATE_TODO"
        assert Collection(db_engine, todos).count({"user_id": 0, "title": "Groceries"}) == 1

    def test_same_title_other_user(self, todo_registry: TodoRegistry) -> None:
        first = todo_registry.add_todo(0, "Groceries")
        second = todo_registry.add_todo(1, "Groceries")
        assert first != second
        assert todo_registry.has_todo_title(1, "Groceries")


class TestLookups:
    def test_get_all_todos_scoped(self, todo_registry: TodoRegistry) -> None:
        todo_registry.add_todo(0, "Groceries")
        todo_registry.add_todo(1, "Work")
        todo_registry.add_todo(0, "Chores")
        assert [t.title for t in todo_registry.get_all_todos(0)] == ["Groceries", "Chores"]
        assert todo_registry.get_all_todos(5) == []

    def test_other_users_todo_is_invisible(self, todo_registry: TodoRegistry) -> None:
        todo_id = todo_registry.add_todo(0, "Groceries")
        assert todo_registry.get_todo_by_id(1, todo_id) is None
        assert todo_registry.has_todo_id(1, todo_id) is False
        assert todo_registry.has_todo_id(0, todo_id) is True

    def test_has_todo_title(self, todo_registry: TodoRegistry) -> None:
        todo_registry.add_todo(0, "Groceries")
        assert todo_registry.has_todo_title(0, "Groceries") is True
        assert todo_registry.has_todo_title(0, "groceries") is False


class TestRemoveTodo:
    def test_remove(self, todo_registry: TodoRegistry) -> None:
        todo_id = todo_registry.add_todo(0, "Groceries")
        assert todo_registry.remove_todo(0, todo_id) is True
        assert todo_registry.get_todo_by_id(0, todo_id) is None

    def test_remove_is_terminal(self, todo_registry: TodoRegistry) -> None:
        todo_id = todo_registry.add_todo(0, "Groceries")
        todo_registry.remove_todo(0, todo_id)
        with pytest.raises(NotFoundError) as exc_info:
            todo_registry.remove_todo(0, todo_id)
        assert exc_info.value.code == "TODO_NOT_FOUND"
        assert exc_info.value.message == "Todo not found"

    def test_cannot_remove_other_users_todo(self, todo_registry: TodoRegistry) -> None:
        todo_id = todo_registry.add_todo(0, "Groceries")
        with pytest.raises(NotFoundError):
            todo_registry.remove_todo(1, todo_id)
        assert todo_registry.has_todo_id(0, todo_id)

    def test_title_reusable_after_remove(self, todo_registry: TodoRegistry) -> None:
        todo_registry.remove_todo(0, todo_registry.add_todo(0, "Groceries"))
        assert todo_registry.add_todo(0, "Groceries") == 1

    def test_cascades_to_tasks(
        self, todo_registry: TodoRegistry, task_registry: TaskRegistry
    ) -> None:
        keep = todo_registry.add_todo(0, "Work")
        drop = todo_registry.add_todo(0, "Groceries")
        task_registry.add_task(0, drop, "Buy milk")
        task_registry.add_task(0, drop, "Buy eggs")
        task_registry.add_task(0, keep, "Email Bob")

        todo_registry.remove_todo(0, drop)

        assert task_registry.get_all_tasks(0, drop) == []
        assert [t.description for t in task_registry.get_all_tasks(0)] == ["Email Bob"]

    def test_failed_cascade_keeps_todo(
        self,
        todo_registry: TodoRegistry,
        task_registry: TaskRegistry,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        todo_id = todo_registry.add_todo(0, "Groceries")
        task_registry.add_task(0, todo_id, "Buy milk")
        collection, _ = task_registry.tasks_of(0, todo_id)
        monkeypatch.setattr(
            task_registry, "tasks_of", lambda *_args: (collection, {"list_id": todo_id})
        )

        with pytest.raises(ValueError):
            todo_registry.remove_todo(0, todo_id)

        assert todo_registry.has_todo_id(0, todo_id)
        assert len(task_registry.get_all_tasks(0, todo_id)) == 1

    def test_without_task_registry_leaves_tasks(
        self, db_engine: Engine, task_registry: TaskRegistry
    ) -> None:
        bare = TodoRegistry(Collection(db_engine, todos), SequentialIdGenerator(0))
        todo_id = bare.add_todo(0, "Groceries")
        task_registry.add_task(0, todo_id, "Buy milk")
        bare.remove_todo(0, todo_id)
        assert len(task_registry.get_all_tasks(0, todo_id)) == 1
