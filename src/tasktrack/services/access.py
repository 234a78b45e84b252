"""AccessService — authenticated, ownership-scoped entry point.

This is the layer an HTTP handler (or the CLI) talks to. For every
operation it:

1. resolves the session id into the acting user (401 on failure),
2. checks that a referenced todo / task exists for that user (404),
3. delegates to the registries with the resolved user id,
4. turns registry errors into a failed :class:`ServiceResult` whose
   ``error.detail["status"]`` is the HTTP status for the error kind.

Rejections are logged here, not in the registries.
"""

from __future__ import annotations

import functools
from collections import defaultdict
from collections.abc import Callable, Sequence
from datetime import timedelta
from typing import TYPE_CHECKING, Any

import structlog

from tasktrack.domain.errors import AuthenticationError, NotFoundError, TaskTrackError
from tasktrack.domain.models import Session, Task, Todo, TodoView
from tasktrack.domain.sorting import sort_tasks
from tasktrack.services.result import ServiceError, ServiceResult
from tasktrack.services.sessions import SessionRegistry
from tasktrack.services.tasks import TaskRegistry
from tasktrack.services.todos import TodoRegistry
from tasktrack.services.users import UserRegistry

if TYPE_CHECKING:
    from tasktrack.infrastructure.backend import Backend

log = structlog.get_logger(__name__)


def _guarded(op: str) -> Callable[[Callable[..., dict[str, Any]]], Callable[..., ServiceResult]]:
    """Wrap a method returning a data dict into the ServiceResult contract."""

    def decorator(func: Callable[..., dict[str, Any]]) -> Callable[..., ServiceResult]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> ServiceResult:
            try:
                data = func(*args, **kwargs)
            except TaskTrackError as exc:
                log.info(
                    "access.rejected",
                    op=op,
                    code=exc.code,
                    status=exc.status,
                    message=exc.message,
                )
                return ServiceResult(
                    ok=False,
                    op=op,
                    error=ServiceError(
                        code=exc.code,
                        message=exc.message,
                        detail={"status": exc.status},
                    ),
                )
            return ServiceResult(ok=True, op=op, data=data)

        return wrapper

    return decorator


class AccessService:
    """Session-authenticated facade over the four registries."""

    def __init__(self, backend: Backend) -> None:
        self._backend = backend
        ttl_hours = backend.settings.session.ttl_hours

        self.users = UserRegistry(
            backend.collection("users"), backend.id_generator("user"), backend.hasher
        )
        self.sessions = SessionRegistry(
            backend.collection("sessions"),
            backend.id_generator("session"),
            self.users,
            ttl=timedelta(hours=ttl_hours) if ttl_hours else None,
        )
        self.tasks = TaskRegistry(backend.collection("tasks"), backend.id_generator("task"))
        self.todos = TodoRegistry(
            backend.collection("todos"), backend.id_generator("todo"), tasks=self.tasks
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_session(self, session_id: int | None) -> Session:
        """Load an active session whose user still exists."""
        if session_id is None:
            raise AuthenticationError("Unauthorized")

        session = self.sessions.get_session_by_id(session_id)
        if session is None:
            raise AuthenticationError("Unauthorized")

        if not self.sessions.is_active(session_id):
            self.sessions.delete_session(session_id)
            raise AuthenticationError("Session expired", code="SESSION_EXPIRED")

        if not self.users.has_user_id(session.user_id):
            raise AuthenticationError("Unauthorized")

        return session

    def _resolve_user(self, session_id: int | None) -> int:
        """Map a session id onto the acting user's id."""
        return self._resolve_session(session_id).user_id

    def _require_todo(self, user_id: int, todo_id: int) -> Todo:
        todo = self.todos.get_todo_by_id(user_id, todo_id)
        if todo is None:
            raise NotFoundError("Todo is not exist!", code="TODO_NOT_FOUND")
        return todo

    def _require_task(self, user_id: int, todo_id: int, task_id: int) -> Task:
        task = self.tasks.get_task_by_id(user_id, todo_id, task_id)
        if task is None:
            raise NotFoundError("Task is not exist!", code="TASK_NOT_FOUND")
        return task

    def _todo_views(self, user_id: int) -> list[TodoView]:
        by_todo: dict[int, list[Task]] = defaultdict(list)
        for task in self.tasks.get_all_tasks(user_id):
            by_todo[task.todo_id].append(task)
        return [
            TodoView.build(todo, by_todo[todo.id]) for todo in self.todos.get_all_todos(user_id)
        ]

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    @_guarded("signup")
    def signup(self, username: str, password: str) -> dict[str, Any]:
        user_id = self.users.create_user(username, password)
        return {"id": user_id, "username": username}

    @_guarded("login")
    def login(self, username: str, password: str) -> dict[str, Any]:
        user_id = self.users.get_id_by_username(username)
        if user_id is None or not self.users.verify_password(user_id, password):
            raise AuthenticationError(
                "Invalid username or password", code="INVALID_CREDENTIALS"
            )
        session_id = self.sessions.create_session(user_id)
        return {"session_id": session_id, "user_id": user_id}

    @_guarded("logout")
    def logout(self, session_id: int | None) -> dict[str, Any]:
        session = self._resolve_session(session_id)
        return {"session_id": session.id, "removed": self.sessions.delete_session(session.id)}

    @_guarded("whoami")
    def whoami(self, session_id: int | None) -> dict[str, Any]:
        user = self.users.get_user_by_id(self._resolve_user(session_id))
        if user is None:
            raise AuthenticationError("Unauthorized")
        return {"id": user.id, "username": user.username, "session_id": session_id}

    # ------------------------------------------------------------------
    # Todos
    # ------------------------------------------------------------------

    @_guarded("add_todo")
    def add_todo(self, session_id: int | None, title: str) -> dict[str, Any]:
        user_id = self._resolve_user(session_id)
        todo_id = self.todos.add_todo(user_id, title)
        return self._require_todo(user_id, todo_id).model_dump()

    @_guarded("list_todos")
    def list_todos(self, session_id: int | None) -> dict[str, Any]:
        views = self._todo_views(self._resolve_user(session_id))
        return {"items": [v.model_dump() for v in views], "count": len(views)}

    @_guarded("get_todo")
    def get_todo(self, session_id: int | None, todo_id: int) -> dict[str, Any]:
        user_id = self._resolve_user(session_id)
        todo = self._require_todo(user_id, todo_id)
        return TodoView.build(todo, self.tasks.get_all_tasks(user_id, todo_id)).model_dump()

    @_guarded("remove_todo")
    def remove_todo(self, session_id: int | None, todo_id: int) -> dict[str, Any]:
        user_id = self._resolve_user(session_id)
        self._require_todo(user_id, todo_id)
        return {"id": todo_id, "removed": self.todos.remove_todo(user_id, todo_id)}

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    @_guarded("add_task")
    def add_task(
        self,
        session_id: int | None,
        todo_id: int,
        description: str,
        priority: float = 0,
    ) -> dict[str, Any]:
        user_id = self._resolve_user(session_id)
        self._require_todo(user_id, todo_id)
        task_id = self.tasks.add_task(user_id, todo_id, description, priority)
        if not self.todos.has_todo_id(user_id, todo_id):
            # the todo was removed between the check and the insert
            self.tasks.remove_all_tasks(user_id, todo_id)
            raise NotFoundError("Todo is not exist!", code="TODO_NOT_FOUND")
        return self._require_task(user_id, todo_id, task_id).model_dump()

    @_guarded("list_tasks")
    def list_tasks(
        self,
        session_id: int | None,
        todo_id: int | None = None,
        sort: Sequence[str] = (),
    ) -> dict[str, Any]:
        user_id = self._resolve_user(session_id)
        if todo_id is not None:
            self._require_todo(user_id, todo_id)
        tasks = sort_tasks(self.tasks.get_all_tasks(user_id, todo_id), sort)
        return {"items": [t.model_dump() for t in tasks], "count": len(tasks)}

    @_guarded("toggle_task")
    def toggle_task(self, session_id: int | None, todo_id: int, task_id: int) -> dict[str, Any]:
        user_id = self._resolve_user(session_id)
        self._require_todo(user_id, todo_id)
        self._require_task(user_id, todo_id, task_id)
        self.tasks.toggle_task_done(user_id, todo_id, task_id)
        return self._require_task(user_id, todo_id, task_id).model_dump()

    @_guarded("remove_task")
    def remove_task(self, session_id: int | None, todo_id: int, task_id: int) -> dict[str, Any]:
        user_id = self._resolve_user(session_id)
        self._require_todo(user_id, todo_id)
        self._require_task(user_id, todo_id, task_id)
        removed = self.tasks.remove_task(user_id, todo_id, task_id)
        return {"id": task_id, "todo_id": todo_id, "removed": removed}
