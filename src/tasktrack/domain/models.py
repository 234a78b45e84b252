"""Pydantic models for the four entity kinds.

Models are frozen snapshots of a stored document. Registries build them
from store rows with ``model_validate``; nothing mutates them in place.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class User(BaseModel):
    """A registered account. Immutable once created."""

    model_config = {"frozen": True}

    id: int
    username: str
    password_hash: str


class Session(BaseModel):
    """A login session bound to one user."""

    model_config = {"frozen": True}

    id: int
    user_id: int
    created_at: str


class Todo(BaseModel):
    """A todo list owned by exactly one user."""

    model_config = {"frozen": True}

    id: int
    user_id: int
    title: str


class Task(BaseModel):
    """A task under one todo of one user."""

    model_config = {"frozen": True}

    id: int
    user_id: int
    todo_id: int
    description: str
    done: bool = False
    priority: float = 0
    created_at: str


class TodoView(BaseModel):
    """A todo together with its tasks — the serialized todo shape."""

    model_config = {"frozen": True}

    id: int
    user_id: int
    title: str
    tasks: list[Task] = Field(default_factory=list)

    @classmethod
    def build(cls, todo: Todo, tasks: list[Task]) -> TodoView:
        return cls(id=todo.id, user_id=todo.user_id, title=todo.title, tasks=tasks)
