"""SQLAlchemy Core table definitions for the tasktrack database.

One table per document collection (``users``, ``sessions``, ``todos``,
``tasks``) plus ``id_counters`` for the persistent id strategy.

Uniqueness invariants live here as constraints, not only in the
registries: a racing duplicate insert fails with ``IntegrityError``
instead of silently breaking the invariant.

``id`` columns are plain ``INTEGER PRIMARY KEY`` so SQLite aliases them to
the rowid; ids come from the injected generators, never autoincrement.
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    Float,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("username", Text, nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
)

sessions = Table(
    "sessions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("user_id", Integer, nullable=False),  # weak reference, checked at creation
    Column("created_at", Text, nullable=False),
)

todos = Table(
    "todos",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("user_id", Integer, nullable=False),
    Column("title", Text, nullable=False),
    UniqueConstraint("user_id", "title", name="uq_todos_user_title"),
)

tasks = Table(
    "tasks",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("user_id", Integer, nullable=False),
    Column("todo_id", Integer, nullable=False),
    Column("description", Text, nullable=False),
    Column("done", Boolean, nullable=False, default=False, server_default="0"),
    Column("priority", Float, nullable=False, default=0.0, server_default="0"),
    Column("created_at", Text, nullable=False),  # high-resolution ISO timestamp
    UniqueConstraint("user_id", "todo_id", "description", name="uq_tasks_user_todo_description"),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_sessions_user", sessions.c.user_id)
Index("ix_tasks_user", tasks.c.user_id)

id_counters = Table(
    "id_counters",
    metadata,
    Column("kind", Text, primary_key=True),
    Column("next_value", Integer, nullable=False, default=0, server_default="0"),
)

COLLECTIONS: dict[str, Table] = {
    "users": users,
    "sessions": sessions,
    "todos": todos,
    "tasks": tasks,
}

ID_KINDS: tuple[str, ...] = ("user", "session", "todo", "task")
