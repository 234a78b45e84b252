"""SQLite database engine, schema, and id counters via SQLAlchemy Core."""

from tasktrack.infrastructure.database.counters import CounterIdGenerator, next_counter_value
from tasktrack.infrastructure.database.engine import create_db_engine, init_database
from tasktrack.infrastructure.database.schema import (
    COLLECTIONS,
    id_counters,
    metadata,
    sessions,
    tasks,
    todos,
    users,
)

__all__ = [
    "COLLECTIONS",
    "CounterIdGenerator",
    "create_db_engine",
    "id_counters",
    "init_database",
    "metadata",
    "next_counter_value",
    "sessions",
    "tasks",
    "todos",
    "users",
]
