"""Database engine setup for SQLite with WAL mode.

SQLite is the document store backing: one table per collection, WAL mode
for concurrent readers, unique constraints for the uniqueness invariants.

SQLAlchemy Core (not ORM) is used because every store call is a single
short statement or two — no benefit from session management or identity
maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, insert, select
from sqlalchemy.engine import Engine

from tasktrack.infrastructure.database.schema import ID_KINDS, id_counters, metadata


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(db_path: Path) -> Engine:
    """Initialize the tasktrack database at *db_path*.

    Creates the parent directory, all tables from :data:`schema.metadata`,
    and seeds one ``id_counters`` row per entity kind starting at 0.

    Idempotent — safe to call on an existing database.

    Returns the engine ready for use.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path)

    metadata.create_all(engine)

    _seed_counters(engine)
    return engine


def _seed_counters(engine: Engine) -> None:
    """Insert initial counter rows for every id kind if they don't exist."""
    with engine.begin() as conn:
        for kind in ID_KINDS:
            row = conn.execute(select(id_counters.c.kind).where(id_counters.c.kind == kind)).first()
            if row is None:
                conn.execute(insert(id_counters).values(kind=kind, next_value=0))
