"""Persistent sequential ids, one counter row per entity kind.

Uses the ``id_counters`` table so ids keep increasing across process
restarts. Each CLI invocation is a fresh process, which makes this the
default strategy there; an in-process counter would restart at 0 and
collide with stored rows.

:func:`next_counter_value` lets the caller own the transaction.
:class:`CounterIdGenerator` wraps it in its own transaction per id and
satisfies the :class:`~tasktrack.domain.ids.IdGenerator` protocol.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import update

from tasktrack.infrastructure.database.schema import ID_KINDS, id_counters

if TYPE_CHECKING:
    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

_VALID_KINDS = frozenset(ID_KINDS)


def _check_kind(kind: str) -> None:
    if kind not in _VALID_KINDS:
        msg = f"Unknown id kind: {kind!r}. Expected one of {sorted(_VALID_KINDS)}"
        raise ValueError(msg)


def next_counter_value(conn: Connection, kind: str) -> int:
    """Claim the next id for *kind*.

    The caller must provide a ``Connection`` within an active transaction
    (e.g. from ``engine.begin()``). The increment and the read happen in
    one ``UPDATE ... RETURNING`` statement (SQLite 3.35+), which takes the
    write lock up front; concurrent writers wait on ``busy_timeout``
    instead of failing with a stale snapshot. Commit or rollback is the
    caller's responsibility.

    Args:
        conn: Active SQLAlchemy connection (caller owns the transaction).
        kind: One of ``"user"``, ``"session"``, ``"todo"``, ``"task"``.

    Returns:
        The claimed id (``0`` for the first claim of a fresh database).

    Raises:
        ValueError: If *kind* is not a known entity kind.
    """
    _check_kind(kind)

    claimed: int = conn.execute(
        update(id_counters)
        .where(id_counters.c.kind == kind)
        .values(next_value=id_counters.c.next_value + 1)
        .returning(id_counters.c.next_value - 1)
    ).scalar_one()

    return claimed


class CounterIdGenerator:
    """Database-backed generator for one entity kind."""

    def __init__(self, engine: Engine, kind: str) -> None:
        _check_kind(kind)
        self._engine = engine
        self._kind = kind

    @property
    def kind(self) -> str:
        return self._kind

    def next_id(self) -> int:
        with self._engine.begin() as conn:
            return next_counter_value(conn, self._kind)
