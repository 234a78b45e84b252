"""Identifier generation strategies.

Every registry receives its own :class:`IdGenerator` at construction time.
Two in-process strategies live here:

- Sequential: a plain counter, seeded at 0 or an injected start value.
  Suitable for tests and single-process deployments.
- Clock: snowflake-style ids built from wall-clock milliseconds, a worker
  id and a per-millisecond sequence. Unique across restarts as long as the
  clock does not run backwards past a previous run.

A third, persistent strategy backed by the database lives in
:mod:`tasktrack.infrastructure.database.counters`.

INVARIANT: an id is never issued twice by the same generator instance.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Protocol, runtime_checkable

# 2024-01-01T00:00:00Z in milliseconds
DEFAULT_EPOCH_MS = 1_704_067_200_000

WORKER_ID_BITS = 10
SEQUENCE_BITS = 12
MAX_WORKER_ID = (1 << WORKER_ID_BITS) - 1
MAX_SEQUENCE = (1 << SEQUENCE_BITS) - 1

ID_STRATEGIES = ("sequential", "clock", "counter")


@runtime_checkable
class IdGenerator(Protocol):
    """Produces integer ids, unique for the lifetime of the instance."""

    def next_id(self) -> int: ...


class SequentialIdGenerator:
    """In-process counter: ``start``, ``start + 1``, ..."""

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            msg = f"start must be non-negative, got {start}"
            raise ValueError(msg)
        self._next = start
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
        return value


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class ClockIdGenerator:
    """Snowflake-style ids: ``timestamp | worker | sequence``.

    Layout (63 bits, always positive in a signed 64-bit column):

    - 41 bits: milliseconds since *epoch_ms*
    - 10 bits: *worker_id*
    - 12 bits: sequence within one millisecond

    When the sequence is exhausted the generator spins until the clock
    ticks. A clock that moves backwards is ignored: ids keep being issued
    from the last seen timestamp.
    """

    def __init__(
        self,
        worker_id: int = 0,
        *,
        epoch_ms: int = DEFAULT_EPOCH_MS,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        if not 0 <= worker_id <= MAX_WORKER_ID:
            msg = f"worker_id must be in [0, {MAX_WORKER_ID}], got {worker_id}"
            raise ValueError(msg)
        self._worker_id = worker_id
        self._epoch_ms = epoch_ms
        self._clock = clock
        self._last_ms = -1
        self._sequence = 0
        self._lock = threading.Lock()

    def _tick(self) -> int:
        return max(self._clock() - self._epoch_ms, 0)

    def next_id(self) -> int:
        with self._lock:
            now = max(self._tick(), self._last_ms)
            if now == self._last_ms:
                self._sequence = (self._sequence + 1) & MAX_SEQUENCE
                if self._sequence == 0:
                    while now <= self._last_ms:
                        now = self._tick()
            else:
                self._sequence = 0
            self._last_ms = now
            return (
                (now << (WORKER_ID_BITS + SEQUENCE_BITS))
                | (self._worker_id << SEQUENCE_BITS)
                | self._sequence
            )


def build_id_generator(
    strategy: str,
    *,
    start: int = 0,
    worker_id: int = 0,
) -> IdGenerator:
    """Build an in-process generator by strategy name.

    ``"counter"`` is not handled here because it needs a database engine;
    see :class:`tasktrack.infrastructure.database.counters.CounterIdGenerator`.

    Raises:
        ValueError: If *strategy* is unknown or needs infrastructure.
    """
    if strategy == "sequential":
        return SequentialIdGenerator(start)
    if strategy == "clock":
        return ClockIdGenerator(worker_id)
    msg = f"Unknown in-process id strategy: {strategy!r}. Expected 'sequential' or 'clock'"
    raise ValueError(msg)
