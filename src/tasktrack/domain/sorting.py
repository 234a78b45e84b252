"""Task ordering by ``<field>:<direction>`` sort keys.

Keys are applied left to right, later keys only breaking ties left by
earlier ones. Python's sort is stable, so applying single-key sorts from
the last key to the first gives exactly that ordering.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from tasktrack.domain.errors import ValidationError
from tasktrack.domain.models import Task


def _by_priority(task: Task) -> Any:
    return task.priority


def _by_task_id(task: Task) -> Any:
    return task.id


def _by_description(task: Task) -> Any:
    return task.description.casefold()


def _by_status(task: Task) -> Any:
    return task.done


def _by_insertion_time(task: Task) -> Any:
    return task.created_at


SORT_FIELDS: dict[str, Callable[[Task], Any]] = {
    "priority": _by_priority,
    "task_id": _by_task_id,
    "description": _by_description,
    "status": _by_status,
    "task_insertion_time": _by_insertion_time,
}

SORT_KEYS: tuple[str, ...] = tuple(
    f"{field}:{direction}" for field in SORT_FIELDS for direction in ("asc", "desc")
)


def parse_sort_key(key: str) -> tuple[Callable[[Task], Any], bool]:
    """Split ``"priority:desc"`` into ``(key_func, reverse)``.

    Raises:
        ValidationError: If the field or direction is unknown.
    """
    field, _, direction = key.partition(":")
    func = SORT_FIELDS.get(field)
    if func is None or direction not in ("asc", "desc"):
        msg = f"Unknown sort key {key!r}. Expected one of: {', '.join(SORT_KEYS)}"
        raise ValidationError(msg, code="INVALID_SORT_KEY")
    return func, direction == "desc"


def sort_tasks(tasks: Iterable[Task], keys: Sequence[str]) -> list[Task]:
    """Return *tasks* ordered by *keys*; unchanged order when *keys* is empty."""
    parsed = [parse_sort_key(key) for key in keys]
    ordered = list(tasks)
    for func, reverse in reversed(parsed):
        ordered.sort(key=func, reverse=reverse)
    return ordered
