"""Command group: tasks under the logged-in user's todo lists."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tasktrack.commands._base import TrackGroup
from tasktrack.domain.sorting import SORT_KEYS

if TYPE_CHECKING:
    from tasktrack.commands._context import AppContext


@click.group(cls=TrackGroup)
def task() -> None:
    """Manage tasks inside todo lists."""


@task.command(
    "add",
    examples=[
        ('tasktrack task add 0 "Buy milk"', "priority defaults to 0"),
        ('tasktrack task add 0 "Pay rent" --priority 5', ""),
    ],
)
@click.argument("todo_id", type=int)
@click.argument("description")
@click.option("--priority", type=float, default=0, show_default=True, help="Non-negative number.")
@click.pass_obj
def add(app: AppContext, todo_id: int, description: str, priority: float) -> None:
    """Add a task to a todo list."""
    app.emit(app.access.add_task(app.session_id, todo_id, description, priority))


@task.command(
    "list",
    examples=[
        ("tasktrack task list", "tasks of every todo"),
        ("tasktrack task list 0 --sort priority:desc --sort task_id:asc", "ties broken by id"),
        ("tasktrack task list 0 --sort status:asc", "pending before done"),
    ],
)
@click.argument("todo_id", type=int, required=False)
@click.option(
    "--sort",
    "sort_keys",
    multiple=True,
    type=click.Choice(SORT_KEYS),
    help="Sort key; repeat to break ties.",
)
@click.pass_obj
def list_cmd(app: AppContext, todo_id: int | None, sort_keys: tuple[str, ...]) -> None:
    """List tasks, across all todos or under one."""
    app.emit(app.access.list_tasks(app.session_id, todo_id, sort=sort_keys))


@task.command("toggle", examples=[("tasktrack task toggle 0 0", "pending <-> done")])
@click.argument("todo_id", type=int)
@click.argument("task_id", type=int)
@click.pass_obj
def toggle(app: AppContext, todo_id: int, task_id: int) -> None:
    """Flip a task between pending and done."""
    app.emit(app.access.toggle_task(app.session_id, todo_id, task_id))


@task.command("rm", examples=[("tasktrack task rm 0 0", "")])
@click.argument("todo_id", type=int)
@click.argument("task_id", type=int)
@click.pass_obj
def rm(app: AppContext, todo_id: int, task_id: int) -> None:
    """Delete a task."""
    app.emit(app.access.remove_task(app.session_id, todo_id, task_id))
