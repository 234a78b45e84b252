"""Command group: todo lists of the logged-in user."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tasktrack.commands._base import TrackGroup

if TYPE_CHECKING:
    from tasktrack.commands._context import AppContext


@click.group(cls=TrackGroup)
def todo() -> None:
    """Manage todo lists."""


@todo.command("add", examples=[('tasktrack todo add "Groceries"', "prints the new todo id")])
@click.argument("title")
@click.pass_obj
def add(app: AppContext, title: str) -> None:
    """Create a todo list."""
    app.emit(app.access.add_todo(app.session_id, title))


@todo.command(
    "list",
    examples=[
        ("tasktrack todo list", "every todo with its tasks"),
        ("tasktrack -q todo list", "todo ids only, one per line"),
    ],
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List todo lists with their tasks."""
    app.emit(app.access.list_todos(app.session_id))


@todo.command(
    "show",
    examples=[
        ("tasktrack todo show 0", ""),
        ("tasktrack --json todo show 0", "todo and tasks as JSON"),
    ],
)
@click.argument("todo_id", type=int)
@click.pass_obj
def show(app: AppContext, todo_id: int) -> None:
    """Show one todo list and its tasks."""
    app.emit(app.access.get_todo(app.session_id, todo_id))


@todo.command("rm", examples=[("tasktrack todo rm 0", "also deletes its tasks")])
@click.argument("todo_id", type=int)
@click.pass_obj
def rm(app: AppContext, todo_id: int) -> None:
    """Delete a todo list and its tasks."""
    app.emit(app.access.remove_todo(app.session_id, todo_id))
