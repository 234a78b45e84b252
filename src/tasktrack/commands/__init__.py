"""Subcommand modules for tasktrack.

Provides register_commands() which uses deferred imports to keep
``tasktrack --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    2 groups (have subcommands) + 4 standalone commands.
    """
    # --- Groups ---
    from tasktrack.commands.task import task
    from tasktrack.commands.todo import todo

    cli.add_command(todo)
    cli.add_command(task)

    # --- Standalone commands ---
    from tasktrack.commands.account import login, logout, signup, whoami

    cli.add_command(signup)
    cli.add_command(login)
    cli.add_command(logout)
    cli.add_command(whoami)
