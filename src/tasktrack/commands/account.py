"""Standalone commands: signup, login, logout, whoami."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from tasktrack.commands._base import TrackCommand

if TYPE_CHECKING:
    from tasktrack.commands._context import AppContext


@click.command(
    cls=TrackCommand,
    examples=[
        ("tasktrack signup alice", "prompts for the password twice"),
        ("tasktrack signup alice --password pw123", ""),
    ],
)
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.pass_obj
def signup(app: AppContext, username: str, password: str) -> None:
    """Create an account."""
    app.emit(app.access.signup(username, password))


@click.command(
    cls=TrackCommand,
    examples=[
        ("tasktrack login alice", "later commands act as alice"),
        ("tasktrack -q login alice --password pw123", "prints the session id only"),
    ],
)
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True)
@click.pass_obj
def login(app: AppContext, username: str, password: str) -> None:
    """Log in and remember the session for later commands."""
    result = app.access.login(username, password)
    if result.ok:
        app.remember_session(int(result.data["session_id"]))
    app.emit(result)


@click.command(cls=TrackCommand, examples=[("tasktrack logout", "forgets the stored session")])
@click.pass_obj
def logout(app: AppContext) -> None:
    """End the current session."""
    result = app.access.logout(app.session_id)
    app.forget_session()
    app.emit(result)


@click.command(
    cls=TrackCommand,
    examples=[
        ("tasktrack whoami", ""),
        ("tasktrack --session 3 whoami", "ask about another session"),
    ],
)
@click.pass_obj
def whoami(app: AppContext) -> None:
    """Show the user behind the current session."""
    app.emit(app.access.whoami(app.session_id))
