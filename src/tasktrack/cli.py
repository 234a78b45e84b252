"""Root CLI group for tasktrack with global flags and command registration."""

from __future__ import annotations

import click

from tasktrack import __version__
from tasktrack.commands import register_commands
from tasktrack.commands._context import AppContext
from tasktrack.config.settings import TrackSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="tasktrack")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output (ids only).")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--session",
    "session_id",
    type=int,
    default=None,
    help="Session id to act as (default: the one stored by login).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    session_id: int | None,
) -> None:
    """tasktrack — multi-user todo lists and tasks."""
    ctx.ensure_object(dict)
    settings = TrackSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        session_id=session_id,
    )
    ctx.obj = AppContext(settings)
    ctx.call_on_close(ctx.obj.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
