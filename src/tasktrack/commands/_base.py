"""Click base classes for tasktrack commands with an ``--examples`` flag.

Commands declare examples as ``(command line, note)`` pairs. ``--examples``
prints them as an aligned block with the notes as shell comments, and
exits before argument parsing so it works on commands whose arguments are
required. A :class:`TrackGroup` with no examples of its own shows the ones
of its subcommands, in registration order.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import click

# (command line, what it does); an empty note prints the line alone
Example = tuple[str, str]


def format_examples(examples: Sequence[Example]) -> str:
    """Render *examples* as indented lines with aligned ``# note`` comments."""
    width = max((len(line) for line, _ in examples), default=0)
    rows = []
    for line, note in examples:
        rows.append(f"  {line.ljust(width)}  # {note}" if note else f"  {line}")
    return "\n".join(rows)


def _show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value:
        return
    examples = ctx.command.collect_examples()  # type: ignore[attr-defined]
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(format_examples(examples) if examples else "  (none)")
    ctx.exit(0)


def _examples_option() -> click.Option:
    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_show_examples,
        help="Show usage examples.",
    )


class TrackCommand(click.Command):
    """Click Command carrying ``examples``; adds ``--examples`` when it has any."""

    def __init__(
        self, *args: Any, examples: Sequence[Example] | None = None, **kwargs: Any
    ) -> None:
        super().__init__(*args, **kwargs)
        self.examples: list[Example] = list(examples or ())
        if self.examples:
            self.params.append(_examples_option())

    def collect_examples(self) -> list[Example]:
        return list(self.examples)


class TrackGroup(click.Group):
    """Click Group whose ``--examples`` falls back to its subcommands' examples.

    Sets ``command_class = TrackCommand`` so subcommands accept ``examples``
    without an explicit ``cls=`` each time.
    """

    command_class = TrackCommand

    def __init__(
        self, *args: Any, examples: Sequence[Example] | None = None, **kwargs: Any
    ) -> None:
        super().__init__(*args, **kwargs)
        self.examples: list[Example] = list(examples or ())
        self.params.append(_examples_option())

    def collect_examples(self) -> list[Example]:
        if self.examples:
            return list(self.examples)
        collected: list[Example] = []
        for command in self.commands.values():
            if isinstance(command, (TrackCommand, TrackGroup)):
                collected.extend(command.collect_examples())
        return collected
