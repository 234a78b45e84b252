"""Rich Console factory and theme for tasktrack output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

TRACK_THEME = Theme(
    {
        "track.ok": "bold green",
        "track.error": "bold red",
        "track.op": "bold cyan",
        "track.key": "dim",
        "track.id": "bold blue",
        "track.title": "bold",
        "track.done": "green",
        "track.pending": "yellow",
        "track.priority": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=TRACK_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def status_mark(done: bool) -> tuple[str, str]:
    """Checkbox glyph and style for a task's done flag."""
    return ("[x]", "track.done") if done else ("[ ]", "track.pending")
