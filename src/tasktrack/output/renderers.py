"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tasktrack.output.console import create_console, get_output, status_mark

if TYPE_CHECKING:
    from rich.console import Console

    from tasktrack.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: ids only."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if "id" in item)
    if result.op == "login":
        return str(result.data["session_id"])
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="track.ok")
    op = Text(f"  {result.op}", style="track.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="track.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="track.id")
    elif key in ("title", "description"):
        v = Text(str(value), style="track.title")
    else:
        v = Text(str(value))
    console.print(k, v, sep="", end="")
    console.print()


def _format_priority(value: Any) -> str:
    number = float(value)
    return str(int(number)) if number.is_integer() else f"{number:g}"


def _task_table(tasks: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """Build a Rich Table for a list of task dicts."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="track.id", no_wrap=True)
    table.add_column("Done", no_wrap=True)
    table.add_column("Description", style="track.title")
    table.add_column("Priority", style="track.priority", justify="right")
    if verbose:
        table.add_column("Todo", style="dim")
        table.add_column("Created", style="dim")

    for task in tasks:
        mark, style = status_mark(bool(task.get("done")))
        row: list[Any] = [
            str(task.get("id", "")),
            Text(mark, style=style),
            str(task.get("description", "")),
            _format_priority(task.get("priority", 0)),
        ]
        if verbose:
            row.append(str(task.get("todo_id", "")))
            row.append(str(task.get("created_at", "")))
        table.add_row(*row)

    return table


def _todo_panel(todo: dict[str, Any], *, verbose: bool = False) -> Panel:
    tasks = todo.get("tasks", [])
    body: Any = _task_table(tasks, verbose=verbose) if tasks else Text("no tasks", style="dim")
    done = sum(1 for t in tasks if t.get("done"))
    return Panel(
        body,
        title=f"{todo.get('id', '?')} — {todo.get('title', 'Untitled')}",
        subtitle=f"{done}/{len(tasks)} done",
        border_style="dim",
        expand=False,
    )


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="track.error")
    op = Text(f"  {result.op}", style="track.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg))

    if verbose and err:
        console.print(Text(f"  code: {err.code}", style="dim"))
        for k, v in err.detail.items():
            console.print(f"  {k}: {v}")


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render signup/login/logout/add/remove results."""
    _status_line(console, result)
    mutation_keys = (
        "id",
        "session_id",
        "user_id",
        "todo_id",
        "username",
        "title",
        "removed",
    )
    for key in mutation_keys:
        if key in result.data:
            _field(console, key, result.data[key])


def _render_task(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render add_task/toggle_task results."""
    _status_line(console, result)
    d = result.data
    mark, style = status_mark(bool(d.get("done")))
    _field(console, "id", d.get("id"))
    _field(console, "todo_id", d.get("todo_id"))
    console.print(
        Text("  ", style="track.key"),
        Text(mark, style=style),
        Text(f" {d.get('description', '')}", style="track.title"),
        sep="",
        end="",
    )
    console.print()
    _field(console, "priority", _format_priority(d.get("priority", 0)))
    if verbose:
        _field(console, "created_at", d.get("created_at"))


# ── Query renderers ───────────────────────────────────────────────────


def _render_todo(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render get_todo as a panel holding its task table."""
    console.print(_todo_panel(result.data, verbose=verbose))


def _render_todo_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_todos as one panel per todo."""
    items = result.data.get("items", [])
    for todo in items:
        console.print(_todo_panel(todo, verbose=verbose))
    console.print(f"\n{result.data.get('count', len(items))} todos")


def _render_task_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_tasks as a single table."""
    items = result.data.get("items", [])
    console.print(_task_table(items, verbose=verbose))
    console.print(f"\n{result.data.get('count', len(items))} tasks")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Authentication
    "signup": _render_mutation,
    "login": _render_mutation,
    "logout": _render_mutation,
    "whoami": _render_mutation,
    # Todos
    "add_todo": _render_mutation,
    "remove_todo": _render_mutation,
    "get_todo": _render_todo,
    "list_todos": _render_todo_list,
    # Tasks
    "add_task": _render_task,
    "toggle_task": _render_task,
    "remove_task": _render_mutation,
    "list_tasks": _render_task_list,
}
