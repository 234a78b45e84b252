"""Tests for the task command group."""

from __future__ import annotations

import json
from typing import Any

import pytest
from click.testing import CliRunner

from tasktrack.cli import cli
from tests.conftest import cli_login


def _json(runner: CliRunner, *args: str) -> dict[str, Any]:
    result = runner.invoke(cli, ["--json", *args])
    return json.loads(result.output)


@pytest.mark.usefixtures("_isolated_root")
class TestTaskCommands:
    @pytest.fixture(autouse=True)
    def _groceries(self, _isolated_root: None, cli_runner: CliRunner) -> None:
        cli_login(cli_runner, "alice")
        assert cli_runner.invoke(cli, ["todo", "add", "Groceries"]).exit_code == 0

    def test_add(self, cli_runner: CliRunner) -> None:
        data = _json(cli_runner, "task", "add", "0", "Buy milk")
        assert data["ok"] is True
        assert data["data"]["id"] == 0
        assert data["data"]["done"] is False
        assert data["data"]["priority"] == 0

    def test_add_with_priority(self, cli_runner: CliRunner) -> None:
        data = _json(cli_runner, "task", "add", "0", "Pay rent", "--priority", "5")
        assert data["data"]["priority"] == 5

    def test_add_human_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["task", "add", "0", "Buy milk"])
        assert result.exit_code == 0
        assert "[ ] Buy milk" in result.output

    def test_negative_priority(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["task", "add", "0", "Pay rent", "--priority=-1"])
        assert result.exit_code == 1
        assert "Priority cannot be negative!" in result.output

    def test_nan_priority(self, cli_runner: CliRunner) -> None:
        data = _json(cli_runner, "task", "add", "0", "Pay rent", "--priority", "nan")
        assert data["error"]["code"] == "INVALID_PRIORITY"
        assert data["error"]["detail"]["status"] == 400

    def test_non_numeric_priority_is_a_usage_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["task", "add", "0", "Pay rent", "--priority", "high"])
        assert result.exit_code == 2

    def test_add_to_missing_todo(self, cli_runner: CliRunner) -> None:
        data = _json(cli_runner, "task", "add", "5", "Buy milk")
        assert data["error"]["code"] == "TODO_NOT_FOUND"

    def test_duplicate(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["task", "add", "0", "Buy milk"])
        data = _json(cli_runner, "task", "add", "0", "Buy milk")
        assert data["error"]["code"] == "DUPLICATE_TASK"
        assert data["error"]["detail"]["status"] == 409

    def test_list_sorted(self, cli_runner: CliRunner) -> None:
        for description, priority in (("low", "1"), ("high", "9"), ("mid", "5")):
            cli_runner.invoke(cli, ["task", "add", "0", description, "--priority", priority])
        data = _json(cli_runner, "task", "list", "0", "--sort", "priority:desc")
        assert [t["description"] for t in data["data"]["items"]] == ["high", "mid", "low"]

    def test_list_multiple_sort_keys(self, cli_runner: CliRunner) -> None:
        for description in ("b", "a", "c"):
            cli_runner.invoke(cli, ["task", "add", "0", description])
        cli_runner.invoke(cli, ["task", "toggle", "0", "1"])
        data = _json(
            cli_runner, "task", "list", "--sort", "status:asc", "--sort", "description:asc"
        )
        assert [t["description"] for t in data["data"]["items"]] == ["b", "c", "a"]

    def test_list_rejects_unknown_sort_key(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["task", "list", "--sort", "size:asc"])
        assert result.exit_code == 2

    def test_list_human_output(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["task", "add", "0", "Buy milk"])
        result = cli_runner.invoke(cli, ["task", "list"])
        assert result.exit_code == 0
        assert "Buy milk" in result.output
        assert "1 tasks" in result.output

    def test_toggle(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["task", "add", "0", "Buy milk"])
        first = _json(cli_runner, "task", "toggle", "0", "0")
        assert first["data"]["done"] is True
        second = _json(cli_runner, "task", "toggle", "0", "0")
        assert second["data"]["done"] is False

    def test_toggle_missing(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["task", "toggle", "0", "9"])
        assert result.exit_code == 1
        assert "Task is not exist!" in result.output

    def test_rm(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["task", "add", "0", "Buy milk"])
        data = _json(cli_runner, "task", "rm", "0", "0")
        assert data["data"] == {"id": 0, "todo_id": 0, "removed": True}
        assert _json(cli_runner, "task", "list")["data"]["count"] == 0

    def test_rm_todo_removes_its_tasks(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["task", "add", "0", "Buy milk"])
        cli_runner.invoke(cli, ["todo", "rm", "0"])
        assert _json(cli_runner, "task", "list")["data"]["count"] == 0
