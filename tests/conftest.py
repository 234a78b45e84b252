"""Shared pytest fixtures and test helpers for tasktrack tests."""

from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from tasktrack.config.models import IdsConfig, SecurityConfig
from tasktrack.config.settings import TrackSettings
from tasktrack.domain.ids import SequentialIdGenerator
from tasktrack.infrastructure.backend import Backend
from tasktrack.infrastructure.database.engine import init_database
from tasktrack.infrastructure.database.schema import sessions, tasks, todos, users
from tasktrack.infrastructure.hashing import BcryptHasher
from tasktrack.infrastructure.store import Collection
from tasktrack.services.access import AccessService
from tasktrack.services.sessions import SessionRegistry
from tasktrack.services.tasks import TaskRegistry
from tasktrack.services.todos import TodoRegistry
from tasktrack.services.users import UserRegistry

# Cheapest cost bcrypt accepts; keeps hashing out of the test timings.
FAST_ROUNDS = 4


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's TASKTRACK_* environment out of every test."""
    for name in list(os.environ):
        if name.startswith("TASKTRACK_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / "test.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def hasher() -> BcryptHasher:
    return BcryptHasher(FAST_ROUNDS)


@pytest.fixture
def settings(tmp_path: Path) -> TrackSettings:
    """In-process sequential ids and cheap hashing under a temp data root."""
    return TrackSettings.from_cli(
        data_root=tmp_path,
        ids=IdsConfig(strategy="sequential"),
        security=SecurityConfig(bcrypt_rounds=FAST_ROUNDS),
    )


@pytest.fixture
def backend(settings: TrackSettings) -> Generator[Backend]:
    b = Backend(settings)
    try:
        yield b
    finally:
        b.close()


@pytest.fixture
def access(backend: Backend) -> AccessService:
    return AccessService(backend)


# ---------------------------------------------------------------------------
# Registries over a bare engine, each with its own fresh generator
# ---------------------------------------------------------------------------


@pytest.fixture
def user_registry(db_engine: Engine, hasher: BcryptHasher) -> UserRegistry:
    return UserRegistry(Collection(db_engine, users), SequentialIdGenerator(0), hasher)


@pytest.fixture
def session_registry(db_engine: Engine, user_registry: UserRegistry) -> SessionRegistry:
    return SessionRegistry(Collection(db_engine, sessions), SequentialIdGenerator(0), user_registry)


@pytest.fixture
def task_registry(db_engine: Engine) -> TaskRegistry:
    return TaskRegistry(Collection(db_engine, tasks), SequentialIdGenerator(0))


@pytest.fixture
def todo_registry(db_engine: Engine, task_registry: TaskRegistry) -> TodoRegistry:
    return TodoRegistry(Collection(db_engine, todos), SequentialIdGenerator(0), tasks=task_registry)


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory holding a minimal tasktrack.toml.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes. The CLI then keeps its database and session file under
    ``tmp_path / ".tasktrack"``.
    """
    (tmp_path / "tasktrack.toml").write_text(f"[security]\nbcrypt_rounds = {FAST_ROUNDS}\n")
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service and command test modules)
# ---------------------------------------------------------------------------


def login_as(access: AccessService, username: str, password: str = "pw123") -> int:
    """Sign up *username* via AccessService and return a fresh session id."""
    signup = access.signup(username, password)
    assert signup.ok, signup.error
    login = access.login(username, password)
    assert login.ok, login.error
    return int(login.data["session_id"])


def cli_login(runner: CliRunner, username: str, password: str = "pw123") -> int:
    """Sign up and log in through the CLI; returns the stored session id."""
    from tasktrack.cli import cli

    signup = runner.invoke(cli, ["signup", username, "--password", password])
    assert signup.exit_code == 0, signup.output
    login = runner.invoke(cli, ["-q", "login", username, "--password", password])
    assert login.exit_code == 0, login.output
    return int(login.output.strip())
