"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``TASKTRACK_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``tasktrack.toml`` at the project root
  4. Code defaults — baked into the section models

The project root is found the way git finds ``.git/``: walking up from the
working directory to the first directory that holds ``tasktrack.toml`` or
an existing ``.tasktrack/`` data directory. Running a command from any
subdirectory therefore reaches the same database and session file.
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any

import click
import pydantic
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from tasktrack.config.models import (
    DatabaseConfig,
    IdsConfig,
    SecurityConfig,
    SessionConfig,
    TrackConfig,
)

CONFIG_FILENAME = "tasktrack.toml"
CONFIG_ENV_VAR = "TASKTRACK_CONFIG"
DATA_DIRNAME = ".tasktrack"


def locate_root(start: Path | None = None) -> tuple[Path, Path | None]:
    """Return ``(project_root, config_file)`` for *start* (default: cwd).

    ``TASKTRACK_CONFIG`` pins the config file, and with it the root, when
    set. A value naming no file means "no config" rather than falling back
    to the walk-up. Without a marker anywhere up the tree, *start* itself is
    the root.
    """
    origin = (start or Path.cwd()).resolve()

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        pinned = Path(env_path)
        if pinned.is_file():
            return pinned.resolve().parent, pinned
        return origin, None

    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return directory, candidate
        if (directory / DATA_DIRNAME).is_dir():
            return directory, None
    return origin, None


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from the project's ``tasktrack.toml``.

    The file is checked against :class:`TrackConfig` up front so a typo in
    a section name or a bad value names the file it came from.
    """

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc
            try:
                TrackConfig.model_validate(self._data)
            except pydantic.ValidationError as exc:
                problems = "; ".join(
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
                )
                msg = f"Invalid config in {toml_path}: {problems}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class TrackSettings(BaseSettings):
    """Unified settings for the tasktrack CLI and backend.

    Attributes:
        data_root: Directory that relative data paths resolve against
            (parent of ``tasktrack.toml``, or CWD if no config found).
        config_path: The TOML file in effect, if any.
        session_id: Explicit session for this invocation; when None the
            CLI falls back to the session file written by ``login``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "TASKTRACK_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved path (not in TOML, derived from config location) ---
    data_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    session_id: int | None = None

    # --- TOML sections ---
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    ids: IdsConfig = Field(default_factory=IdsConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)

    @property
    def db_path(self) -> Path:
        """Absolute database path."""
        path = Path(self.database.path)
        return path if path.is_absolute() else self.data_root / path

    @property
    def session_file(self) -> Path:
        """Where ``login`` stores the current session id."""
        return self.db_path.parent / "session"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        data_root: Path | None = None,
        **cli_flags: Any,
    ) -> TrackSettings:
        """Construct settings from CLI invocation.

        Finds the project root and its ``tasktrack.toml`` with
        :func:`locate_root` (an explicit *config_path* wins and makes its
        parent the root; an explicit *data_root* overrides the root), then
        merges CLI flags as highest-priority overrides. Flags passed as None
        are dropped so env vars and TOML can still supply them.
        """
        if config_path:
            p = Path(config_path)
            toml_path = p if p.is_file() else None
            project_root = toml_path.parent if toml_path else Path.cwd()
        else:
            project_root, toml_path = locate_root(data_root)

        resolved_root = data_root if data_root is not None else project_root

        overrides = {k: v for k, v in cli_flags.items() if v is not None}

        _tls.toml_path = toml_path
        try:
            return cls(
                data_root=resolved_root,
                config_path=toml_path,
                **overrides,
            )
        finally:
            _tls.toml_path = None
