"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, tasktrack.toml only contains
overrides. A fresh install needs no config file at all.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# --- tasktrack.toml sections ---


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    # Relative paths resolve against the data root.
    path: str = ".tasktrack/tasktrack.db"


class IdsConfig(BaseModel):
    """[ids] section."""

    model_config = {"frozen": True}

    strategy: Literal["sequential", "clock", "counter"] = "counter"
    worker_id: int = Field(default=0, ge=0, le=1023)


class SecurityConfig(BaseModel):
    """[security] section."""

    model_config = {"frozen": True}

    bcrypt_rounds: int = Field(default=12, ge=4, le=31)


class SessionConfig(BaseModel):
    """[session] section."""

    model_config = {"frozen": True}

    # None keeps sessions valid until logout.
    ttl_hours: float | None = Field(default=None, gt=0)


class TrackConfig(BaseModel):
    """Root configuration composing all sections.

    Unknown top-level keys (misspelt sections) are rejected.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    ids: IdsConfig = Field(default_factory=IdsConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
