"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def now_utc() -> datetime:
    """Current UTC time (injected as the default clock)."""
    return datetime.now(UTC)

