"""ServiceResult and ServiceError — the access-layer contract.

INVARIANT: Every AccessService method returns ServiceResult.
The CLI and any HTTP adapter consume this type; registries below it raise
domain errors instead.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult.

    ``detail["status"]`` carries the HTTP status for the error kind.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @property
    def status(self) -> int:
        return int(self.detail.get("status", 500))


class ServiceResult(BaseModel):
    """Universal return type for access-layer operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"add_todo"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (acting user, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
