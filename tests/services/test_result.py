"""Tests for ServiceResult and ServiceError."""

import json

import pydantic
import pytest

from tasktrack.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="add_todo", data={"id": 0, "title": "Groceries"})
        assert result.ok is True
        assert result.op == "add_todo"
        assert result.data == {"id": 0, "title": "Groceries"}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_error_construction(self) -> None:
        error = ServiceError(code="TODO_NOT_FOUND", message="Todo is not exist!")
        result = ServiceResult(ok=False, op="get_todo", error=error)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "TODO_NOT_FOUND"
        assert result.error.detail == {}

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="whoami")
        with pytest.raises(pydantic.ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_json_round_trip(self) -> None:
        result = ServiceResult(
            ok=False,
            op="login",
            error=ServiceError(code="INVALID_CREDENTIALS", message="nope", detail={"status": 401}),
        )
        payload = json.loads(result.model_dump_json())
        assert payload["error"]["detail"]["status"] == 401
        assert ServiceResult.model_validate(payload) == result


class TestServiceErrorStatus:
    def test_status_from_detail(self) -> None:
        assert ServiceError(code="X", message="m", detail={"status": 409}).status == 409

    def test_status_defaults_to_500(self) -> None:
        assert ServiceError(code="X", message="m").status == 500
