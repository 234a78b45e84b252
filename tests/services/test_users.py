"""Tests for UserRegistry."""

from __future__ import annotations

import pytest
from sqlalchemy.engine import Engine

from tasktrack.domain.errors import ConflictError, NotFoundError, ValidationError
from tasktrack.infrastructure.database.schema import users
from tasktrack.infrastructure.store import Collection
from tasktrack.services.users import UserRegistry


class TestCreateUser:
    def test_returns_sequential_ids(self, user_registry: UserRegistry) -> None:
        assert user_registry.create_user("alice", "pw") == 0
        assert user_registry.create_user("bob", "pw") == 1

    def test_stores_hash_not_plaintext(self, user_registry: UserRegistry) -> None:
        user_id = user_registry.create_user("alice", "pw123")
        user = user_registry.get_user_by_id(user_id)
        assert user is not None
        assert user.username == "alice"
        assert user.password_hash != "pw123"

    def test_duplicate_username(self, user_registry: UserRegistry) -> None:
        user_registry.create_user("alice", "pw")
        with pytest.raises(ConflictError) as exc_info:
            user_registry.create_user("alice", "other")
        assert exc_info.value.code == "DUPLICATE_USER"
        assert exc_info.value.message == "Username is already exists!"

    def test_unique_constraint_catches_missed_lookup(
        self, user_registry: UserRegistry, db_engine: Engine, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        user_registry.create_user("alice", "pw")
        monkeypatch.setattr(user_registry, "has_username", lambda _username: False)
        with pytest.raises(ConflictError) as exc_info:
            user_registry.create_user("alice", "other")
        assert exc_info.value.code == "DUPLICATE_USER"
        assert Collection(db_engine, users).count({"username": "alice"}) == 1

    def test_usernames_are_case_sensitive(self, user_registry: UserRegistry) -> None:
        user_registry.create_user("alice", "pw")
        assert user_registry.create_user("Alice", "pw") == 1

    def test_rejected_signup_consumes_no_id(self, user_registry: UserRegistry) -> None:
        with pytest.raises(ValidationError):
            user_registry.create_user("al ice", "pw")
        assert user_registry.create_user("alice", "pw") == 0

    @pytest.mark.parametrize(
        ("username", "password", "code"),
        [
            ("", "pw", "EMPTY_CREDENTIALS"),
            ("alice", " ", "EMPTY_CREDENTIALS"),
            ("al ice", "pw", "INVALID_USERNAME"),
        ],
    )
    def test_invalid_credentials(
        self, user_registry: UserRegistry, username: str, password: str, code: str
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            user_registry.create_user(username, password)
        assert exc_info.value.code == code
        assert not user_registry.has_username(username)


class TestLookups:
    def test_get_id_by_username(self, user_registry: UserRegistry) -> None:
        user_registry.create_user("alice", "pw")
        user_registry.create_user("bob", "pw")
        assert user_registry.get_id_by_username("bob") == 1
        assert user_registry.get_id_by_username("carol") is None

    def test_has_user_id(self, user_registry: UserRegistry) -> None:
        user_id = user_registry.create_user("alice", "pw")
        assert user_registry.has_user_id(user_id) is True
        assert user_registry.has_user_id(user_id + 1) is False

    def test_has_username(self, user_registry: UserRegistry) -> None:
        user_registry.create_user("alice", "pw")
        assert user_registry.has_username("alice") is True
        assert user_registry.has_username("bob") is False

    def test_get_missing_user(self, user_registry: UserRegistry) -> None:
        assert user_registry.get_user_by_id(7) is None


class TestVerifyPassword:
    def test_correct_password(self, user_registry: UserRegistry) -> None:
        user_id = user_registry.create_user("alice", "pw123")
        assert user_registry.verify_password(user_id, "pw123") is True

    def test_wrong_password(self, user_registry: UserRegistry) -> None:
        user_id = user_registry.create_user("alice", "pw123")
        assert user_registry.verify_password(user_id, "nope") is False

    def test_unknown_user(self, user_registry: UserRegistry) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            user_registry.verify_password(42, "pw")
        assert exc_info.value.code == "USER_NOT_FOUND"
        assert exc_info.value.message == "User not found!"
