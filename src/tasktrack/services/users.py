"""UserRegistry — credentials, username uniqueness, password checks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tasktrack.domain.errors import ConflictError, NotFoundError
from tasktrack.domain.models import User
from tasktrack.domain.validation import check_credentials
from tasktrack.services.base import BaseRegistry

if TYPE_CHECKING:
    from tasktrack.domain.hashing import PasswordHasher
    from tasktrack.domain.ids import IdGenerator
    from tasktrack.infrastructure.store import Collection

logger = logging.getLogger(__name__)


class UserRegistry(BaseRegistry):
    """Owns the ``users`` collection."""

    def __init__(
        self,
        collection: Collection,
        id_generator: IdGenerator,
        hasher: PasswordHasher,
    ) -> None:
        super().__init__(collection, id_generator)
        self._hasher = hasher

    def get_user_by_id(self, user_id: int) -> User | None:
        doc = self._collection.find_one({"id": user_id})
        return User.model_validate(doc) if doc is not None else None

    def get_id_by_username(self, username: str) -> int | None:
        doc = self._collection.find_one({"username": username})
        return int(doc["id"]) if doc is not None else None

    def has_user_id(self, user_id: int) -> bool:
        return self._exists({"id": user_id})

    def has_username(self, username: str) -> bool:
        return self._exists({"username": username})

    def create_user(self, username: str, password: str) -> int:
        """Register *username* and return the new user id.

        Raises:
            ValidationError: Blank username or password, or whitespace
                inside the username.
            ConflictError: The username is taken.
        """
        check_credentials(username, password)

        if self.has_username(username):
            raise ConflictError("Username is already exists!", code="DUPLICATE_USER")

        user_id = self._next_id()
        self._insert(
            {
                "id": user_id,
                "username": username,
                "password_hash": self._hasher.hash(password),
            },
            conflict="Username is already exists!",
            code="DUPLICATE_USER",
        )
        logger.debug("Created user %s (%s)", user_id, username)
        return user_id

    def verify_password(self, user_id: int, password: str) -> bool:
        """Check *password* against the stored hash of *user_id*.

        A mismatch returns False; only a missing user raises.
        """
        user = self.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found!", code="USER_NOT_FOUND")
        return self._hasher.verify(user.password_hash, password)
