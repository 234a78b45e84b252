"""SessionRegistry — login sessions bound to a user.

A session is valid while it exists. When a TTL is configured, sessions
older than the TTL stop being *active* (see :meth:`SessionRegistry.is_active`)
and can be swept with :meth:`SessionRegistry.purge_expired`; the plain
lookups (``get_session_by_id``, ``has_session``) stay existence-based.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from tasktrack.domain.errors import NotFoundError
from tasktrack.domain.models import Session
from tasktrack.services._helpers import now_utc
from tasktrack.services.base import BaseRegistry

if TYPE_CHECKING:
    from tasktrack.domain.ids import IdGenerator
    from tasktrack.infrastructure.store import Collection
    from tasktrack.services.users import UserRegistry

logger = logging.getLogger(__name__)


class SessionRegistry(BaseRegistry):
    """Owns the ``sessions`` collection."""

    def __init__(
        self,
        collection: Collection,
        id_generator: IdGenerator,
        users: UserRegistry,
        *,
        ttl: timedelta | None = None,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        super().__init__(collection, id_generator)
        self._users = users
        self._ttl = ttl
        self._clock = clock

    @property
    def ttl(self) -> timedelta | None:
        return self._ttl

    def get_session_by_id(self, session_id: int) -> Session | None:
        doc = self._collection.find_one({"id": session_id})
        return Session.model_validate(doc) if doc is not None else None

    def has_session(self, session_id: int) -> bool:
        return self._exists({"id": session_id})

    def create_session(self, user_id: int) -> int:
        """Open a session for *user_id*.

        Raises:
            NotFoundError: The user does not exist.
        """
        if not self._users.has_user_id(user_id):
            raise NotFoundError("User not found!", code="USER_NOT_FOUND")

        session_id = self._next_id()
        self._insert(
            {
                "id": session_id,
                "user_id": user_id,
                "created_at": self._clock().isoformat(timespec="microseconds"),
            },
            conflict="Session already exists!",
            code="DUPLICATE_SESSION",
        )
        logger.debug("Created session %s for user %s", session_id, user_id)
        return session_id

    def delete_session(self, session_id: int) -> bool:
        """Delete *session_id*, returning whether a record was removed.

        Raises:
            NotFoundError: The session does not exist.
        """
        if not self.has_session(session_id):
            raise NotFoundError("Session not found!", code="SESSION_NOT_FOUND")

        deleted = self._collection.delete_one({"id": session_id}).deleted_count > 0
        logger.debug("Deleted session %s", session_id)
        return deleted

    # ------------------------------------------------------------------
    # Expiry
    # ------------------------------------------------------------------

    def _is_expired(self, session: Session) -> bool:
        if self._ttl is None:
            return False
        created = datetime.fromisoformat(session.created_at)
        return self._clock() - created > self._ttl

    def is_active(self, session_id: int) -> bool:
        """True if the session exists and has not outlived the TTL."""
        session = self.get_session_by_id(session_id)
        return session is not None and not self._is_expired(session)

    def purge_expired(self) -> int:
        """Delete every expired session; returns how many were removed."""
        if self._ttl is None:
            return 0
        purged = 0
        for doc in self._collection.find():
            if self._is_expired(Session.model_validate(doc)):
                purged += self._collection.delete_one({"id": doc["id"]}).deleted_count
        if purged:
            logger.debug("Purged %d expired sessions", purged)
        return purged
