"""Backend — the single dependency injected into the access layer.

Owns the database engine and hands out what the registries are built
from: one :class:`Collection` per entity kind, one id generator per kind
(never shared), and the password hasher. Which id strategy and hash cost
are used comes from :class:`~tasktrack.config.settings.TrackSettings`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tasktrack.domain.ids import IdGenerator, build_id_generator
from tasktrack.infrastructure.database.counters import CounterIdGenerator
from tasktrack.infrastructure.database.engine import init_database
from tasktrack.infrastructure.database.schema import COLLECTIONS, ID_KINDS
from tasktrack.infrastructure.hashing import BcryptHasher
from tasktrack.infrastructure.store import Collection

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.engine import Engine

    from tasktrack.config.settings import TrackSettings
    from tasktrack.domain.hashing import PasswordHasher

logger = logging.getLogger(__name__)


class Backend:
    """Database-backed collections, id generators and hasher."""

    def __init__(
        self,
        settings: TrackSettings,
        *,
        hasher: PasswordHasher | None = None,
    ) -> None:
        self._settings = settings
        self._engine = init_database(settings.db_path)
        self._collections = {name: Collection(self._engine, t) for name, t in COLLECTIONS.items()}
        self._generators = {kind: self._build_generator(kind) for kind in ID_KINDS}
        self._hasher = hasher or BcryptHasher(settings.security.bcrypt_rounds)
        logger.debug(
            "Backend ready at %s (ids=%s)", settings.db_path, settings.ids.strategy
        )

    def _build_generator(self, kind: str) -> IdGenerator:
        ids = self._settings.ids
        if ids.strategy == "counter":
            return CounterIdGenerator(self._engine, kind)
        return build_id_generator(ids.strategy, worker_id=ids.worker_id)

    @property
    def settings(self) -> TrackSettings:
        return self._settings

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def db_path(self) -> Path:
        return self._settings.db_path

    @property
    def hasher(self) -> PasswordHasher:
        return self._hasher

    def collection(self, name: str) -> Collection:
        """The collection named *name* (``users``, ``sessions``, ``todos``, ``tasks``)."""
        try:
            return self._collections[name]
        except KeyError:
            msg = f"Unknown collection: {name!r}. Expected one of {sorted(self._collections)}"
            raise ValueError(msg) from None

    def id_generator(self, kind: str) -> IdGenerator:
        """The generator for entity *kind* (``user``, ``session``, ``todo``, ``task``)."""
        try:
            return self._generators[kind]
        except KeyError:
            msg = f"Unknown id kind: {kind!r}. Expected one of {sorted(self._generators)}"
            raise ValueError(msg) from None

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        self._engine.dispose()
