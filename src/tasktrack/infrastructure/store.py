"""Document-store collections over SQLAlchemy Core tables.

A :class:`Collection` exposes the small document-store surface the
registries are written against: find-one, find-many, count, insert-one,
field-level update-one, delete-one, delete-many, and a cascading
delete-one that also removes dependent documents from other collections.
Filters are equality conjunctions over the table's columns, passed as a
mapping.

Every call runs in its own ``engine.begin()`` transaction. ``update_one``
and ``delete_one`` resolve the single target row and mutate it inside the
same transaction, so they never touch more than one document.

Unique-constraint violations surface as :class:`DuplicateKeyError`; the
store knows nothing about the domain errors built on top of it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, delete, func, insert, or_, select, true, update
from sqlalchemy.exc import IntegrityError

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Table
    from sqlalchemy.engine import Engine


class DuplicateKeyError(Exception):
    """An insert or update would violate a unique constraint."""

    def __init__(self, collection: str, detail: str) -> None:
        super().__init__(f"Duplicate key in {collection!r}: {detail}")
        self.collection = collection
        self.detail = detail


@dataclass(frozen=True)
class InsertOneResult:
    inserted_id: Any


@dataclass(frozen=True)
class UpdateResult:
    matched_count: int
    modified_count: int


@dataclass(frozen=True)
class DeleteResult:
    deleted_count: int
    cascaded_count: int = 0


class Collection:
    """One logical collection of documents backed by one table."""

    def __init__(self, engine: Engine, table: Table) -> None:
        self._engine = engine
        self._table = table

    @property
    def name(self) -> str:
        return self._table.name

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _where(self, filters: Mapping[str, Any] | None) -> ColumnElement[bool]:
        """Build an equality conjunction, rejecting unknown fields."""
        if not filters:
            return true()
        clauses = []
        for field, value in filters.items():
            if field not in self._table.c:
                msg = f"Unknown field {field!r} for collection {self.name!r}"
                raise ValueError(msg)
            clauses.append(self._table.c[field] == value)
        return and_(*clauses)

    def _check_fields(self, document: Mapping[str, Any]) -> None:
        unknown = sorted(set(document) - set(self._table.c.keys()))
        if unknown:
            msg = f"Unknown fields {unknown} for collection {self.name!r}"
            raise ValueError(msg)

    def _first_id(self, conn: Any, filters: Mapping[str, Any]) -> Any:
        pk = self._table.c.id
        return conn.execute(
            select(pk).where(self._where(filters)).order_by(pk).limit(1)
        ).scalar_one_or_none()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_one(self, filters: Mapping[str, Any]) -> dict[str, Any] | None:
        """Return the first matching document, or None."""
        stmt = select(self._table).where(self._where(filters)).order_by(self._table.c.id).limit(1)
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return dict(row) if row is not None else None

    def find(self, filters: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """Return every matching document in storage (id) order."""
        stmt = select(self._table).where(self._where(filters)).order_by(self._table.c.id)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [dict(row) for row in rows]

    def count(self, filters: Mapping[str, Any] | None = None) -> int:
        """Count matching documents."""
        stmt = select(func.count()).select_from(self._table).where(self._where(filters))
        with self._engine.connect() as conn:
            return int(conn.execute(stmt).scalar_one() or 0)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert_one(self, document: Mapping[str, Any]) -> InsertOneResult:
        """Insert *document*.

        Raises:
            DuplicateKeyError: If a unique constraint rejects the document.
        """
        self._check_fields(document)
        try:
            with self._engine.begin() as conn:
                conn.execute(insert(self._table).values(**document))
        except IntegrityError as exc:
            raise DuplicateKeyError(self.name, str(exc.orig)) from exc
        return InsertOneResult(inserted_id=document.get("id"))

    def update_one(self, filters: Mapping[str, Any], values: Mapping[str, Any]) -> UpdateResult:
        """Set *values* on the first matching document.

        ``modified_count`` only counts a document whose stored values
        actually differ from *values*, as a ``$set`` would report.
        """
        self._check_fields(values)
        if not values:
            return UpdateResult(matched_count=min(self.count(filters), 1), modified_count=0)
        try:
            with self._engine.begin() as conn:
                target = self._first_id(conn, filters)
                if target is None:
                    return UpdateResult(matched_count=0, modified_count=0)
                changed = or_(*(self._table.c[k] != v for k, v in values.items()))
                result = conn.execute(
                    update(self._table)
                    .where(self._table.c.id == target, changed)
                    .values(**values)
                )
        except IntegrityError as exc:
            raise DuplicateKeyError(self.name, str(exc.orig)) from exc
        return UpdateResult(matched_count=1, modified_count=result.rowcount)

    def delete_one(self, filters: Mapping[str, Any]) -> DeleteResult:
        """Delete the first matching document."""
        with self._engine.begin() as conn:
            target = self._first_id(conn, filters)
            if target is None:
                return DeleteResult(deleted_count=0)
            result = conn.execute(delete(self._table).where(self._table.c.id == target))
        return DeleteResult(deleted_count=result.rowcount)

    def delete_many(self, filters: Mapping[str, Any]) -> DeleteResult:
        """Delete every matching document."""
        with self._engine.begin() as conn:
            result = conn.execute(delete(self._table).where(self._where(filters)))
        return DeleteResult(deleted_count=result.rowcount)

    def delete_one_cascading(
        self,
        filters: Mapping[str, Any],
        dependents: Sequence[tuple[Collection, Mapping[str, Any]]],
    ) -> DeleteResult:
        """Delete the first matching document and the dependent documents.

        Each entry in *dependents* pairs a collection on the same engine
        with the filters selecting the documents that belong to the
        target. Everything runs in one transaction: dependents are only
        removed when the target was, and a failure leaves both in place.
        """
        for child, _ in dependents:
            if child._engine is not self._engine:
                msg = f"Collection {child.name!r} is not on the same engine as {self.name!r}"
                raise ValueError(msg)

        cascaded = 0
        with self._engine.begin() as conn:
            target = self._first_id(conn, filters)
            if target is None:
                return DeleteResult(deleted_count=0)
            result = conn.execute(delete(self._table).where(self._table.c.id == target))
            for child, child_filters in dependents:
                cascaded += conn.execute(
                    delete(child._table).where(child._where(child_filters))
                ).rowcount
        return DeleteResult(deleted_count=result.rowcount, cascaded_count=cascaded)
