"""Repository for column persistence operations.

Column writes keep two denormalized pieces of state consistent: the
owning collection's ``column_order`` and the keys present in its
document payloads.
"""

from typing import Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cmsbase.core.exceptions import ArgumentError, ValidationError
from cmsbase.core.logging import get_logger
from cmsbase.infrastructure.persistence.models import CollectionColumnModel
from cmsbase.infrastructure.persistence.repositories.base import (
    ColumnSelector,
    WhereClause,
    atomic,
    build_where,
    rows_to_dicts,
    select_columns,
    translate_integrity_errors,
)
from cmsbase.infrastructure.persistence.repositories.collection_repository import CollectionRepository
from cmsbase.infrastructure.persistence.repositories.document_repository import DocumentRepository

logger = get_logger(__name__)

DEFAULT_RETURNING = ("id",)


class ColumnRepository:
    """Repository for the collection_columns relation."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session bound to a namespace.
        """
        self.session = session
        self.table = CollectionColumnModel.__table__
        self.collections = CollectionRepository(session)
        self.documents = DocumentRepository(session)

    async def get_by_field_id(
        self,
        collection_id: int,
        field_id: str,
        columns: ColumnSelector = None,
    ) -> list[dict[str, Any]]:
        """Point lookup of one column.

        Returns:
            A list holding the column row, or an empty list.
        """
        if not collection_id:
            raise ArgumentError("ColumnRepository.get_by_field_id", "collection_id")
        if not field_id:
            raise ArgumentError("ColumnRepository.get_by_field_id", "field_id")

        result = await self.session.execute(
            select(*select_columns(self.table, columns)).where(
                self.table.c.collection_id == collection_id,
                self.table.c.field_id == field_id,
            )
        )
        return rows_to_dicts(result.all())

    async def list_by_collection(
        self,
        collection_id: int,
        columns: ColumnSelector = None,
    ) -> list[dict[str, Any]]:
        """All columns of a collection ordered by id."""
        result = await self.session.execute(
            select(*select_columns(self.table, columns))
            .where(self.table.c.collection_id == collection_id)
            .order_by(self.table.c.id)
        )
        return rows_to_dicts(result.all())

    async def insert(
        self,
        data: dict[str, Any],
        user_id: str,
        returning: ColumnSelector = DEFAULT_RETURNING,
        column_order: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Insert a column and update the collection's column order atomically.

        Args:
            data: Validated column attributes including ``collection_id``.
            user_id: Acting user.
            returning: Columns to return.
            column_order: New column order for the collection. When None the
                new field id is appended to the current order.

        Returns:
            The inserted column row with the requested columns.

        Raises:
            ValidationError: If the collection does not exist.
            DuplicateError: If the field id is already used in the collection.
        """
        if not data:
            raise ArgumentError("ColumnRepository.insert", "data")
        if not user_id:
            raise ArgumentError("ColumnRepository.insert", "user_id")

        collection_id = data["collection_id"]
        field_id = data["field_id"]
        now = func.now()

        async with atomic(self.session):
            collection = await self.collections.get_by_id(collection_id, ["id", "column_order"])
            if collection is None:
                raise ValidationError(f"Collection {collection_id} does not exist")

            stmt = (
                insert(self.table)
                .values(
                    **data,
                    created_by=user_id,
                    updated_by=user_id,
                    created_at=now,
                    updated_at=now,
                )
                .returning(*select_columns(self.table, returning, DEFAULT_RETURNING))
            )
            async with translate_integrity_errors(self.table.name):
                result = await self.session.execute(stmt)
                rows = rows_to_dicts(result.all())

            if column_order is None:
                current = list(collection["column_order"] or [])
                column_order = current if field_id in current else [*current, field_id]
            await self.collections.set_column_order(collection_id, column_order, user_id)

        logger.info(
            "Column created",
            collection_id=collection_id,
            field_id=field_id,
            type=data.get("type"),
            user_id=user_id,
        )
        return rows

    async def update(
        self,
        collection_id: int,
        where: WhereClause,
        data: dict[str, Any],
        user_id: str,
        returning: ColumnSelector = DEFAULT_RETURNING,
    ) -> list[dict[str, Any]]:
        """Update columns of one collection matching ``where``.

        The collection id is always part of the filter, so a forged
        ``where`` cannot reach another collection's columns.

        Returns:
            Updated rows (empty when nothing matched).
        """
        operation = "ColumnRepository.update"
        if not collection_id:
            raise ArgumentError(operation, "collection_id")
        if not where:
            raise ArgumentError(operation, "where")
        if not data:
            raise ArgumentError(operation, "data")
        if not user_id:
            raise ArgumentError(operation, "user_id")

        stmt = (
            update(self.table)
            .where(self.table.c.collection_id == collection_id, build_where(self.table, where))
            .values(**data, updated_by=user_id, updated_at=func.now())
            .returning(*select_columns(self.table, returning, DEFAULT_RETURNING))
        )
        result = await self.session.execute(stmt)
        rows = rows_to_dicts(result.all())
        logger.info("Columns updated", collection_id=collection_id, count=len(rows), user_id=user_id)
        return rows

    async def remove(
        self,
        field_id: str,
        returning: ColumnSelector = DEFAULT_RETURNING,
        collection_id: int | None = None,
        user_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Delete a column and cascade to column order and document payloads.

        In one transaction: delete the column row(s) capturing their
        collection id; prune the field id from each collection's column
        order; strip the key from every document payload that has it.

        Args:
            field_id: Field id of the column to delete.
            returning: Columns to return.
            collection_id: Restrict the delete to one collection.
            user_id: Acting user recorded on the collection, when given.

        Returns:
            Deleted column rows (empty when nothing was deleted).
        """
        if not field_id:
            raise ArgumentError("ColumnRepository.remove", "field_id")

        conditions = [self.table.c.field_id == field_id]
        if collection_id is not None:
            conditions.append(self.table.c.collection_id == collection_id)

        selected = select_columns(self.table, returning, DEFAULT_RETURNING)
        stmt = delete(self.table).where(*conditions).returning(
            self.table.c.collection_id.label("owner_collection_id"), *selected
        )

        async with atomic(self.session):
            result = await self.session.execute(stmt)
            deleted = result.all()
            if not deleted:
                return []

            for owner_id in sorted({row.owner_collection_id for row in deleted}):
                collection = await self.collections.get_by_id(owner_id, ["column_order", "updated_by"])
                if collection is not None and collection["column_order"]:
                    pruned = [entry for entry in collection["column_order"] if entry != field_id]
                    await self.collections.set_column_order(
                        owner_id, pruned, user_id or collection["updated_by"]
                    )
                stripped = await self.documents.strip_key(owner_id, field_id)
                logger.info(
                    "Column removed",
                    collection_id=owner_id,
                    field_id=field_id,
                    documents_updated=stripped,
                )

        return [
            {key: value for key, value in row._mapping.items() if key != "owner_collection_id"}
            for row in deleted
        ]
