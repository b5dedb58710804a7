"""Repository for collection persistence operations."""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cmsbase.core.exceptions import ArgumentError
from cmsbase.core.logging import get_logger
from cmsbase.domain.entities import OrderBy, SortDirection
from cmsbase.infrastructure.persistence.models import (
    CollectionColumnModel,
    CollectionModel,
    DocumentModel,
)
from cmsbase.infrastructure.persistence.repositories.base import (
    ColumnSelector,
    WhereClause,
    atomic,
    build_where,
    rows_to_dicts,
    select_columns,
    translate_integrity_errors,
)

logger = get_logger(__name__)

DEFAULT_RETURNING = ("id",)


class CollectionRepository:
    """Repository for the collections relation."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session bound to a namespace.
        """
        self.session = session
        self.table = CollectionModel.__table__

    async def get(
        self,
        page: int = 1,
        limit: int = 10,
        columns: ColumnSelector = None,
        order_by: OrderBy | Sequence[str] | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """Get one page of collections.

        Args:
            page: Page number (1-indexed).
            limit: Rows per page.
            columns: Columns to return, all when None.
            order_by: Sort specification, ``id asc`` by default.

        Returns:
            Tuple of (rows, total_count). When the page is empty the count
            query is skipped and the total is 0.
        """
        order = OrderBy.parse(order_by)
        if order.field not in self.table.c:
            logger.warning("Unknown sort field, sorting by id", field=order.field)
            order = OrderBy()
        sort_column = self.table.c[order.field]
        sort_expr = sort_column.desc() if order.direction == SortDirection.DESC else sort_column.asc()

        stmt = (
            select(*select_columns(self.table, columns))
            .order_by(sort_expr, self.table.c.id)
            .limit(limit)
            .offset((page - 1) * limit)
        )
        result = await self.session.execute(stmt)
        rows = rows_to_dicts(result.all())
        if not rows:
            return [], 0

        total = await self.session.scalar(select(func.count()).select_from(self.table))
        return rows, total or 0

    async def get_all(self) -> list[dict[str, Any]]:
        """Get every collection with a summary of its columns.

        Returns:
            Collections ordered by id, each with a ``columns`` list of
            ``{field_id, column_name, type}``.
        """
        collections = rows_to_dicts(
            (
                await self.session.execute(
                    select(
                        self.table.c.id,
                        self.table.c.name,
                        self.table.c.type,
                        self.table.c.is_published,
                    ).order_by(self.table.c.id)
                )
            ).all()
        )

        columns_table = CollectionColumnModel.__table__
        column_rows = (
            await self.session.execute(
                select(
                    columns_table.c.collection_id,
                    columns_table.c.field_id,
                    columns_table.c.column_name,
                    columns_table.c.type,
                ).order_by(columns_table.c.id)
            )
        ).all()

        by_collection: dict[int, list[dict[str, Any]]] = {c["id"]: [] for c in collections}
        for row in column_rows:
            by_collection.setdefault(row.collection_id, []).append(
                {"field_id": row.field_id, "column_name": row.column_name, "type": row.type}
            )
        for collection in collections:
            collection["columns"] = by_collection[collection["id"]]
        return collections

    async def get_by_id(self, collection_id: int, columns: ColumnSelector = None) -> dict[str, Any] | None:
        """Get a collection by ID, or None."""
        result = await self.session.execute(
            select(*select_columns(self.table, columns)).where(self.table.c.id == collection_id)
        )
        row = result.first()
        return dict(row._mapping) if row else None

    async def get_by_name(self, name: str, columns: ColumnSelector = None) -> dict[str, Any] | None:
        """Get a collection by name, or None."""
        result = await self.session.execute(
            select(*select_columns(self.table, columns)).where(self.table.c.name == name)
        )
        row = result.first()
        return dict(row._mapping) if row else None

    async def insert(
        self,
        data: dict[str, Any],
        user_id: str,
        returning: ColumnSelector = DEFAULT_RETURNING,
    ) -> list[dict[str, Any]]:
        """Insert a collection, stamping audit fields.

        Args:
            data: Validated collection attributes.
            user_id: Acting user, recorded as owner and creator.
            returning: Columns to return.

        Returns:
            The inserted row with the requested columns.

        Raises:
            DuplicateError: If the name is already taken.
        """
        if not data:
            raise ArgumentError("CollectionRepository.insert", "data")
        if not user_id:
            raise ArgumentError("CollectionRepository.insert", "user_id")

        now = func.now()
        values = {
            **data,
            "user_id": user_id,
            "created_by": user_id,
            "updated_by": user_id,
            "created_at": now,
            "updated_at": now,
        }
        stmt = insert(self.table).values(**values).returning(
            *select_columns(self.table, returning, DEFAULT_RETURNING)
        )
        async with translate_integrity_errors(self.table.name):
            result = await self.session.execute(stmt)
            rows = rows_to_dicts(result.all())

        logger.info("Collection created", name=data.get("name"), user_id=user_id)
        return rows

    async def update(
        self,
        collection_id: int,
        data: dict[str, Any],
        user_id: str,
        returning: ColumnSelector = DEFAULT_RETURNING,
    ) -> list[dict[str, Any]]:
        """Apply a partial update and re-stamp ``updated_at``/``updated_by``.

        Returns:
            Updated rows (empty when the ID does not exist).

        Raises:
            DuplicateError: If a rename collides with an existing name.
        """
        if not data:
            raise ArgumentError("CollectionRepository.update", "data")
        if not user_id:
            raise ArgumentError("CollectionRepository.update", "user_id")

        stmt = (
            update(self.table)
            .where(self.table.c.id == collection_id)
            .values(**data, updated_by=user_id, updated_at=func.now())
            .returning(*select_columns(self.table, returning, DEFAULT_RETURNING))
        )
        async with translate_integrity_errors(self.table.name):
            result = await self.session.execute(stmt)
            rows = rows_to_dicts(result.all())

        logger.info("Collection updated", collection_id=collection_id, fields=sorted(data), user_id=user_id)
        return rows

    async def set_column_order(self, collection_id: int, column_order: list[str], user_id: str) -> None:
        """Replace a collection's column order and re-stamp audit fields."""
        await self.session.execute(
            update(self.table)
            .where(self.table.c.id == collection_id)
            .values(column_order=column_order, updated_by=user_id, updated_at=func.now())
        )

    async def remove(
        self,
        where: WhereClause,
        returning: ColumnSelector = DEFAULT_RETURNING,
    ) -> list[dict[str, Any]]:
        """Delete collections matching ``where``.

        Args:
            where: Required filter; an empty filter is rejected.
            returning: Columns to return.

        Returns:
            Deleted rows (empty when nothing matched).
        """
        if not where:
            raise ArgumentError("CollectionRepository.remove", "where")

        stmt = (
            delete(self.table)
            .where(build_where(self.table, where))
            .returning(*select_columns(self.table, returning, DEFAULT_RETURNING))
        )
        result = await self.session.execute(stmt)
        rows = rows_to_dicts(result.all())
        logger.info("Collections removed", count=len(rows))
        return rows

    async def remove_with_contents(
        self,
        collection_id: int,
        returning: ColumnSelector = DEFAULT_RETURNING,
    ) -> list[dict[str, Any]]:
        """Delete a collection together with its documents and columns.

        All three deletes run in one transaction.

        Returns:
            The deleted collection row (empty when it did not exist).
        """
        async with atomic(self.session):
            documents = await self.session.execute(
                delete(DocumentModel.__table__).where(DocumentModel.__table__.c.collection_id == collection_id)
            )
            columns = await self.session.execute(
                delete(CollectionColumnModel.__table__).where(
                    CollectionColumnModel.__table__.c.collection_id == collection_id
                )
            )
            rows = await self.remove({"id": collection_id}, returning)

        if rows:
            logger.info(
                "Collection removed with contents",
                collection_id=collection_id,
                documents=documents.rowcount,
                columns=columns.rowcount,
            )
        return rows
