"""Repository for document persistence operations.

Besides plain CRUD this builds the documents view: collection metadata,
the collection's columns and one sorted page of documents, assembled by
a single SQL statement with JSON aggregation.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import JSON, Boolean, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cmsbase.core.exceptions import ArgumentError
from cmsbase.core.logging import get_logger
from cmsbase.domain.entities import (
    DOCUMENT_SYSTEM_FIELDS,
    NullsPosition,
    OrderBy,
    SortDirection,
)
from cmsbase.infrastructure.persistence.models import (
    CollectionColumnModel,
    CollectionModel,
    DocumentModel,
)
from cmsbase.infrastructure.persistence.repositories.base import (
    ColumnSelector,
    atomic,
    rows_to_dicts,
    select_columns,
)
from cmsbase.infrastructure.persistence.repositories.json_sql import JsonExpressions

logger = get_logger(__name__)

DEFAULT_RETURNING = ("id",)

COLUMN_VIEW_FIELDS = (
    "id",
    "collection_id",
    "column_name",
    "field_id",
    "type",
    "help",
    "field_options",
    "validation",
    "enable_delete",
    "enable_sort",
    "enable_hide",
    "enable_filter",
    "sort_by",
    "visibility",
    "index",
    "created_by",
    "created_at",
    "updated_by",
    "updated_at",
)


def flatten_document(document: dict[str, Any]) -> dict[str, Any]:
    """Spread a document's payload next to its id and audit fields."""
    payload = document.get("data") or {}
    rest = {key: value for key, value in document.items() if key != "data"}
    return {**payload, **rest}


class DocumentRepository:
    """Repository for the documents relation."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session bound to a namespace.
        """
        self.session = session
        self.table = DocumentModel.__table__

    @property
    def json(self) -> JsonExpressions:
        return JsonExpressions(self.session.get_bind().dialect.name)

    async def count(self, collection_id: int) -> int:
        """Number of documents in a collection."""
        total = await self.session.scalar(
            select(func.count()).select_from(self.table).where(self.table.c.collection_id == collection_id)
        )
        return total or 0

    async def resolve_collection(self, collection_name: str) -> tuple[int, list[str]] | None:
        """Find a collection by name together with its column field ids.

        Returns:
            Tuple of (collection_id, field_ids), or None for an unknown name.
        """
        collections = CollectionModel.__table__
        columns = CollectionColumnModel.__table__
        result = await self.session.execute(
            select(collections.c.id, columns.c.field_id)
            .select_from(collections.outerjoin(columns, columns.c.collection_id == collections.c.id))
            .where(collections.c.name == collection_name)
        )
        rows = result.all()
        if not rows:
            return None
        return rows[0].id, [row.field_id for row in rows if row.field_id is not None]

    def order_clause(self, order: OrderBy, field_ids: Sequence[str]) -> list[Any]:
        """Build the ORDER BY for a documents page.

        System fields sort on their relational column; field ids of the
        collection sort on the text value extracted from the payload.
        Anything else falls back to ``id asc``.
        """
        if order.field in DOCUMENT_SYSTEM_FIELDS:
            sort_expr = self.table.c[order.field]
        elif order.field in field_ids:
            sort_expr = self.json.text_value(self.table.c.data, order.field)
        else:
            logger.warning("Unknown sort field, sorting by id", field=order.field)
            order = OrderBy()
            sort_expr = self.table.c.id

        ordered = sort_expr.desc() if order.direction == SortDirection.DESC else sort_expr.asc()
        ordered = ordered.nulls_first() if order.nulls == NullsPosition.FIRST else ordered.nulls_last()
        return [ordered, self.table.c.id.asc()]

    async def get_view(
        self,
        collection_name: str,
        page: int = 1,
        limit: int = 10,
        order_by: OrderBy | Sequence[str] | None = None,
    ) -> tuple[dict[str, Any] | None, int]:
        """Assemble the documents view for a collection.

        Args:
            collection_name: Collection to read.
            page: Page number (1-indexed).
            limit: Documents per page.
            order_by: ``(field, direction, nulls)``; ``id asc`` by default.

        Returns:
            Tuple of (view, total_document_count). The view is None for an
            unknown collection. Documents are flattened so payload keys sit
            next to ``id`` and the audit fields.
        """
        resolved = await self.resolve_collection(collection_name)
        if resolved is None:
            return None, 0
        collection_id, field_ids = resolved

        json = self.json
        documents = self.table
        collections = CollectionModel.__table__
        columns = CollectionColumnModel.__table__
        order_clause = self.order_clause(OrderBy.parse(order_by), field_ids)

        meta = (
            select(
                collections.c.id.label("collection_id"),
                collections.c.name.label("collection_name"),
                collections.c.type,
                collections.c.roles,
                collections.c.column_order,
                collections.c.is_published,
            )
            .where(collections.c.id == collection_id)
            .cte("collection_meta")
        )

        column_object = json.build_object(
            [
                (name, json.embed(columns.c[name]) if isinstance(columns.c[name].type, JSON) else columns.c[name])
                for name in COLUMN_VIEW_FIELDS
            ]
        )
        column_list = (
            select(
                columns.c.collection_id,
                json.aggregate(column_object, order_by=[columns.c.id]).label("columns"),
            )
            .where(columns.c.collection_id == collection_id)
            .group_by(columns.c.collection_id)
            .cte("column_list")
        )

        page_rows = (
            select(
                *[documents.c[name] for name in DOCUMENT_SYSTEM_FIELDS],
                documents.c.data,
                func.row_number().over(order_by=order_clause).label("position"),
            )
            .where(documents.c.collection_id == collection_id)
            .order_by(*order_clause)
            .limit(limit)
            .offset((page - 1) * limit)
            .subquery("page_rows")
        )
        ordered_rows = select(page_rows).order_by(page_rows.c.position).subquery("ordered_rows")
        document_object = json.build_object(
            [(name, ordered_rows.c[name]) for name in DOCUMENT_SYSTEM_FIELDS]
            + [("data", json.embed(ordered_rows.c.data))]
        )
        document_list = (
            select(
                ordered_rows.c.collection_id,
                json.aggregate(document_object, order_by=[ordered_rows.c.position]).label("documents"),
            )
            .group_by(ordered_rows.c.collection_id)
            .cte("document_list")
        )

        stmt = select(
            meta.c.collection_id,
            meta.c.collection_name,
            meta.c.type,
            meta.c.roles,
            meta.c.column_order,
            meta.c.is_published,
            column_list.c.columns,
            document_list.c.documents,
        ).select_from(
            meta.outerjoin(column_list, column_list.c.collection_id == meta.c.collection_id).outerjoin(
                document_list, document_list.c.collection_id == meta.c.collection_id
            )
        )

        row = (await self.session.execute(stmt)).first()
        if row is None:
            # Deleted between resolution and read
            return None, 0

        view = dict(row._mapping)
        view["columns"] = [self._normalize_column(column) for column in view["columns"] or []]
        view["documents"] = [flatten_document(document) for document in view["documents"] or []]
        view["roles"] = view["roles"] or []
        view["column_order"] = view["column_order"] or []

        total = await self.count(collection_id)
        return view, total

    @staticmethod
    def _normalize_column(column: dict[str, Any]) -> dict[str, Any]:
        """SQLite's json_object renders booleans as 0/1."""
        for name in COLUMN_VIEW_FIELDS:
            if isinstance(CollectionColumnModel.__table__.c[name].type, Boolean) and name in column:
                column[name] = bool(column[name])
        return column

    async def get_by_id(self, document_id: int, columns: ColumnSelector = None) -> dict[str, Any] | None:
        """Get a document row by ID, or None."""
        result = await self.session.execute(
            select(*select_columns(self.table, columns)).where(self.table.c.id == document_id)
        )
        row = result.first()
        return dict(row._mapping) if row else None

    async def insert(
        self,
        collection_id: int,
        records: Sequence[dict[str, Any]],
        user_id: str,
        returning: ColumnSelector = DEFAULT_RETURNING,
    ) -> list[dict[str, Any]]:
        """Insert one document per record in a single statement.

        Audit fields are identical across the batch.

        Returns:
            Inserted rows with the requested columns.
        """
        if not collection_id:
            raise ArgumentError("DocumentRepository.insert", "collection_id")
        if not records:
            raise ArgumentError("DocumentRepository.insert", "data")
        if not user_id:
            raise ArgumentError("DocumentRepository.insert", "user_id")

        now = func.now()
        stmt = (
            insert(self.table)
            .values(
                [
                    {
                        "collection_id": collection_id,
                        "data": dict(record),
                        "created_by": user_id,
                        "updated_by": user_id,
                        "created_at": now,
                        "updated_at": now,
                    }
                    for record in records
                ]
            )
            .returning(*select_columns(self.table, returning, DEFAULT_RETURNING))
        )
        result = await self.session.execute(stmt)
        rows = rows_to_dicts(result.all())
        logger.info("Documents created", collection_id=collection_id, count=len(rows), user_id=user_id)
        return rows

    async def update(
        self,
        document_id: int,
        data: dict[str, Any],
        user_id: str,
        returning: ColumnSelector = DEFAULT_RETURNING,
    ) -> list[dict[str, Any]]:
        """Shallow-merge ``data`` into a document's payload.

        Reads the current payload, merges, and writes it back. Concurrent
        writers are last-writer-wins.

        Returns:
            Updated rows (empty when the document does not exist).
        """
        if not document_id:
            raise ArgumentError("DocumentRepository.update", "id")
        if not data:
            raise ArgumentError("DocumentRepository.update", "data")
        if not user_id:
            raise ArgumentError("DocumentRepository.update", "user_id")

        async with atomic(self.session):
            current = await self.session.scalar(select(self.table.c.data).where(self.table.c.id == document_id))
            if current is None:
                return []
            merged = {**current, **data}

            result = await self.session.execute(
                update(self.table)
                .where(self.table.c.id == document_id)
                .values(data=merged, updated_by=user_id, updated_at=func.now())
                .returning(*select_columns(self.table, returning, DEFAULT_RETURNING))
            )
            rows = rows_to_dicts(result.all())

        logger.info("Document updated", document_id=document_id, fields=sorted(data), user_id=user_id)
        return rows

    async def remove(
        self,
        ids: int | Sequence[int],
        returning: ColumnSelector = DEFAULT_RETURNING,
    ) -> list[dict[str, Any]]:
        """Delete documents by id.

        Each id is deleted by its own statement and the per-row results
        are concatenated.

        Returns:
            Deleted rows (ids that did not exist contribute nothing).
        """
        id_list = [ids] if isinstance(ids, int) else list(ids or [])
        if not id_list:
            raise ArgumentError("DocumentRepository.remove", "ids")

        selected = select_columns(self.table, returning, DEFAULT_RETURNING)
        rows: list[dict[str, Any]] = []
        async with atomic(self.session):
            for document_id in id_list:
                result = await self.session.execute(
                    delete(self.table).where(self.table.c.id == document_id).returning(*selected)
                )
                rows.extend(rows_to_dicts(result.all()))

        logger.info("Documents removed", requested=len(id_list), removed=len(rows))
        return rows

    async def strip_key(self, collection_id: int, key: str) -> int:
        """Remove ``key`` from the payload of every document in a collection.

        Only documents whose payload contains the key are rewritten.

        Returns:
            Number of documents updated.
        """
        json = self.json
        result = await self.session.execute(
            update(self.table)
            .where(
                self.table.c.collection_id == collection_id,
                json.has_key(self.table.c.data, key),
            )
            .values(data=json.remove_key(self.table.c.data, key))
        )
        return result.rowcount or 0
