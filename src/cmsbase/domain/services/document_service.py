"""Document service for business logic.

Reads go through the documents view; writes validate payloads against
the collection's columns before anything reaches storage.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from cmsbase.core.exceptions import ValidationError
from cmsbase.core.logging import get_logger
from cmsbase.domain.entities import Envelope, OrderBy
from cmsbase.domain.services.document_validator import DocumentValidator
from cmsbase.domain.services.service_base import (
    HANDLED_ERRORS,
    NamespaceService,
    join_messages,
    total_pages,
)
from cmsbase.infrastructure.persistence.repositories import (
    ColumnRepository,
    DocumentRepository,
    flatten_document,
)
from cmsbase.infrastructure.persistence.repositories.base import ColumnSelector

logger = get_logger(__name__)

VALIDATION_COLUMNS = ("field_id", "column_name", "type", "validation", "field_options")


async def read_view(
    session: AsyncSession,
    collection_name: str,
    page: int,
    limit: int,
    order_by: OrderBy | Sequence[str] | None,
) -> Envelope:
    """Fetch a documents view and wrap it in an envelope.

    An unknown collection is not an error: it yields ``{data: {}, total_pages: 0}``.
    """
    view, total = await DocumentRepository(session).get_view(collection_name, page, limit, order_by)
    if view is None:
        return Envelope(data={}, total_pages=0)
    return Envelope(data=view, total_pages=total_pages(total, limit))


class DocumentService(NamespaceService):
    """Service for document business logic."""

    name = "DocumentService"

    @property
    def validator(self) -> DocumentValidator:
        return DocumentValidator(self.registry)

    async def get(
        self,
        collection_name: str,
        page: int = 1,
        limit: int | None = None,
        order_by: OrderBy | Sequence[str] | None = None,
    ) -> Envelope:
        """Get the documents view of a collection.

        Args:
            collection_name: Collection to read.
            page: Page number (1-indexed).
            limit: Documents per page, the configured default when None.
            order_by: ``(field, direction, nulls)``.

        Returns:
            Envelope: The view ``{collection_id, collection_name, type, roles,
            column_order, is_published, columns, documents}`` and ``total_pages``.
        """
        try:
            self.require("get", collection_name=collection_name)
            page, limit = self.page_bounds(page, limit)
            async with self.transaction() as session:
                return await read_view(session, collection_name, page, limit, order_by)
        except HANDLED_ERRORS as e:
            return self.failure("get", e)

    async def get_by_id(self, document_id: int) -> Envelope:
        """Get one document, flattened."""
        try:
            self.require("get_by_id", id=document_id)
            async with self.transaction() as session:
                row = await DocumentRepository(session).get_by_id(document_id)
        except HANDLED_ERRORS as e:
            return self.failure("get_by_id", e)
        return Envelope(data=[flatten_document(row)] if row else [])

    async def insert(
        self,
        collection_id: int,
        documents: dict[str, Any] | Sequence[dict[str, Any]],
        user_id: str,
        returning: ColumnSelector = ("id",),
    ) -> Envelope:
        """Validate and insert one or many documents in a single batch.

        Missing fields receive their configured default or the type's
        initial value. A single invalid record rejects the whole batch.

        Returns:
            Envelope: One row per inserted document.
        """
        try:
            self.require("insert", collection_id=collection_id, documents=documents, user_id=user_id)
            records = [documents] if isinstance(documents, dict) else list(documents)

            async with self.transaction() as session:
                columns_repo = ColumnRepository(session)
                if await columns_repo.collections.get_by_id(collection_id, ["id"]) is None:
                    raise ValidationError(f"Collection {collection_id} does not exist")
                columns = await columns_repo.list_by_collection(collection_id, VALIDATION_COLUMNS)

                processed = []
                for position, record in enumerate(records):
                    values, errors = self.validator.validate_and_apply_defaults(record, columns)
                    if errors:
                        prefix = f"Document {position + 1}: " if len(records) > 1 else ""
                        raise ValidationError(prefix + join_messages(errors))
                    processed.append(values)

                rows = await DocumentRepository(session).insert(collection_id, processed, user_id, returning)
        except HANDLED_ERRORS as e:
            return self.failure("insert", e)
        return Envelope(data=rows)

    async def update(
        self,
        document_id: int,
        data: dict[str, Any],
        user_id: str,
        returning: ColumnSelector = ("id",),
    ) -> Envelope:
        """Validate a partial payload and merge it into a document.

        Returns:
            Envelope: The updated row, empty when the document does not exist.
        """
        try:
            self.require("update", id=document_id, data=data, user_id=user_id)
            async with self.transaction() as session:
                documents = DocumentRepository(session)
                current = await documents.get_by_id(document_id, ["id", "collection_id"])
                if current is None:
                    return Envelope(data=[])

                columns = await ColumnRepository(session).list_by_collection(
                    current["collection_id"], VALIDATION_COLUMNS
                )
                values, errors = self.validator.validate_and_apply_defaults(data, columns, partial=True)
                if errors:
                    raise ValidationError(join_messages(errors))

                rows = await documents.update(document_id, values, user_id, returning)
        except HANDLED_ERRORS as e:
            return self.failure("update", e)
        return Envelope(data=rows)

    async def remove(
        self,
        ids: int | Sequence[int],
        returning: ColumnSelector = ("id",),
    ) -> Envelope:
        """Delete documents by id; ids that do not exist are ignored."""
        try:
            self.require("remove", ids=ids)
            async with self.transaction() as session:
                rows = await DocumentRepository(session).remove(ids, returning)
        except HANDLED_ERRORS as e:
            return self.failure("remove", e)
        return Envelope(data=rows)
