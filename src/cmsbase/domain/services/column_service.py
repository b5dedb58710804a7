"""Column service for business logic.

Columns define the schema of a collection. Inserting or removing one
also maintains the collection's column order and, on removal, the
document payloads.
"""

from typing import Any

from cmsbase.core.exceptions import ValidationError
from cmsbase.core.logging import get_logger
from cmsbase.domain.entities import Envelope, NullsPosition, OrderBy, SortDirection
from cmsbase.domain.services.collection_validator import CollectionValidator
from cmsbase.domain.services.column_validator import ColumnValidator
from cmsbase.domain.services.document_service import read_view
from cmsbase.domain.services.service_base import HANDLED_ERRORS, NamespaceService, join_messages
from cmsbase.infrastructure.persistence.repositories import ColumnRepository
from cmsbase.infrastructure.persistence.repositories.base import ColumnSelector, WhereClause

logger = get_logger(__name__)


class ColumnService(NamespaceService):
    """Service for column business logic."""

    name = "ColumnService"

    async def get_by_field_id(
        self,
        collection_id: int,
        field_id: str,
        columns: ColumnSelector = None,
    ) -> Envelope:
        """Point lookup of one column; empty data when it does not exist."""
        try:
            self.require("get_by_field_id", collection_id=collection_id, field_id=field_id)
            async with self.transaction() as session:
                rows = await ColumnRepository(session).get_by_field_id(collection_id, field_id, columns)
        except HANDLED_ERRORS as e:
            return self.failure("get_by_field_id", e)
        return Envelope(data=rows)

    async def list_by_collection(self, collection_id: int, columns: ColumnSelector = None) -> Envelope:
        try:
            self.require("list_by_collection", collection_id=collection_id)
            async with self.transaction() as session:
                rows = await ColumnRepository(session).list_by_collection(collection_id, columns)
        except HANDLED_ERRORS as e:
            return self.failure("list_by_collection", e)
        return Envelope(data=rows)

    def with_type_defaults(self, data: dict[str, Any]) -> dict[str, Any]:
        """Merge the field type's default options and rules under the caller's."""
        descriptor = self.registry.lookup(data["type"])
        return {
            **data,
            "field_options": {**descriptor.options_defaults, **(data.get("field_options") or {})},
            "validation": {**descriptor.validation_defaults, **(data.get("validation") or {})},
        }

    async def insert(
        self,
        data: dict[str, Any],
        user_id: str,
        returning: ColumnSelector = ("id",),
        column_order: list[str] | None = None,
    ) -> Envelope:
        """Add a column to a collection.

        Args:
            data: Column attributes; ``collection_id``, ``column_name``,
                ``field_id`` and ``type`` are required.
            user_id: Acting user.
            returning: Columns of the new row to return.
            column_order: The collection's new column order, or None to
                append the field id to the current order.

        Returns:
            Envelope: The inserted row, or the validation/duplicate error.
        """
        try:
            self.require("insert", data=data, user_id=user_id)
            errors = ColumnValidator.validate_insert(data, self.registry)
            if column_order is not None:
                errors.extend(CollectionValidator.validate_string_list(column_order, "column_order"))
            if errors:
                raise ValidationError(join_messages(errors))

            async with self.transaction() as session:
                rows = await ColumnRepository(session).insert(
                    self.with_type_defaults(data), user_id, returning, column_order
                )
        except HANDLED_ERRORS as e:
            return self.failure("insert", e)
        return Envelope(data=rows)

    async def update(
        self,
        collection_id: int,
        where: WhereClause,
        data: dict[str, Any],
        user_id: str,
        returning: ColumnSelector = ("id",),
    ) -> Envelope:
        """Update columns of one collection matching ``where``.

        ``field_id`` and ``collection_id`` cannot be changed.

        Returns:
            Envelope: Updated rows, empty when nothing matched.
        """
        try:
            self.require("update", collection_id=collection_id, where=where, data=data, user_id=user_id)
            errors = ColumnValidator.validate_update(data, self.registry)
            if errors:
                raise ValidationError(join_messages(errors))

            async with self.transaction() as session:
                rows = await ColumnRepository(session).update(collection_id, where, data, user_id, returning)
        except HANDLED_ERRORS as e:
            return self.failure("update", e)
        return Envelope(data=rows)

    async def remove(
        self,
        collection_id: int,
        field_id: str,
        returning: ColumnSelector = ("id",),
        user_id: str | None = None,
    ) -> Envelope:
        """Delete a column, prune it from the column order and strip it from documents.

        Returns:
            Envelope: The deleted row, empty when nothing was deleted.
        """
        try:
            self.require("remove", collection_id=collection_id, field_id=field_id)
            async with self.transaction() as session:
                rows = await ColumnRepository(session).remove(
                    field_id, returning, collection_id=collection_id, user_id=user_id
                )
        except HANDLED_ERRORS as e:
            return self.failure("remove", e)
        return Envelope(data=rows)

    async def sort(
        self,
        collection_name: str,
        field_id: str,
        user_id: str,
        sort_by: str | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> Envelope:
        """Set a column's sort direction and re-fetch the documents view sorted by it.

        Args:
            collection_name: Collection owning the column.
            field_id: Column to sort on.
            user_id: Acting user.
            sort_by: ``asc`` or ``desc``; None toggles the stored direction.
            page: Page of the re-fetched view.
            limit: Page size of the re-fetched view.

        Returns:
            Envelope: The documents view, ``{}`` for an unknown collection.
        """
        try:
            self.require("sort", collection_name=collection_name, field_id=field_id, user_id=user_id)
            if sort_by is not None and sort_by not in [d.value for d in SortDirection]:
                raise ValidationError("sort_by must be asc or desc.")
            page, limit = self.page_bounds(page, limit)

            async with self.transaction() as session:
                columns = ColumnRepository(session)
                collection = await columns.collections.get_by_name(collection_name, ["id"])
                if collection is None:
                    return Envelope(data={}, total_pages=0)

                existing = await columns.get_by_field_id(collection["id"], field_id, ["sort_by", "index"])
                if not existing:
                    raise ValidationError(f"Column '{field_id}' does not exist in {collection_name}")

                if sort_by is None:
                    current = existing[0]["sort_by"]
                    sort_by = SortDirection.DESC.value if current == SortDirection.ASC.value else SortDirection.ASC.value

                await columns.update(collection["id"], {"field_id": field_id}, {"sort_by": sort_by}, user_id)
                nulls = (existing[0]["index"] or {}).get("nulls", NullsPosition.LAST.value)
                logger.info("Column sort changed", collection=collection_name, field_id=field_id, sort_by=sort_by)

                return await read_view(session, collection_name, page, limit, OrderBy.parse([field_id, sort_by, nulls]))
        except HANDLED_ERRORS as e:
            return self.failure("sort", e)
