"""Collection service for business logic.

Handles collection listing, creation, updates, column reordering and
deletion. Every method returns an :class:`Envelope`.
"""

from collections.abc import Sequence
from typing import Any

from cmsbase.core.exceptions import ValidationError
from cmsbase.core.logging import get_logger
from cmsbase.domain.entities import RESERVED_COLUMN_IDS, Envelope, OrderBy
from cmsbase.domain.services.collection_validator import CollectionValidator
from cmsbase.domain.services.service_base import (
    HANDLED_ERRORS,
    NamespaceService,
    join_messages,
    total_pages,
)
from cmsbase.infrastructure.persistence.repositories import (
    CollectionRepository,
    ColumnRepository,
)
from cmsbase.infrastructure.persistence.repositories.base import ColumnSelector

logger = get_logger(__name__)


class CollectionService(NamespaceService):
    """Service for collection business logic."""

    name = "CollectionService"

    async def get(
        self,
        page: int = 1,
        limit: int | None = None,
        columns: ColumnSelector = None,
        order_by: OrderBy | Sequence[str] | None = None,
    ) -> Envelope:
        """List one page of collections.

        Args:
            page: Page number (1-indexed).
            limit: Rows per page, the configured default when None.
            columns: Columns to return, or an alias to column mapping.
            order_by: Sort specification, ``id asc`` by default.

        Returns:
            Envelope: Rows and ``total_pages`` (0 for an empty page).
        """
        try:
            page, limit = self.page_bounds(page, limit)
            async with self.transaction() as session:
                rows, total = await CollectionRepository(session).get(page, limit, columns, order_by)
        except HANDLED_ERRORS as e:
            return self.failure("get", e)
        return Envelope(data=rows, total_pages=total_pages(total, limit))

    async def get_all(self) -> Envelope:
        """Every collection with a summary of its columns."""
        try:
            async with self.transaction() as session:
                rows = await CollectionRepository(session).get_all()
        except HANDLED_ERRORS as e:
            return self.failure("get_all", e)
        return Envelope(data=rows)

    async def get_by_id(self, collection_id: int, columns: ColumnSelector = None) -> Envelope:
        try:
            self.require("get_by_id", id=collection_id)
            async with self.transaction() as session:
                row = await CollectionRepository(session).get_by_id(collection_id, columns)
        except HANDLED_ERRORS as e:
            return self.failure("get_by_id", e)
        return Envelope(data=[row] if row else [])

    async def get_by_name(self, name: str, columns: ColumnSelector = None) -> Envelope:
        try:
            self.require("get_by_name", name=name)
            async with self.transaction() as session:
                row = await CollectionRepository(session).get_by_name(name, columns)
        except HANDLED_ERRORS as e:
            return self.failure("get_by_name", e)
        return Envelope(data=[row] if row else [])

    async def insert(
        self,
        data: dict[str, Any],
        user_id: str,
        returning: ColumnSelector = ("id",),
    ) -> Envelope:
        """Create a collection.

        Args:
            data: ``name`` (required), ``type``, ``roles``, ``column_order``, ``is_published``.
            user_id: Acting user.
            returning: Columns of the new row to return.

        Returns:
            Envelope: The inserted row, or the validation/duplicate error.
        """
        try:
            self.require("insert", data=data, user_id=user_id)
            errors = CollectionValidator.validate(data)
            if errors:
                raise ValidationError(join_messages(errors))

            async with self.transaction() as session:
                rows = await CollectionRepository(session).insert(
                    CollectionValidator.normalize(data), user_id, returning
                )
        except HANDLED_ERRORS as e:
            return self.failure("insert", e)
        return Envelope(data=rows)

    async def update(
        self,
        collection_id: int,
        data: dict[str, Any],
        user_id: str,
        returning: ColumnSelector = ("id",),
    ) -> Envelope:
        """Partially update a collection (rename, retype, publish, reorder).

        Returns:
            Envelope: Updated rows, empty when the id does not exist.
        """
        try:
            self.require("update", id=collection_id, data=data, user_id=user_id)
            if isinstance(collection_id, bool) or not isinstance(collection_id, int):
                raise ValidationError("Collection id must be a number")
            errors = CollectionValidator.validate(data, partial=True)
            if errors:
                raise ValidationError(join_messages(errors))

            async with self.transaction() as session:
                rows = await CollectionRepository(session).update(
                    collection_id, CollectionValidator.normalize(data, partial=True), user_id, returning
                )
        except HANDLED_ERRORS as e:
            return self.failure("update", e)
        return Envelope(data=rows)

    async def reorder_columns(
        self,
        collection_id: int,
        column_order: list[str],
        user_id: str,
        returning: ColumnSelector = ("id", "column_order"),
    ) -> Envelope:
        """Replace the display order of a collection's columns.

        Every entry must be a field id of the collection or one of the
        reserved UI columns, and may appear only once.
        """
        try:
            self.require("reorder_columns", id=collection_id, column_order=column_order, user_id=user_id)
            errors = CollectionValidator.validate_string_list(column_order, "column_order")
            if errors:
                raise ValidationError(join_messages(errors))
            if len(set(column_order)) != len(column_order):
                raise ValidationError("column_order must not contain duplicates")

            async with self.transaction() as session:
                columns = await ColumnRepository(session).list_by_collection(collection_id, ["field_id"])
                known = {column["field_id"] for column in columns} | RESERVED_COLUMN_IDS
                unknown = [entry for entry in column_order if entry not in known]
                if unknown:
                    raise ValidationError(f"Unknown columns in column_order: {', '.join(unknown)}")
                rows = await CollectionRepository(session).update(
                    collection_id, {"column_order": column_order}, user_id, returning
                )
        except HANDLED_ERRORS as e:
            return self.failure("reorder_columns", e)
        return Envelope(data=rows)

    async def remove(self, collection_id: int, returning: ColumnSelector = ("id",)) -> Envelope:
        """Delete a collection together with its columns and documents.

        Returns:
            Envelope: The deleted row, empty when nothing matched.
        """
        try:
            self.require("remove", id=collection_id)
            async with self.transaction() as session:
                rows = await CollectionRepository(session).remove_with_contents(collection_id, returning)
        except HANDLED_ERRORS as e:
            return self.failure("remove", e)
        return Envelope(data=rows)
