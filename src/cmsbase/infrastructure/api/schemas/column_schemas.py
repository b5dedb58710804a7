"""Pydantic schemas for column endpoints."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class CreateColumnRequest(BaseModel):
    """Request body for adding a column to a collection."""

    column_name: str = Field(..., description="Display label")
    field_id: str = Field(..., description="Payload key, 1-15 letters, digits, _ or -")
    type: str = Field(..., description="Field type key, see /field-types")
    help: str | None = None
    field_options: dict[str, Any] | None = None
    validation: dict[str, Any] | None = None
    enable_delete: bool | None = None
    enable_sort: bool | None = None
    enable_hide: bool | None = None
    enable_filter: bool | None = None
    sort_by: str | None = None
    visibility: bool | None = None
    index: dict[str, Any] | None = None
    column_order: list[str] | None = Field(
        default=None,
        description="New column order for the collection; the field id is appended when omitted",
    )

    def column_data(self, collection_id: int) -> dict[str, Any]:
        """Column attributes for the service, without unset optionals."""
        data = self.model_dump(exclude_unset=True, exclude={"column_order"})
        return {key: value for key, value in data.items() if value is not None} | {"collection_id": collection_id}


class UpdateColumnRequest(BaseModel):
    """Request body for a partial column update.

    Unknown keys are passed through so the validator can report them.
    """

    model_config = ConfigDict(extra="allow")

    column_name: str | None = None
    type: str | None = None
    help: str | None = None
    field_options: dict[str, Any] | None = None
    validation: dict[str, Any] | None = None
    enable_delete: bool | None = None
    enable_sort: bool | None = None
    enable_hide: bool | None = None
    enable_filter: bool | None = None
    sort_by: str | None = None
    visibility: bool | None = None
    index: dict[str, Any] | None = None


class SortColumnRequest(BaseModel):
    """Request body for sorting the documents view by a column."""

    sort_by: Literal["asc", "desc"] | None = Field(
        default=None,
        description="Direction to store; toggles the current direction when omitted",
    )
