"""Pydantic schemas for collection endpoints.

Field constraints are left to the collection validator so that bad
values come back as envelope errors.
"""

from pydantic import BaseModel, Field


class CreateCollectionRequest(BaseModel):
    """Request body for creating a collection."""

    name: str = Field(..., description="Unique collection name (1-100 characters)")
    type: str = Field(default="multiple", description="single or multiple")
    roles: list[str] = Field(default_factory=list, description="Roles allowed to access the collection")
    column_order: list[str] = Field(default_factory=list, description="Display order of field ids")
    is_published: bool = Field(default=False)


class UpdateCollectionRequest(BaseModel):
    """Request body for a partial collection update.

    Only fields that are sent are changed.
    """

    name: str | None = None
    type: str | None = None
    roles: list[str] | None = None
    is_published: bool | None = None


class ColumnOrderRequest(BaseModel):
    """Request body for reordering a collection's columns."""

    column_order: list[str] = Field(..., description="Field ids and reserved UI columns in display order")
