"""Pydantic schemas for the uniform result envelope."""

from typing import Any

from pydantic import BaseModel, Field


class EnvelopeResponse(BaseModel):
    """Every content endpoint answers with this shape."""

    data: Any = Field(default_factory=list, description="Rows, or the documents view object")
    error: str = Field(default="", description="Error message, empty on success")
    total_pages: int | None = Field(default=None, description="Page count for list endpoints")


class NamespaceResponse(BaseModel):
    """Result of provisioning a namespace."""

    namespace: str
    created: bool = Field(..., description="False when the namespace already existed")


class FieldTypeResponse(BaseModel):
    """One entry of the field type registry."""

    type: str
    title: str
    description: str
    icon: str
    options_defaults: dict[str, Any]
    validation_defaults: dict[str, Any]
    initial_value: Any = None
    is_system: bool
