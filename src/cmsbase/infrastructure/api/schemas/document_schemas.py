"""Pydantic schemas for document endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class CreateDocumentsRequest(BaseModel):
    """Request body for inserting one document or a batch."""

    data: dict[str, Any] | list[dict[str, Any]] = Field(
        ..., description="Payload keyed by field id, or a list of payloads"
    )


class UpdateDocumentRequest(BaseModel):
    """Request body for merging a partial payload into a document."""

    data: dict[str, Any] = Field(..., description="Keys to set; other keys are kept")
