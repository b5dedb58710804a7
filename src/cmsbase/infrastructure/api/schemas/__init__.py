"""API Schemas for request/response validation."""

from cmsbase.infrastructure.api.schemas.collection_schemas import (
    ColumnOrderRequest,
    CreateCollectionRequest,
    UpdateCollectionRequest,
)
from cmsbase.infrastructure.api.schemas.column_schemas import (
    CreateColumnRequest,
    SortColumnRequest,
    UpdateColumnRequest,
)
from cmsbase.infrastructure.api.schemas.document_schemas import (
    CreateDocumentsRequest,
    UpdateDocumentRequest,
)
from cmsbase.infrastructure.api.schemas.envelope_schemas import (
    EnvelopeResponse,
    FieldTypeResponse,
    NamespaceResponse,
)

__all__ = [
    "ColumnOrderRequest",
    "CreateCollectionRequest",
    "CreateColumnRequest",
    "CreateDocumentsRequest",
    "EnvelopeResponse",
    "FieldTypeResponse",
    "NamespaceResponse",
    "SortColumnRequest",
    "UpdateCollectionRequest",
    "UpdateColumnRequest",
    "UpdateDocumentRequest",
]
