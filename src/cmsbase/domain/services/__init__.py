"""Domain services for cmsbase.

Validators check payloads before they reach storage; the namespace
services orchestrate validation and repositories and return envelopes.
"""

from cmsbase.domain.services.collection_validator import (
    COLLECTION_FIELDS,
    CollectionValidationError,
    CollectionValidator,
)
from cmsbase.domain.services.column_validator import (
    COLUMN_FIELDS,
    ColumnValidationError,
    ColumnValidator,
)
from cmsbase.domain.services.document_validator import (
    DocumentValidationError,
    DocumentValidator,
)
from cmsbase.domain.services.field_types import (
    BUILTIN_FIELD_TYPES,
    FieldTypeDescriptor,
    FieldTypeRegistry,
    FieldValidationResult,
    get_field_type_registry,
)
from cmsbase.domain.services.collection_service import CollectionService
from cmsbase.domain.services.column_service import ColumnService
from cmsbase.domain.services.document_service import DocumentService

__all__ = [
    "BUILTIN_FIELD_TYPES",
    "COLLECTION_FIELDS",
    "COLUMN_FIELDS",
    "CollectionService",
    "CollectionValidationError",
    "CollectionValidator",
    "ColumnService",
    "ColumnValidationError",
    "ColumnValidator",
    "DocumentService",
    "DocumentValidationError",
    "DocumentValidator",
    "FieldTypeDescriptor",
    "FieldTypeRegistry",
    "FieldValidationResult",
    "get_field_type_registry",
]
