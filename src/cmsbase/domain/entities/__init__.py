"""Domain entities for cmsbase."""

from cmsbase.domain.entities.collection import (
    ACTION_COLUMN_ID,
    AUDIT_FIELDS,
    DOCUMENT_SYSTEM_FIELDS,
    RESERVED_COLUMN_IDS,
    SELECT_COLUMN_ID,
    CollectionType,
    NullsPosition,
    SortDirection,
)
from cmsbase.domain.entities.envelope import Envelope
from cmsbase.domain.entities.ordering import OrderBy

__all__ = [
    "ACTION_COLUMN_ID",
    "AUDIT_FIELDS",
    "CollectionType",
    "DOCUMENT_SYSTEM_FIELDS",
    "Envelope",
    "NullsPosition",
    "OrderBy",
    "RESERVED_COLUMN_IDS",
    "SELECT_COLUMN_ID",
    "SortDirection",
]
