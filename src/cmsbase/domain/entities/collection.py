"""Collection, column and document vocabulary shared across layers."""

from enum import Enum


class CollectionType(str, Enum):
    """How many documents a collection is expected to hold."""

    SINGLE = "single"
    MULTIPLE = "multiple"


class SortDirection(str, Enum):
    """Sort direction for columns and document views."""

    ASC = "asc"
    DESC = "desc"


class NullsPosition(str, Enum):
    """Where NULL values land in a sorted document view."""

    FIRST = "first"
    LAST = "last"


# Virtual column ids for the row-selection and row-action UI columns.
# They may appear in a collection's column order but never name a real column.
SELECT_COLUMN_ID = "_select"
ACTION_COLUMN_ID = "_action"
RESERVED_COLUMN_IDS = frozenset({SELECT_COLUMN_ID, ACTION_COLUMN_ID})

# Document attributes stored as relational columns rather than in the payload
DOCUMENT_SYSTEM_FIELDS = (
    "id",
    "collection_id",
    "created_at",
    "created_by",
    "updated_at",
    "updated_by",
)

# Audit fields stamped on every write
AUDIT_FIELDS = ("created_by", "created_at", "updated_by", "updated_at")
