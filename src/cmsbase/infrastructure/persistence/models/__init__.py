"""SQLAlchemy models for the per-namespace relations."""

from cmsbase.infrastructure.persistence.models.collection import CollectionModel, JSONType
from cmsbase.infrastructure.persistence.models.column import CollectionColumnModel
from cmsbase.infrastructure.persistence.models.document import DocumentModel

__all__ = [
    "CollectionColumnModel",
    "CollectionModel",
    "DocumentModel",
    "JSONType",
]
