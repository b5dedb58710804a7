"""Repositories for the per-namespace relations."""

from cmsbase.infrastructure.persistence.repositories.collection_repository import CollectionRepository
from cmsbase.infrastructure.persistence.repositories.column_repository import ColumnRepository
from cmsbase.infrastructure.persistence.repositories.document_repository import (
    DocumentRepository,
    flatten_document,
)

__all__ = [
    "CollectionRepository",
    "ColumnRepository",
    "DocumentRepository",
    "flatten_document",
]
