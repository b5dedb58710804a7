"""API Routes for cmsbase."""

from .collections_router import router as collections_router
from .columns_router import router as columns_router
from .documents_router import router as documents_router
from .field_types_router import router as field_types_router
from .namespaces_router import router as namespaces_router

__all__ = [
    "collections_router",
    "columns_router",
    "documents_router",
    "field_types_router",
    "namespaces_router",
]
