"""FastAPI dependencies for namespaces, the acting user and services."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Path, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from cmsbase.core.exceptions import NamespaceError
from cmsbase.core.logging import get_logger
from cmsbase.domain.entities import Envelope
from cmsbase.domain.services import CollectionService, ColumnService, DocumentService
from cmsbase.infrastructure.persistence.database import DatabaseManager, get_db_manager
from cmsbase.infrastructure.persistence.namespace import NamespaceProvisioner, validate_namespace

logger = get_logger(__name__)

# Envelope error codes and the HTTP status they map to; anything else is a 500
ERROR_STATUS = {
    "missing_argument": status.HTTP_400_BAD_REQUEST,
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "invalid_namespace": status.HTTP_400_BAD_REQUEST,
    "duplicate": status.HTTP_409_CONFLICT,
}


def get_database() -> DatabaseManager:
    return get_db_manager()


Database = Annotated[DatabaseManager, Depends(get_database)]


def get_valid_namespace(namespace: Annotated[str, Path(description="Tenant namespace key")]) -> str:
    """Validate the namespace path parameter.

    Raises:
        HTTPException: 400 if the key is not a valid namespace.
    """
    try:
        return validate_namespace(namespace)
    except NamespaceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e


async def get_namespace(
    db: Database,
    namespace: Annotated[str, Depends(get_valid_namespace)],
) -> str:
    """Resolve a provisioned namespace.

    Raises:
        HTTPException: 404 if the namespace has not been provisioned.
    """
    if not await NamespaceProvisioner(db).exists(namespace):
        logger.info("Request for unprovisioned namespace", namespace=namespace)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Namespace '{namespace}' is not provisioned",
        )
    return namespace


Namespace = Annotated[str, Depends(get_namespace)]


def get_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    """Acting user for mutations, taken from the ``X-User-Id`` header.

    Raises:
        HTTPException: 401 if the header is missing or blank.
    """
    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return x_user_id.strip()


UserId = Annotated[str, Depends(get_user_id)]


def get_collection_service(db: Database, namespace: Namespace) -> CollectionService:
    return CollectionService(db, namespace)


def get_column_service(db: Database, namespace: Namespace) -> ColumnService:
    return ColumnService(db, namespace)


def get_document_service(db: Database, namespace: Namespace) -> DocumentService:
    return DocumentService(db, namespace)


Collections = Annotated[CollectionService, Depends(get_collection_service)]
Columns = Annotated[ColumnService, Depends(get_column_service)]
Documents = Annotated[DocumentService, Depends(get_document_service)]


def envelope_response(envelope: Envelope, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    """Render an envelope with the status code matching its error, if any."""
    status_code = success_status
    if not envelope.ok:
        status_code = ERROR_STATUS.get(envelope.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(envelope.to_dict()))
