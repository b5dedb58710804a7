"""Collections API routes.

Provides endpoints for listing, creating, updating, reordering and
deleting the collections of a namespace.
"""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from cmsbase.infrastructure.api.dependencies import (
    Collections,
    UserId,
    envelope_response,
    get_user_id,
)
from cmsbase.infrastructure.api.schemas import (
    ColumnOrderRequest,
    CreateCollectionRequest,
    EnvelopeResponse,
    UpdateCollectionRequest,
)
from cmsbase.infrastructure.persistence.repositories.base import ALL_COLUMNS

router = APIRouter()


@router.get("", response_model=EnvelopeResponse)
async def list_collections(
    service: Collections,
    page: int = Query(default=1, ge=1, description="Page number"),
    limit: int | None = Query(default=None, ge=1, description="Collections per page"),
) -> JSONResponse:
    """List one page of collections ordered by id."""
    return envelope_response(await service.get(page=page, limit=limit))


@router.get("/all", response_model=EnvelopeResponse)
async def list_all_collections(service: Collections) -> JSONResponse:
    """Every collection with a summary of its columns, for navigation."""
    return envelope_response(await service.get_all())


@router.post("", status_code=status.HTTP_201_CREATED, response_model=EnvelopeResponse)
async def create_collection(
    request: CreateCollectionRequest,
    service: Collections,
    user_id: UserId,
) -> JSONResponse:
    """Create a collection. A taken name answers 409."""
    envelope = await service.insert(request.model_dump(), user_id, returning=ALL_COLUMNS)
    return envelope_response(envelope, status.HTTP_201_CREATED)


@router.patch("/{collection_id}", response_model=EnvelopeResponse)
async def update_collection(
    collection_id: int,
    request: UpdateCollectionRequest,
    service: Collections,
    user_id: UserId,
) -> JSONResponse:
    """Rename, retype or publish a collection.

    Only the fields present in the body change. Empty data means the
    collection does not exist.
    """
    envelope = await service.update(
        collection_id, request.model_dump(exclude_unset=True), user_id, returning=ALL_COLUMNS
    )
    return envelope_response(envelope)


@router.put("/{collection_id}/column-order", response_model=EnvelopeResponse)
async def reorder_columns(
    collection_id: int,
    request: ColumnOrderRequest,
    service: Collections,
    user_id: UserId,
) -> JSONResponse:
    """Replace the display order of a collection's columns."""
    return envelope_response(await service.reorder_columns(collection_id, request.column_order, user_id))


@router.delete(
    "/{collection_id}",
    response_model=EnvelopeResponse,
    dependencies=[Depends(get_user_id)],
)
async def delete_collection(collection_id: int, service: Collections) -> JSONResponse:
    """Delete a collection with its columns and documents."""
    return envelope_response(await service.remove(collection_id, returning=("id", "name")))
