"""Column API routes.

Columns are addressed by their collection id and field id. Sorting is
addressed by collection name because it answers with the documents view.
"""

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from cmsbase.infrastructure.api.dependencies import (
    Columns,
    UserId,
    envelope_response,
)
from cmsbase.infrastructure.api.schemas import (
    CreateColumnRequest,
    EnvelopeResponse,
    SortColumnRequest,
    UpdateColumnRequest,
)
from cmsbase.infrastructure.persistence.repositories.base import ALL_COLUMNS

router = APIRouter()


@router.get("/{collection_id}/columns", response_model=EnvelopeResponse)
async def list_columns(collection_id: int, service: Columns) -> JSONResponse:
    """All columns of a collection ordered by id."""
    return envelope_response(await service.list_by_collection(collection_id))


@router.get("/{collection_id}/columns/{field_id}", response_model=EnvelopeResponse)
async def get_column(collection_id: int, field_id: str, service: Columns) -> JSONResponse:
    """One column; empty data when it does not exist."""
    return envelope_response(await service.get_by_field_id(collection_id, field_id))


@router.post(
    "/{collection_id}/columns",
    status_code=status.HTTP_201_CREATED,
    response_model=EnvelopeResponse,
)
async def create_column(
    collection_id: int,
    request: CreateColumnRequest,
    service: Columns,
    user_id: UserId,
) -> JSONResponse:
    """Add a column and update the collection's column order."""
    envelope = await service.insert(
        request.column_data(collection_id),
        user_id,
        returning=ALL_COLUMNS,
        column_order=request.column_order,
    )
    return envelope_response(envelope, status.HTTP_201_CREATED)


@router.patch("/{collection_id}/columns/{field_id}", response_model=EnvelopeResponse)
async def update_column(
    collection_id: int,
    field_id: str,
    request: UpdateColumnRequest,
    service: Columns,
    user_id: UserId,
) -> JSONResponse:
    """Change a column's label, type, options or flags."""
    envelope = await service.update(
        collection_id,
        {"field_id": field_id},
        request.model_dump(exclude_unset=True),
        user_id,
        returning=ALL_COLUMNS,
    )
    return envelope_response(envelope)


@router.delete("/{collection_id}/columns/{field_id}", response_model=EnvelopeResponse)
async def delete_column(
    collection_id: int,
    field_id: str,
    service: Columns,
    user_id: UserId,
) -> JSONResponse:
    """Delete a column and strip its key from every document of the collection."""
    envelope = await service.remove(collection_id, field_id, returning=("id", "field_id"), user_id=user_id)
    return envelope_response(envelope)


@router.post("/{collection_name}/columns/{field_id}/sort", response_model=EnvelopeResponse)
async def sort_by_column(
    collection_name: str,
    field_id: str,
    service: Columns,
    user_id: UserId,
    request: SortColumnRequest | None = None,
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
) -> JSONResponse:
    """Store a column's sort direction and answer with the re-sorted documents view."""
    envelope = await service.sort(
        collection_name,
        field_id,
        user_id,
        sort_by=request.sort_by if request else None,
        page=page,
        limit=limit,
    )
    return envelope_response(envelope)
