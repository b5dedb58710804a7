"""Document API routes.

Provides the documents view of a collection plus document insert,
merge-update and delete.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from cmsbase.infrastructure.api.dependencies import (
    Documents,
    UserId,
    envelope_response,
    get_user_id,
)
from cmsbase.infrastructure.api.schemas import (
    CreateDocumentsRequest,
    EnvelopeResponse,
    UpdateDocumentRequest,
)
from cmsbase.infrastructure.persistence.repositories.base import ALL_COLUMNS

router = APIRouter()


@router.get("/documents/{collection_name}", response_model=EnvelopeResponse)
async def get_documents(
    collection_name: str,
    service: Documents,
    page: int = Query(default=1, ge=1, description="Page number"),
    limit: int | None = Query(default=None, ge=1, description="Documents per page"),
    sort: str = Query(default="id", description="System field or field id to sort on"),
    direction: Literal["asc", "desc"] = Query(default="asc"),
    nulls: Literal["first", "last"] = Query(default="last"),
) -> JSONResponse:
    """Collection metadata, columns and one sorted page of flattened documents.

    An unknown collection answers 200 with ``data: {}`` and ``total_pages: 0``.
    """
    envelope = await service.get(collection_name, page=page, limit=limit, order_by=(sort, direction, nulls))
    return envelope_response(envelope)


@router.post(
    "/collections/{collection_id}/documents",
    status_code=status.HTTP_201_CREATED,
    response_model=EnvelopeResponse,
)
async def create_documents(
    collection_id: int,
    request: CreateDocumentsRequest,
    service: Documents,
    user_id: UserId,
) -> JSONResponse:
    """Insert one document or a batch; every record is validated against the columns."""
    envelope = await service.insert(collection_id, request.data, user_id, returning=ALL_COLUMNS)
    return envelope_response(envelope, status.HTTP_201_CREATED)


@router.patch("/documents/{document_id}", response_model=EnvelopeResponse)
async def update_document(
    document_id: int,
    request: UpdateDocumentRequest,
    service: Documents,
    user_id: UserId,
) -> JSONResponse:
    """Merge a partial payload into a document; keys not sent are kept."""
    envelope = await service.update(document_id, request.data, user_id, returning=ALL_COLUMNS)
    return envelope_response(envelope)


@router.delete("/documents", response_model=EnvelopeResponse, dependencies=[Depends(get_user_id)])
async def delete_documents(
    service: Documents,
    ids: list[int] = Query(..., description="Document ids, repeat the parameter for several"),
) -> JSONResponse:
    """Delete documents by id; unknown ids are ignored."""
    return envelope_response(await service.remove(ids))
