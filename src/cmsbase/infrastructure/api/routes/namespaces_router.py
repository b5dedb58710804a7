"""Namespace API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from cmsbase.core.logging import get_logger
from cmsbase.infrastructure.api.dependencies import Database, get_user_id, get_valid_namespace
from cmsbase.infrastructure.api.schemas import EnvelopeResponse, NamespaceResponse
from cmsbase.infrastructure.persistence.namespace import NamespaceProvisioner

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/{namespace}/provision",
    response_model=EnvelopeResponse,
    dependencies=[Depends(get_user_id)],
)
async def provision_namespace(
    namespace: Annotated[str, Depends(get_valid_namespace)],
    db: Database,
) -> JSONResponse:
    """Create a namespace and its tables. Provisioning twice is harmless.

    Answers 201 when something was created and 200 when the namespace
    already existed.
    """
    created = await NamespaceProvisioner(db).provision(namespace)
    result = NamespaceResponse(namespace=namespace, created=created)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        content=jsonable_encoder({"data": [result.model_dump()], "error": ""}),
    )
