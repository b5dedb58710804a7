"""Field type registry API routes."""

from fastapi import APIRouter, Query

from cmsbase.domain.services import get_field_type_registry
from cmsbase.infrastructure.api.schemas import FieldTypeResponse

router = APIRouter()


@router.get("", response_model=list[FieldTypeResponse])
async def list_field_types(
    include_system: bool = Query(default=False, description="Include display-only system types"),
) -> list[FieldTypeResponse]:
    """Field types available for columns, with their default options and rules."""
    registry = get_field_type_registry()
    descriptors = registry if include_system else registry.user_types()
    return [FieldTypeResponse(**descriptor.describe()) for descriptor in descriptors]
