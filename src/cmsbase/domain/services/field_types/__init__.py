"""Field type descriptors and the registry that maps type keys to them."""

from cmsbase.domain.services.field_types.base import (
    FieldTypeDescriptor,
    FieldValidationResult,
    is_empty,
)
from cmsbase.domain.services.field_types.registry import (
    BUILTIN_FIELD_TYPES,
    FieldTypeRegistry,
    get_field_type_registry,
)
from cmsbase.domain.services.field_types.system import SYSTEM_FIELD_TYPES

__all__ = [
    "BUILTIN_FIELD_TYPES",
    "FieldTypeDescriptor",
    "FieldTypeRegistry",
    "FieldValidationResult",
    "SYSTEM_FIELD_TYPES",
    "get_field_type_registry",
    "is_empty",
]
