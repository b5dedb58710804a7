"""Registry mapping field type keys to their descriptors."""

from collections.abc import Iterable, Iterator, Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import Any

from cmsbase.core.logging import get_logger
from cmsbase.domain.services.field_types.base import FieldTypeDescriptor, FieldValidationResult
from cmsbase.domain.services.field_types.choice import (
    BooleanFieldType,
    ReferenceFieldType,
    SelectFieldType,
    TagsFieldType,
)
from cmsbase.domain.services.field_types.date_time import DateTimeFieldType
from cmsbase.domain.services.field_types.media import FileFieldType, ImageFieldType
from cmsbase.domain.services.field_types.number import NumberFieldType, PrivateNumberFieldType
from cmsbase.domain.services.field_types.system import SYSTEM_FIELD_TYPES
from cmsbase.domain.services.field_types.text import (
    ParagraphFieldType,
    PrivateTextFieldType,
    RichTextFieldType,
    SlugFieldType,
    TextFieldType,
    TitleFieldType,
)
from cmsbase.domain.services.field_types.web import EmailFieldType, UrlFieldType

logger = get_logger(__name__)

BUILTIN_FIELD_TYPES: tuple[FieldTypeDescriptor, ...] = (
    TextFieldType(),
    TitleFieldType(),
    ParagraphFieldType(),
    SlugFieldType(),
    RichTextFieldType(),
    PrivateTextFieldType(),
    NumberFieldType(),
    PrivateNumberFieldType(),
    BooleanFieldType(),
    EmailFieldType(),
    UrlFieldType(),
    DateTimeFieldType(),
    SelectFieldType(),
    TagsFieldType(),
    ReferenceFieldType(),
    FileFieldType(),
    ImageFieldType(),
)


class FieldTypeRegistry:
    """Immutable mapping of type key to field type descriptor.

    Built once from caller-supplied descriptors merged with the system
    types ``info`` and ``infoDate``. System types always win over a
    caller descriptor with the same key.

    Example:
        registry = FieldTypeRegistry()
        result = registry.validate("email", "nope", {"required": True}, "Email")
        result.error  # "Not a valid email address"
    """

    def __init__(self, field_types: Iterable[FieldTypeDescriptor] = BUILTIN_FIELD_TYPES) -> None:
        types: dict[str, FieldTypeDescriptor] = {}
        for descriptor in field_types:
            if not descriptor.key:
                raise ValueError(f"Field type {descriptor!r} has no key")
            if descriptor.is_system:
                continue
            types[descriptor.key] = descriptor

        for descriptor in SYSTEM_FIELD_TYPES:
            if descriptor.key in types:
                logger.warning("System field type cannot be overridden", type=descriptor.key)
            types[descriptor.key] = descriptor

        self._types: Mapping[str, FieldTypeDescriptor] = MappingProxyType(types)

    def lookup(self, type_key: str) -> FieldTypeDescriptor | None:
        """Return the descriptor for ``type_key``, or None when unknown."""
        return self._types.get(type_key)

    def validate(
        self,
        type_key: str,
        value: Any,
        rules: Mapping[str, Any] | None = None,
        column_name: str = "",
    ) -> FieldValidationResult:
        """Validate ``value`` with the descriptor for ``type_key``.

        Args:
            type_key: Field type key.
            value: Document value.
            rules: Column validation rules.
            column_name: Display label used in messages.

        Returns:
            FieldValidationResult: Empty error when the value is valid.
        """
        descriptor = self.lookup(type_key)
        if descriptor is None:
            return FieldValidationResult(value=value, error=f"Unknown field type: {type_key}")
        return descriptor.validate(value, rules, column_name)

    def is_system(self, type_key: str) -> bool:
        """True for display-only system types."""
        descriptor = self.lookup(type_key)
        return descriptor is not None and descriptor.is_system

    def user_types(self) -> list[FieldTypeDescriptor]:
        """Descriptors that may be used for user-created columns."""
        return [descriptor for descriptor in self._types.values() if not descriptor.is_system]

    def __contains__(self, type_key: object) -> bool:
        return type_key in self._types

    def __iter__(self) -> Iterator[FieldTypeDescriptor]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)


@lru_cache
def get_field_type_registry() -> FieldTypeRegistry:
    """Get the process-wide registry of built-in field types."""
    return FieldTypeRegistry()
