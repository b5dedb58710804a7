"""Static schema validation for column payloads."""

import re
from dataclasses import dataclass
from typing import Any

from cmsbase.domain.entities import (
    DOCUMENT_SYSTEM_FIELDS,
    RESERVED_COLUMN_IDS,
    NullsPosition,
    SortDirection,
)
from cmsbase.domain.services.field_types import FieldTypeRegistry

COLUMN_FIELDS = frozenset(
    {
        "collection_id",
        "column_name",
        "field_id",
        "type",
        "help",
        "field_options",
        "validation",
        "enable_delete",
        "enable_sort",
        "enable_hide",
        "enable_filter",
        "sort_by",
        "visibility",
        "index",
    }
)
BOOLEAN_FIELDS = ("enable_delete", "enable_sort", "enable_hide", "enable_filter", "visibility")
IMMUTABLE_FIELDS = frozenset({"collection_id", "field_id"})

# Field ids become JSON keys and JSON path segments
FIELD_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass
class ColumnValidationError:
    """A single column validation error."""

    field: str
    message: str
    code: str


class ColumnValidator:
    """Validator for column insert and update payloads."""

    MAX_COLUMN_NAME_LENGTH = 100
    MAX_FIELD_ID_LENGTH = 15

    @classmethod
    def validate_column_name(cls, column_name: Any) -> list[ColumnValidationError]:
        if (
            not isinstance(column_name, str)
            or not column_name.strip()
            or len(column_name) > cls.MAX_COLUMN_NAME_LENGTH
        ):
            return [
                ColumnValidationError(
                    field="column_name",
                    message=f"Must contain between 1 and {cls.MAX_COLUMN_NAME_LENGTH} characters.",
                    code="invalid_length",
                )
            ]
        return []

    @classmethod
    def validate_field_id(cls, field_id: Any) -> list[ColumnValidationError]:
        """Validate a field id.

        Field ids are 1-15 characters of letters, digits, ``_`` or ``-``
        and may not shadow a document system field or a reserved UI column.
        """
        if not isinstance(field_id, str) or not field_id or len(field_id) > cls.MAX_FIELD_ID_LENGTH:
            return [
                ColumnValidationError(
                    field="field_id",
                    message=f"Must contain between 1 and {cls.MAX_FIELD_ID_LENGTH} characters.",
                    code="invalid_length",
                )
            ]
        if not FIELD_ID_PATTERN.match(field_id):
            return [
                ColumnValidationError(
                    field="field_id",
                    message="Must contain only letters, numbers, underscores and hyphens.",
                    code="invalid_format",
                )
            ]
        if field_id in DOCUMENT_SYSTEM_FIELDS or field_id in RESERVED_COLUMN_IDS:
            return [
                ColumnValidationError(
                    field="field_id",
                    message=f"'{field_id}' is reserved.",
                    code="reserved",
                )
            ]
        return []

    @classmethod
    def validate_type(cls, type_key: Any, registry: FieldTypeRegistry) -> list[ColumnValidationError]:
        if not isinstance(type_key, str) or type_key not in registry:
            return [
                ColumnValidationError(
                    field="type",
                    message=f"Unknown field type: {type_key}",
                    code="unknown_type",
                )
            ]
        if registry.is_system(type_key):
            return [
                ColumnValidationError(
                    field="type",
                    message=f"Field type '{type_key}' is reserved for system columns.",
                    code="system_type",
                )
            ]
        return []

    @classmethod
    def validate_index(cls, index: Any) -> list[ColumnValidationError]:
        """Validate an optional ``{direction, nulls}`` index spec."""
        if index is None:
            return []
        directions = [d.value for d in SortDirection]
        nulls = [n.value for n in NullsPosition]
        if (
            not isinstance(index, dict)
            or index.get("direction", SortDirection.ASC.value) not in directions
            or index.get("nulls", NullsPosition.LAST.value) not in nulls
        ):
            return [
                ColumnValidationError(
                    field="index",
                    message="Index must be {direction: asc|desc, nulls: first|last}.",
                    code="invalid_index",
                )
            ]
        return []

    @classmethod
    def validate_settings(cls, data: dict[str, Any]) -> list[ColumnValidationError]:
        """Validate the optional attributes shared by insert and update."""
        errors: list[ColumnValidationError] = []

        if "help" in data and not isinstance(data["help"], str):
            errors.append(ColumnValidationError(field="help", message="Help must be text.", code="invalid_type"))
        for field in BOOLEAN_FIELDS:
            if field in data and not isinstance(data[field], bool):
                errors.append(
                    ColumnValidationError(field=field, message=f"{field} must be true or false.", code="invalid_type")
                )
        for field in ("field_options", "validation"):
            if field in data and data[field] is not None and not isinstance(data[field], dict):
                errors.append(
                    ColumnValidationError(field=field, message=f"{field} must be an object.", code="invalid_type")
                )
        if "sort_by" in data and data["sort_by"] not in [d.value for d in SortDirection]:
            errors.append(
                ColumnValidationError(field="sort_by", message="sort_by must be asc or desc.", code="invalid_sort")
            )
        if "index" in data:
            errors.extend(cls.validate_index(data["index"]))

        return errors

    @classmethod
    def validate_insert(cls, data: Any, registry: FieldTypeRegistry) -> list[ColumnValidationError]:
        """Validate a column insert payload.

        Args:
            data: Column attributes including ``collection_id``.
            registry: Field type registry used to check ``type``.

        Returns:
            List of validation errors (empty if valid).
        """
        if not isinstance(data, dict) or not data:
            return [ColumnValidationError(field="data", message="Data is required.", code="required")]

        errors = [
            ColumnValidationError(field=key, message=f"Unknown column attribute '{key}'.", code="unknown_field")
            for key in data
            if key not in COLUMN_FIELDS
        ]

        collection_id = data.get("collection_id")
        if isinstance(collection_id, bool) or not isinstance(collection_id, int) or collection_id < 1:
            errors.append(
                ColumnValidationError(
                    field="collection_id",
                    message="collection_id must be a positive integer.",
                    code="invalid_type",
                )
            )

        errors.extend(cls.validate_column_name(data.get("column_name")))
        errors.extend(cls.validate_field_id(data.get("field_id")))
        errors.extend(cls.validate_type(data.get("type"), registry))
        errors.extend(cls.validate_settings(data))
        return errors

    @classmethod
    def validate_update(cls, data: Any, registry: FieldTypeRegistry) -> list[ColumnValidationError]:
        """Validate a partial column update; ``field_id`` and ``collection_id`` are immutable."""
        if not isinstance(data, dict) or not data:
            return [ColumnValidationError(field="data", message="Data is required.", code="required")]

        errors: list[ColumnValidationError] = []
        for key in data:
            if key in IMMUTABLE_FIELDS:
                errors.append(
                    ColumnValidationError(field=key, message=f"{key} cannot be changed.", code="immutable")
                )
            elif key not in COLUMN_FIELDS:
                errors.append(
                    ColumnValidationError(field=key, message=f"Unknown column attribute '{key}'.", code="unknown_field")
                )

        if "column_name" in data:
            errors.extend(cls.validate_column_name(data["column_name"]))
        if "type" in data:
            errors.extend(cls.validate_type(data["type"], registry))
        errors.extend(cls.validate_settings(data))
        return errors
