"""Static schema validation for collection payloads.

Validates the shape of data passed to collection insert and update
before anything reaches storage.
"""

from dataclasses import dataclass
from typing import Any

from cmsbase.domain.entities import CollectionType

COLLECTION_FIELDS = frozenset({"name", "type", "roles", "column_order", "is_published"})


@dataclass
class CollectionValidationError:
    """A single collection validation error."""

    field: str
    message: str
    code: str


class CollectionValidator:
    """Validator for collection insert and update payloads."""

    MIN_NAME_LENGTH = 1
    MAX_NAME_LENGTH = 100

    @classmethod
    def validate_name(cls, name: Any) -> list[CollectionValidationError]:
        """Validate a collection name.

        Args:
            name: The collection name to validate.

        Returns:
            List of validation errors (empty if valid).
        """
        if not isinstance(name, str) or len(name.strip()) < cls.MIN_NAME_LENGTH:
            return [CollectionValidationError(field="name", message="Name is required.", code="required")]
        if len(name) > cls.MAX_NAME_LENGTH:
            return [
                CollectionValidationError(
                    field="name",
                    message=f"Name must be less than {cls.MAX_NAME_LENGTH} characters.",
                    code="too_long",
                )
            ]
        return []

    @classmethod
    def validate_type(cls, collection_type: Any) -> list[CollectionValidationError]:
        """Validate that the type is ``single`` or ``multiple``."""
        allowed = [t.value for t in CollectionType]
        if collection_type not in allowed:
            return [
                CollectionValidationError(
                    field="type",
                    message=f"Type must be one of: {', '.join(allowed)}.",
                    code="invalid_type",
                )
            ]
        return []

    @classmethod
    def validate_string_list(cls, value: Any, field: str) -> list[CollectionValidationError]:
        """Validate a list of strings (roles, column order)."""
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            return [
                CollectionValidationError(
                    field=field,
                    message=f"{field} must be a list of strings.",
                    code="invalid_list",
                )
            ]
        return []

    @classmethod
    def validate(cls, data: Any, partial: bool = False) -> list[CollectionValidationError]:
        """Validate a collection payload.

        Args:
            data: Payload for insert (``partial=False``) or update (``partial=True``).
            partial: Only validate keys that are present.

        Returns:
            List of validation errors (empty if valid).
        """
        if not isinstance(data, dict) or not data:
            return [CollectionValidationError(field="data", message="Data is required.", code="required")]

        errors: list[CollectionValidationError] = []

        for key in data:
            if key not in COLLECTION_FIELDS:
                errors.append(
                    CollectionValidationError(
                        field=key,
                        message=f"Unknown collection attribute '{key}'.",
                        code="unknown_field",
                    )
                )

        if not partial or "name" in data:
            errors.extend(cls.validate_name(data.get("name")))
        if "type" in data or not partial:
            errors.extend(cls.validate_type(data.get("type", CollectionType.MULTIPLE.value)))
        for field in ("roles", "column_order"):
            if field in data:
                errors.extend(cls.validate_string_list(data[field], field))
        if "is_published" in data and not isinstance(data["is_published"], bool):
            errors.append(
                CollectionValidationError(
                    field="is_published",
                    message="is_published must be true or false.",
                    code="invalid_type",
                )
            )

        return errors

    @classmethod
    def normalize(cls, data: dict[str, Any], partial: bool = False) -> dict[str, Any]:
        """Return the payload with defaults applied for inserts.

        Call only after :meth:`validate` returned no errors.
        """
        values = {key: value for key, value in data.items() if key in COLLECTION_FIELDS}
        if "name" in values:
            values["name"] = values["name"].strip()
        if not partial:
            values.setdefault("type", CollectionType.MULTIPLE.value)
            values.setdefault("roles", [])
            values.setdefault("column_order", [])
            values.setdefault("is_published", False)
        return values
