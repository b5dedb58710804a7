"""Document payload validation against a collection's columns.

Payload values are only ever interpreted here: each value is handed to
its column's field type descriptor, and keys that are not field ids of
the collection are rejected.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from cmsbase.domain.services.field_types import FieldTypeRegistry


@dataclass
class DocumentValidationError:
    """A single document validation error."""

    field: str
    message: str
    code: str


class DocumentValidator:
    """Validates document payloads and fills in initial values."""

    def __init__(self, registry: FieldTypeRegistry) -> None:
        self.registry = registry

    def validate_and_apply_defaults(
        self,
        data: Any,
        columns: Sequence[Mapping[str, Any]],
        partial: bool = False,
    ) -> tuple[dict[str, Any], list[DocumentValidationError]]:
        """Validate a payload against column definitions.

        Args:
            data: The payload (field id to value).
            columns: Column rows with ``field_id``, ``column_name``, ``type``,
                ``validation`` and ``field_options``.
            partial: If True, only validate keys present in ``data`` (for updates).

        Returns:
            Tuple of (processed_data, errors). On insert, columns missing from
            ``data`` receive their configured default or the type's initial value.
        """
        if not isinstance(data, Mapping):
            return {}, [DocumentValidationError(field="data", message="Document data must be an object", code="invalid_type")]

        errors: list[DocumentValidationError] = []
        processed: dict[str, Any] = {}
        by_field_id = {column["field_id"]: column for column in columns}

        for key in data:
            if key not in by_field_id:
                errors.append(
                    DocumentValidationError(
                        field=key,
                        message=f"Unknown field '{key}' not defined in collection",
                        code="unknown_field",
                    )
                )

        for field_id, column in by_field_id.items():
            descriptor = self.registry.lookup(column["type"])
            if descriptor is None:
                errors.append(
                    DocumentValidationError(
                        field=field_id,
                        message=f"Unknown field type: {column['type']}",
                        code="unknown_type",
                    )
                )
                continue

            if field_id in data:
                value = data[field_id]
            elif partial:
                continue
            elif descriptor.is_system:
                continue
            else:
                value = descriptor.new_value(column.get("field_options"))

            result = descriptor.validate(value, column.get("validation"), column.get("column_name") or field_id)
            if result.error:
                errors.append(DocumentValidationError(field=field_id, message=result.error, code="invalid_value"))
            else:
                processed[field_id] = result.value

        return processed, errors
