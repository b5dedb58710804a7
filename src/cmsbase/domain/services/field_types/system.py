"""Display-only system field types.

These back the built-in audit columns. They cannot be created as user
columns, replaced, or removed from the registry, and documents may not
write to them.
"""

from collections.abc import Mapping
from typing import Any

from cmsbase.domain.services.field_types.base import FieldTypeDescriptor, is_empty


class InfoFieldType(FieldTypeDescriptor):
    key = "info"
    title = "Information"
    description = "Non-editable text"
    is_system = True
    initial_value = ""

    def check(self, value: Any, rules: Mapping[str, Any], column_name: str) -> str:
        if is_empty(value):
            return ""
        return f"{column_name} is read-only"


class InfoDateFieldType(InfoFieldType):
    key = "infoDate"
    description = "Non-editable date"


SYSTEM_FIELD_TYPES: tuple[FieldTypeDescriptor, ...] = (InfoFieldType(), InfoDateFieldType())
