"""Boolean, list and reference field types."""

from collections.abc import Mapping
from typing import Any

from cmsbase.domain.services.field_types.base import (
    FieldTypeDescriptor,
    disallowed_characters_error,
    is_empty,
    items_error,
    length_error,
    required_error,
)


class BooleanFieldType(FieldTypeDescriptor):
    """Yes or no, true or false."""

    key = "boolean"
    title = "Boolean"
    description = "Yes or no, true or false"
    icon = "toggle-left"
    validation_defaults = {"required": False}
    initial_value = False

    def check(self, value: Any, rules: Mapping[str, Any], column_name: str) -> str:
        if error := required_error(value, rules, column_name):
            return error
        if value is None or isinstance(value, bool):
            return ""
        return f"{column_name} must be true or false"


class SelectFieldType(FieldTypeDescriptor):
    """One or more items picked from the column's ``items`` option.

    Values are lists of ``{"id", "value"}`` items. When the column
    configures items, every selected item must be one of them.
    """

    key = "select"
    title = "Select"
    description = "Select item(s) from a list"
    icon = "text-cursor-input"
    options_defaults = {"items": [], "multiple": False}
    validation_defaults = {"required": False, "minItems": 0, "maxItems": 0}
    initial_value: list[Any] = []

    def check(self, value: Any, rules: Mapping[str, Any], column_name: str) -> str:
        if error := required_error(value, rules, column_name):
            return error
        if is_empty(value):
            return ""
        if not isinstance(value, list):
            return f"{column_name} must be a list of items"
        for item in value:
            if not isinstance(item, Mapping) or "value" not in item:
                return f"{column_name} items must have a value"
        return items_error(value, rules, column_name)


class TagsFieldType(FieldTypeDescriptor):
    """Free-form list of short labels.

    Checks: required, item count, then each tag's disallowed characters
    and length.
    """

    key = "tags"
    title = "Tags"
    description = "Labels and keywords"
    icon = "tags"
    validation_defaults = {
        "required": False,
        "minItems": 0,
        "maxItems": 0,
        "minLength": 0,
        "maxLength": 0,
        "disallowCharacters": "",
    }
    initial_value: list[str] = []

    def check(self, value: Any, rules: Mapping[str, Any], column_name: str) -> str:
        if error := required_error(value, rules, column_name):
            return error
        if is_empty(value):
            return ""
        if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
            return f"{column_name} must be a list of tags"
        if error := items_error(value, rules, column_name):
            return error
        for tag in value:
            if error := disallowed_characters_error(tag, rules) or length_error(tag, rules, column_name):
                return error
        return ""


class ReferenceFieldType(FieldTypeDescriptor):
    """Link to documents of another collection.

    Values are lists of document ids (or ``{"id": ...}`` objects); the
    target collection is named in ``field_options["collection"]``.
    """

    key = "reference"
    title = "Reference"
    description = "Link between collections"
    icon = "replace"
    options_defaults = {"collection": ""}
    validation_defaults = {"required": False, "minItems": 0, "maxItems": 0}
    initial_value: list[Any] = []

    def check(self, value: Any, rules: Mapping[str, Any], column_name: str) -> str:
        if error := required_error(value, rules, column_name):
            return error
        if is_empty(value):
            return ""
        references = value if isinstance(value, list) else [value]
        for reference in references:
            if isinstance(reference, Mapping):
                reference = reference.get("id")
            if isinstance(reference, bool) or not isinstance(reference, (int, str)):
                return f"{column_name} must reference documents by id"
        return items_error(references, rules, column_name)
