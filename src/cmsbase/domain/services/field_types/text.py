"""Free-text field types."""

from collections.abc import Mapping
from typing import Any

from cmsbase.domain.services.field_types.base import (
    FieldTypeDescriptor,
    disallowed_characters_error,
    is_empty,
    length_error,
    required_error,
)

TEXT_VALIDATION_DEFAULTS = {
    "required": False,
    "minLength": 0,
    "maxLength": 0,
    "disallowCharacters": "",
}


class TextFieldType(FieldTypeDescriptor):
    """Single line of text.

    Checks: required, disallowed characters, min length, max length.
    """

    key = "text"
    title = "Text"
    description = "Title, name, short text"
    icon = "type"
    validation_defaults = TEXT_VALIDATION_DEFAULTS
    initial_value = ""

    def check(self, value: Any, rules: Mapping[str, Any], column_name: str) -> str:
        if error := required_error(value, rules, column_name):
            return error
        if is_empty(value):
            return ""
        if not isinstance(value, str):
            return f"{column_name} must be text"
        return disallowed_characters_error(value, rules) or length_error(value, rules, column_name)


class TitleFieldType(TextFieldType):
    key = "title"
    title = "Title"
    description = "Main title of a document"


class ParagraphFieldType(TextFieldType):
    key = "paragraph"
    title = "Paragraph"
    description = "Paragraphs"
    icon = "align-left"


class SlugFieldType(TextFieldType):
    key = "slug"
    title = "Slug"
    description = "Slug, title, path"


class PrivateTextFieldType(TextFieldType):
    """Text that presentation layers mask by default."""

    key = "privateText"
    title = "Private Text"
    description = "Hidden text"
    icon = "rectangle-ellipsis"


class RichTextFieldType(FieldTypeDescriptor):
    """Formatted text stored as a list of editor nodes."""

    key = "richtext"
    title = "Richtext"
    description = "Text with formatting"
    icon = "file-type"
    validation_defaults = {"required": False}
    initial_value = [{"type": "p", "children": [{"text": ""}]}]

    def check(self, value: Any, rules: Mapping[str, Any], column_name: str) -> str:
        if error := required_error(value, rules, column_name):
            return error
        if is_empty(value) or isinstance(value, (str, list)):
            return ""
        return f"{column_name} must be formatted text"
