"""Email and URL field types."""

import re
from collections.abc import Mapping
from typing import Any

from cmsbase.domain.services.field_types.base import (
    FieldTypeDescriptor,
    blacklist_error,
    disallowed_characters_error,
    is_empty,
    required_error,
)

# Anything@anything.anything, without whitespace or a second @
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# URL validation pattern (simplified)
URL_PATTERN = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)

WEB_VALIDATION_DEFAULTS = {
    "required": False,
    "disallowCharacters": "",
    "blacklist": [],
}


class _PatternFieldType(FieldTypeDescriptor):
    """Text that must match a shape.

    Checks: required, shape, disallowed characters, blacklist.
    """

    pattern: re.Pattern[str]
    shape_message = ""
    validation_defaults = WEB_VALIDATION_DEFAULTS
    initial_value = ""

    def check(self, value: Any, rules: Mapping[str, Any], column_name: str) -> str:
        if error := required_error(value, rules, column_name):
            return error
        if is_empty(value):
            return ""
        if not isinstance(value, str) or not self.pattern.match(value.strip()):
            return self.shape_message
        return disallowed_characters_error(value, rules) or blacklist_error(value, rules)


class EmailFieldType(_PatternFieldType):
    key = "email"
    title = "Email"
    description = "Email address"
    icon = "mail"
    pattern = EMAIL_PATTERN
    shape_message = "Not a valid email address"


class UrlFieldType(_PatternFieldType):
    key = "url"
    title = "URL"
    description = "Website link"
    icon = "link"
    pattern = URL_PATTERN
    shape_message = "Not a valid URL"
