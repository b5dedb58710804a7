"""Numeric field types."""

from collections.abc import Mapping
from typing import Any

from cmsbase.domain.services.field_types.base import (
    FieldTypeDescriptor,
    format_number,
    is_empty,
    required_error,
    to_number,
)


class NumberFieldType(FieldTypeDescriptor):
    """ID, rating, order number.

    Checks: required, numeric, min, max. A zero bound is not enforced.
    """

    key = "number"
    title = "Number"
    description = "ID, rating, order number"
    icon = "hash"
    validation_defaults = {"required": False, "min": 0, "max": 0}
    initial_value = 0

    def check(self, value: Any, rules: Mapping[str, Any], column_name: str) -> str:
        if error := required_error(value, rules, column_name):
            return error
        if is_empty(value):
            return ""

        number = to_number(value)
        if number is None:
            return f"{column_name} must be a number"

        minimum = to_number(rules.get("min")) or 0
        maximum = to_number(rules.get("max")) or 0
        message = (
            f"{column_name} must be a value between "
            f"{format_number(minimum)} and {format_number(maximum)}"
        )
        if minimum and number < minimum:
            return message
        if maximum and number > maximum:
            return message
        return ""


class PrivateNumberFieldType(NumberFieldType):
    key = "privateNumber"
    title = "Private Number"
    description = "Hidden number"
