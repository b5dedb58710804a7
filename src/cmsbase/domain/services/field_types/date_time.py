"""Date and time field type."""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from cmsbase.domain.services.field_types.base import (
    FieldTypeDescriptor,
    is_empty,
    required_error,
)


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO 8601 string (``Z`` suffix allowed) into an aware datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class DateTimeFieldType(FieldTypeDescriptor):
    """Date of event, date added.

    A value is an ISO 8601 string, or a ``{"from", "to"}`` mapping when
    the column's ``isRange`` option is set. Checks: required, format,
    then the optional ``betweenDates`` window.
    """

    key = "dateTime"
    title = "DateTime"
    description = "Date of event, date added"
    icon = "calendar"
    options_defaults = {"isRange": False}
    validation_defaults = {"required": False, "betweenDates": {"from": "", "to": ""}}
    initial_value = ""

    def check(self, value: Any, rules: Mapping[str, Any], column_name: str) -> str:
        if error := required_error(value, rules, column_name):
            return error
        if is_empty(value):
            return ""

        raw_dates = [value.get("from"), value.get("to")] if isinstance(value, Mapping) else [value]
        dates = []
        for raw in raw_dates:
            if is_empty(raw):
                continue
            parsed = parse_datetime(raw)
            if parsed is None:
                return "Invalid datetime format. Use ISO 8601 format (e.g., 2024-01-01T12:00:00Z)"
            dates.append(parsed)

        window = rules.get("betweenDates") or {}
        start = parse_datetime(window.get("from")) if isinstance(window, Mapping) else None
        end = parse_datetime(window.get("to")) if isinstance(window, Mapping) else None
        for date in dates:
            if (start and date < start) or (end and date > end):
                return (
                    f"Date must be between {window.get('from') or 'any date'} "
                    f"and {window.get('to') or 'any date'}"
                )
        return ""
