"""Field type descriptor base class and the shared check helpers.

Each field type validates a single document value against the rule set
stored on its column. Checks run in a fixed order and the first failing
check's message is returned, so callers always see at most one error per
field.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldValidationResult:
    """Outcome of validating one field value.

    Attributes:
        value: The value as validated (possibly normalized).
        error: Error message, empty when the value is valid.
    """

    value: Any
    error: str = ""

    @property
    def is_valid(self) -> bool:
        """True when no check failed."""
        return not self.error


def is_empty(value: Any) -> bool:
    """Return True for None, blank strings and empty containers.

    ``0`` and ``False`` are real values and are never empty.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def to_int(value: Any, default: int = 0) -> int:
    """Coerce a rule bound to int, treating junk as ``default``."""
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def to_number(value: Any) -> float | None:
    """Coerce a document value to a number, or None when it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def format_number(value: Any) -> str:
    """Render a bound without a trailing ``.0`` for whole numbers."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def required_error(value: Any, rules: Mapping[str, Any], column_name: str) -> str:
    """Return the required-field message when a required value is empty."""
    if rules.get("required") and is_empty(value):
        return f"{column_name} field is required"
    return ""


def disallowed_characters_error(value: Any, rules: Mapping[str, Any]) -> str:
    """Return an error when ``value`` contains any configured disallowed character."""
    characters = rules.get("disallowCharacters") or ""
    if not characters or not isinstance(value, str):
        return ""
    if any(character in value for character in characters):
        return f"Must not include {characters} characters"
    return ""


def length_error(value: Any, rules: Mapping[str, Any], column_name: str) -> str:
    """Check min then max length; a zero bound disables that side."""
    if not isinstance(value, str):
        return ""
    min_length = to_int(rules.get("minLength"))
    max_length = to_int(rules.get("maxLength"))
    message = (
        f"{column_name} must have a minimum length of {min_length} "
        f"and a maximum length of {max_length}"
    )
    if min_length and len(value) < min_length:
        return message
    if max_length and len(value) > max_length:
        return message
    return ""


def items_error(values: Any, rules: Mapping[str, Any], column_name: str) -> str:
    """Check the number of items in a list value against minItems/maxItems."""
    if not isinstance(values, (list, tuple)):
        return ""
    min_items = to_int(rules.get("minItems"))
    max_items = to_int(rules.get("maxItems"))
    message = f"{column_name} must have between {min_items} and {max_items} items"
    if min_items and len(values) < min_items:
        return message
    if max_items and len(values) > max_items:
        return message
    return ""


def blacklist_error(value: Any, rules: Mapping[str, Any]) -> str:
    """Return an error when ``value`` is in the configured blacklist."""
    blacklist = rules.get("blacklist") or []
    if isinstance(value, str) and value in blacklist:
        return f"{value} is not allowed"
    return ""


class FieldTypeDescriptor:
    """Behaviour of one field type.

    Subclasses set the class attributes and implement :meth:`check`.

    Attributes:
        key: Type key stored on columns (e.g. ``"text"``).
        title: Human readable name.
        description: Short description shown in column pickers.
        icon: Icon name for presentation layers.
        options_defaults: Default ``field_options`` for new columns.
        validation_defaults: Default ``validation`` rules for new columns.
        initial_value: Value used for a new document when no default is configured.
        is_system: System types are display-only and cannot be user-created.
    """

    key: str = ""
    title: str = ""
    description: str = ""
    icon: str = ""
    options_defaults: Mapping[str, Any] = {}
    validation_defaults: Mapping[str, Any] = {}
    initial_value: Any = None
    is_system: bool = False

    def check(self, value: Any, rules: Mapping[str, Any], column_name: str) -> str:
        """Run the ordered checks for this type and return the first error.

        Args:
            value: Document value for the field.
            rules: Validation rules merged over :attr:`validation_defaults`.
            column_name: Display label used in messages.

        Returns:
            str: Error message, empty when valid.
        """
        raise NotImplementedError

    def validate(
        self,
        value: Any,
        rules: Mapping[str, Any] | None = None,
        column_name: str = "",
    ) -> FieldValidationResult:
        """Validate ``value`` against ``rules``.

        Args:
            value: Document value for the field.
            rules: Column validation rules; missing keys fall back to the defaults.
            column_name: Display label used in messages.

        Returns:
            FieldValidationResult: The value and the first error, if any.
        """
        merged = {**self.validation_defaults, **(rules or {})}
        return FieldValidationResult(value=value, error=self.check(value, merged, column_name or self.key))

    def new_value(self, field_options: Mapping[str, Any] | None = None) -> Any:
        """Initial value for a new document, honouring ``defaultValue`` in field options."""
        if field_options and "defaultValue" in field_options:
            return field_options["defaultValue"]
        initial = self.initial_value
        if isinstance(initial, (list, dict)):
            return type(initial)(initial)
        return initial

    def describe(self) -> dict[str, Any]:
        """Serializable summary used by the field type listing endpoint."""
        return {
            "type": self.key,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "options_defaults": dict(self.options_defaults),
            "validation_defaults": dict(self.validation_defaults),
            "initial_value": self.initial_value,
            "is_system": self.is_system,
        }

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(key={self.key!r})>"
