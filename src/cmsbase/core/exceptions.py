"""Exceptions raised by the content engine.

Repositories and validators raise these; services catch them and turn
them into result envelopes.
"""

DUPLICATE_MESSAGE = "Duplicate, already exists"


class CmsError(Exception):
    """Base class for all content engine errors."""

    code = "cms_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ArgumentError(CmsError):
    """Raised when a required argument is missing or empty."""

    code = "missing_argument"

    def __init__(self, operation: str, argument: str):
        self.operation = operation
        self.argument = argument
        super().__init__(f"{operation} requires a '{argument}' argument")


class ValidationError(CmsError):
    """Raised when supplied data fails a schema or field-type check."""

    code = "validation_error"


class DuplicateError(CmsError):
    """Raised when storage rejects a write because of a unique constraint."""

    code = "duplicate"

    def __init__(self, message: str = DUPLICATE_MESSAGE):
        super().__init__(message)


class NamespaceError(CmsError):
    """Raised when a namespace key is invalid or cannot be provisioned."""

    code = "invalid_namespace"
