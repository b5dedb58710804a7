"""Uniform result envelope returned by every service operation."""

from dataclasses import dataclass, field
from typing import Any

from cmsbase.core.exceptions import CmsError


@dataclass
class Envelope:
    """Result of a service operation.

    ``error`` is an empty string on success. A lookup that finds nothing
    is a success with empty ``data``, never an error.

    Attributes:
        data: Rows (list) or a single view (dict).
        error: Human-readable error message, empty when successful.
        error_code: Machine-readable error kind, empty when successful.
        total_pages: Page count for list operations, None otherwise.
    """

    data: Any = field(default_factory=list)
    error: str = ""
    error_code: str = ""
    total_pages: int | None = None

    @property
    def ok(self) -> bool:
        """True when the operation succeeded."""
        return not self.error

    @classmethod
    def failure(cls, error: CmsError | str, code: str = "") -> "Envelope":
        """Build an error envelope with empty data.

        Args:
            error: Domain error or message.
            code: Error code, taken from the domain error when omitted.

        Returns:
            Envelope: ``{data: [], error: message}``.
        """
        if isinstance(error, CmsError):
            return cls(data=[], error=error.message, error_code=code or error.code)
        return cls(data=[], error=error, error_code=code)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire shape ``{data, error[, total_pages]}``."""
        result: dict[str, Any] = {"data": self.data, "error": self.error}
        if self.total_pages is not None:
            result["total_pages"] = self.total_pages
        return result
