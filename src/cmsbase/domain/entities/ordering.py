"""Sort specification for paged reads."""

from collections.abc import Sequence
from dataclasses import dataclass

from cmsbase.domain.entities.collection import NullsPosition, SortDirection


@dataclass(frozen=True)
class OrderBy:
    """A ``(field, direction, nulls)`` sort request.

    Attributes:
        field: Column name or payload key to sort on.
        direction: ``asc`` or ``desc``.
        nulls: ``first`` or ``last``.
    """

    field: str = "id"
    direction: SortDirection = SortDirection.ASC
    nulls: NullsPosition = NullsPosition.LAST

    @classmethod
    def parse(cls, value: "OrderBy | Sequence[str] | None") -> "OrderBy":
        """Build an OrderBy from a tuple/list such as ``["title", "desc", "first"]``.

        Missing parts take their defaults and unrecognised direction or
        nulls values fall back to ``asc`` and ``last``.

        Args:
            value: An OrderBy, a sequence of up to three strings, or None.

        Returns:
            OrderBy: The parsed sort specification.
        """
        if value is None:
            return cls()
        if isinstance(value, OrderBy):
            return value
        if isinstance(value, str):
            value = [value]

        parts = list(value)
        field = parts[0] if parts and parts[0] else "id"

        direction = SortDirection.ASC
        if len(parts) > 1 and parts[1]:
            try:
                direction = SortDirection(str(parts[1]).lower())
            except ValueError:
                direction = SortDirection.ASC

        nulls = NullsPosition.LAST
        if len(parts) > 2 and parts[2]:
            try:
                nulls = NullsPosition(str(parts[2]).lower())
            except ValueError:
                nulls = NullsPosition.LAST

        return cls(field=field, direction=direction, nulls=nulls)
