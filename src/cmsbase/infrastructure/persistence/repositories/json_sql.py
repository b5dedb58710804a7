"""Dialect-specific JSON expressions.

PostgreSQL uses ``json_build_object``/``json_agg`` and the jsonb ``-``
operator; SQLite uses the JSON1 functions ``json_object``,
``json_group_array`` and ``json_remove``.
"""

import re
from collections.abc import Sequence
from typing import Any

from sqlalchemy import JSON, ColumnElement, Text, cast, func, literal, literal_column, type_coerce
from sqlalchemy.dialects.postgresql import JSONB, aggregate_order_by

OBJECT_KEY_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*$")


def object_key(key: str) -> ColumnElement[str]:
    """Inline SQL string literal for a fixed JSON object key."""
    if not OBJECT_KEY_PATTERN.match(key):
        raise ValueError(f"Invalid JSON object key: {key!r}")
    return literal_column(f"'{key}'", Text)


def sqlite_json_path(key: str) -> str:
    """JSON path for a top-level key, e.g. ``$."title"``."""
    return '$."' + key.replace('"', '') + '"'


class JsonExpressions:
    """Builds JSON SQL expressions for one dialect."""

    def __init__(self, dialect_name: str) -> None:
        self.dialect_name = dialect_name

    @property
    def is_sqlite(self) -> bool:
        return self.dialect_name == "sqlite"

    def embed(self, expr: ColumnElement[Any]) -> ColumnElement[Any]:
        """Mark a stored JSON value so object builders nest it instead of quoting it."""
        if self.is_sqlite:
            return func.json(expr)
        return expr

    def build_object(self, pairs: Sequence[tuple[str, ColumnElement[Any]]]) -> ColumnElement[Any]:
        """``{key: expr, ...}`` as a JSON object expression."""
        args: list[Any] = []
        for key, expr in pairs:
            args.extend([object_key(key), expr])
        if self.is_sqlite:
            return func.json_object(*args)
        return func.json_build_object(*args)

    def aggregate(
        self,
        expr: ColumnElement[Any],
        order_by: Sequence[ColumnElement[Any]] = (),
    ) -> ColumnElement[Any]:
        """Aggregate rows into a JSON array, typed so results deserialize.

        On SQLite the input order of the rows is kept; feed it an ordered
        subquery.
        """
        if self.is_sqlite:
            aggregated = func.json_group_array(expr)
        elif order_by:
            aggregated = func.json_agg(aggregate_order_by(expr, *order_by))
        else:
            aggregated = func.json_agg(expr)
        return type_coerce(aggregated, JSON)

    def text_value(self, column: ColumnElement[Any], key: str) -> ColumnElement[str]:
        """Text-cast value of ``column[key]`` (``data ->> key`` on PostgreSQL)."""
        if self.is_sqlite:
            return cast(func.json_extract(column, sqlite_json_path(key)), Text)
        return column.op("->>", return_type=Text)(cast(literal(key), Text))

    def has_key(self, column: ColumnElement[Any], key: str) -> ColumnElement[bool]:
        """True where the JSON object in ``column`` contains ``key``."""
        if self.is_sqlite:
            return func.json_type(column, sqlite_json_path(key)).is_not(None)
        return column.op("?", is_comparison=True)(cast(literal(key), Text))

    def remove_key(self, column: ColumnElement[Any], key: str) -> ColumnElement[Any]:
        """``column`` with ``key`` removed."""
        if self.is_sqlite:
            return func.json_remove(column, sqlite_json_path(key))
        return column.op("-", return_type=JSONB)(cast(literal(key), Text))
