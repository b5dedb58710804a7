"""Helpers shared by the repositories.

Column selections and filters arrive from callers as plain names; they
are resolved against the table's real columns here so no caller string
ever reaches SQL text.
"""

from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import ColumnElement, Table, and_
from sqlalchemy.engine import Row
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cmsbase.core.exceptions import DuplicateError, ValidationError
from cmsbase.core.logging import get_logger

logger = get_logger(__name__)

# A list of column names, an alias -> column name mapping, or "*" for every column
ColumnSelector = Sequence[str] | Mapping[str, str] | None
ALL_COLUMNS = "*"

# {"column": value} for equality, or (column, operator, value) triples
WhereClause = Mapping[str, Any] | Sequence[tuple[str, str, Any]]

OPERATORS = {
    "=": lambda column, value: column == value,
    "!=": lambda column, value: column != value,
    "<": lambda column, value: column < value,
    "<=": lambda column, value: column <= value,
    ">": lambda column, value: column > value,
    ">=": lambda column, value: column >= value,
    "in": lambda column, value: column.in_(list(value)),
}


def resolve_column(table: Table, name: str) -> ColumnElement[Any]:
    """Return ``table.c[name]`` or raise ValidationError for unknown names."""
    if not isinstance(name, str) or name not in table.c:
        raise ValidationError(f"Unknown column '{name}' for {table.name}")
    return table.c[name]


def select_columns(table: Table, selector: ColumnSelector, default: Sequence[str] | None = None) -> list[ColumnElement[Any]]:
    """Resolve a column selector to labelled table columns.

    Args:
        table: Table to select from.
        selector: Column names, an alias mapping, ``"*"``, or None.
        default: Names used when ``selector`` is empty; all columns when None.

    Returns:
        List of column expressions.

    Raises:
        ValidationError: If a name is not a column of ``table``.
    """
    if not selector:
        if default is None:
            return list(table.c)
        selector = default
    if selector == ALL_COLUMNS:
        return list(table.c)
    if isinstance(selector, Mapping):
        return [resolve_column(table, name).label(alias) for alias, name in selector.items()]
    if isinstance(selector, str):
        selector = [selector]
    return [resolve_column(table, name) for name in selector]


def build_where(table: Table, where: WhereClause) -> ColumnElement[bool]:
    """Turn a where clause into a SQL expression.

    Raises:
        ValidationError: On unknown columns or operators, or an empty clause.
    """
    if not where:
        raise ValidationError("A filter condition is required")

    if isinstance(where, Mapping):
        triples = [(name, "=", value) for name, value in where.items()]
    else:
        triples = list(where)

    conditions = []
    for triple in triples:
        if len(triple) != 3:
            raise ValidationError("Filter conditions must be (column, operator, value)")
        name, operator, value = triple
        if operator not in OPERATORS:
            raise ValidationError(f"Unsupported filter operator '{operator}'")
        conditions.append(OPERATORS[operator](resolve_column(table, name), value))
    return and_(*conditions)


def rows_to_dicts(rows: Sequence[Row[Any]]) -> list[dict[str, Any]]:
    return [dict(row._mapping) for row in rows]


def is_unique_violation(error: IntegrityError) -> bool:
    """True when ``error`` comes from a unique or primary key constraint."""
    original = error.orig
    code = getattr(original, "sqlstate", None) or getattr(original, "pgcode", None)
    if code is not None:
        return code == "23505"
    return "unique constraint" in str(original).lower()


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run a block in a transaction, joining the caller's if one is open."""
    if session.in_transaction():
        yield session
    else:
        async with session.begin():
            yield session


@asynccontextmanager
async def translate_integrity_errors(table: str) -> AsyncIterator[None]:
    """Raise DuplicateError for unique violations; re-raise other integrity errors."""
    try:
        yield
    except IntegrityError as e:
        if is_unique_violation(e):
            logger.info("Unique constraint violated", table=table)
            raise DuplicateError() from e
        raise
