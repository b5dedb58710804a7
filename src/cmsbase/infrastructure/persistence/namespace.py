"""Tenant namespace provisioning.

A namespace holds the three relations ``collections``,
``collection_columns`` and ``documents``. On PostgreSQL it is a schema;
on SQLite it is an attached database. Provisioning is idempotent.
"""

import re
from pathlib import Path

from sqlalchemy import inspect
from sqlalchemy.engine import Connection

from cmsbase.core.exceptions import NamespaceError
from cmsbase.core.logging import get_logger
from cmsbase.infrastructure.persistence.database import Base, DatabaseManager

logger = get_logger(__name__)

NAMESPACE_PATTERN = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")

# SQLite's own database names
SQLITE_RESERVED_NAMES = frozenset({"main", "temp"})


def validate_namespace(namespace: str) -> str:
    """Validate a namespace key before it is used as a schema name.

    Args:
        namespace: Candidate namespace key.

    Returns:
        str: The namespace, unchanged.

    Raises:
        NamespaceError: If the key is not a safe identifier.
    """
    if (
        not isinstance(namespace, str)
        or not NAMESPACE_PATTERN.match(namespace)
        or namespace in SQLITE_RESERVED_NAMES
        or namespace.startswith("pg_")
        or namespace == "information_schema"
    ):
        raise NamespaceError(
            f"Invalid namespace '{namespace}': use 1-63 lowercase letters, digits or underscores"
        )
    return namespace


def _create_missing_tables(connection: Connection, namespace: str) -> list[str]:
    """Create the namespace's tables that do not exist yet."""
    from cmsbase.infrastructure.persistence import models  # noqa: F401

    inspector = inspect(connection)
    translated = connection.execution_options(schema_translate_map={None: namespace})
    created = []
    for table in Base.metadata.sorted_tables:
        if not inspector.has_table(table.name, schema=namespace):
            table.create(translated)
            created.append(table.name)
    return created


class NamespaceProvisioner:
    """Creates tenant namespaces and their tables."""

    def __init__(self, db: DatabaseManager) -> None:
        self.db = db

    async def provision(self, namespace: str) -> bool:
        """Create ``namespace`` and its tables if they are missing.

        Args:
            namespace: Tenant namespace key.

        Returns:
            bool: True if any table was created, False if everything existed.

        Raises:
            NamespaceError: If the key is invalid.
        """
        validate_namespace(namespace)

        if self.db.is_sqlite:
            self.db.sqlite_namespaces.setdefault(namespace, self.db.sqlite_namespace_path(namespace))

        async with self.db.engine.connect() as conn:
            if self.db.is_sqlite:
                result = await conn.exec_driver_sql("PRAGMA database_list")
                attached = {row[1] for row in result}
                if namespace not in attached:
                    await conn.exec_driver_sql(
                        f'ATTACH DATABASE ? AS "{namespace}"',
                        (self.db.sqlite_namespaces[namespace],),
                    )
            else:
                await conn.exec_driver_sql(f'CREATE SCHEMA IF NOT EXISTS "{namespace}"')

            created = await conn.run_sync(_create_missing_tables, namespace)
            await conn.commit()

        if created:
            logger.info("Namespace provisioned", namespace=namespace, tables=created)
        else:
            logger.debug("Namespace already provisioned", namespace=namespace)
        return bool(created)

    async def exists(self, namespace: str) -> bool:
        """True when all tables of ``namespace`` exist."""
        validate_namespace(namespace)
        if self.db.is_sqlite and namespace not in self.db.sqlite_namespaces:
            path = self.db.sqlite_namespace_path(namespace)
            if path == ":memory:" or not Path(path).exists():
                return False
            # Database file from an earlier process, attach it again
            await self.provision(namespace)
            return True

        def _has_tables(connection: Connection) -> bool:
            from cmsbase.infrastructure.persistence import models  # noqa: F401

            inspector = inspect(connection)
            return all(
                inspector.has_table(table.name, schema=namespace)
                for table in Base.metadata.sorted_tables
            )

        async with self.db.engine.connect() as conn:
            return await conn.run_sync(_has_tables)
