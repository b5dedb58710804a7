"""Database abstraction layer using SQLAlchemy 2.0 async.

This module provides the engine, per-namespace session factories and
session management. It supports both SQLite (aiosqlite) and PostgreSQL
(asyncpg) drivers.

Every tenant namespace maps onto the unqualified tables of ``Base.metadata``
through ``schema_translate_map``: a Postgres schema per namespace, or an
attached database per namespace on SQLite.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool, StaticPool

from cmsbase.core.config import Settings, get_settings
from cmsbase.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    Tables are declared without a schema; the namespace is applied at
    execution time.
    """

    pass


def is_memory_database(database_url: str) -> bool:
    """True when the URL points at an in-memory SQLite database."""
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


class DatabaseManager:
    """Database connection and session manager.

    Owns the async engine and one session factory per namespace. On
    SQLite it also keeps the list of attached namespace databases so
    that every new DBAPI connection sees them.
    """

    def __init__(self, settings: Settings | None = None, database_url: str | None = None) -> None:
        """Initialize the database manager.

        Args:
            settings: Settings to use, defaults to the cached application settings.
            database_url: Override for ``settings.database_url``.
        """
        self.settings = settings or get_settings()
        self.database_url = database_url or self.settings.database_url
        self._engine: AsyncEngine | None = None
        self._session_factories: dict[str, async_sessionmaker[AsyncSession]] = {}
        # namespace -> database file attached under that schema name (SQLite only)
        self.sqlite_namespaces: dict[str, str] = {}

    @property
    def dialect_name(self) -> str:
        return make_url(self.database_url).get_backend_name()

    @property
    def is_sqlite(self) -> bool:
        return self.dialect_name == "sqlite"

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine.

        Returns:
            AsyncEngine: SQLAlchemy async engine instance.
        """
        if self._engine is None:
            options: dict[str, Any] = {"echo": self.settings.db_echo}
            if self.is_sqlite:
                options["connect_args"] = {"check_same_thread": False}
                # An in-memory database only lives as long as its single connection
                options["poolclass"] = StaticPool if is_memory_database(self.database_url) else NullPool
            else:
                options.update(
                    pool_size=self.settings.db_pool_size,
                    max_overflow=self.settings.db_max_overflow,
                    pool_timeout=self.settings.db_pool_timeout,
                    pool_recycle=self.settings.db_pool_recycle,
                )

            self._engine = create_async_engine(self.database_url, **options)
            if self.is_sqlite:
                self._register_sqlite_listeners(self._engine)

            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
                dialect=self.dialect_name,
            )
        return self._engine

    def _register_sqlite_listeners(self, engine: AsyncEngine) -> None:
        """Enable foreign keys and attach known namespaces on each new connection."""

        @event.listens_for(engine.sync_engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            if self.settings.db_sqlite_foreign_keys:
                cursor.execute("PRAGMA foreign_keys=ON")
            for namespace, path in self.sqlite_namespaces.items():
                cursor.execute(f'ATTACH DATABASE ? AS "{namespace}"', (path,))
            cursor.close()

    def sqlite_namespace_path(self, namespace: str) -> str:
        """File that backs ``namespace`` next to the main SQLite database."""
        if is_memory_database(self.database_url):
            return ":memory:"
        main = Path(make_url(self.database_url).database or ".")
        return str(main.with_name(f"{main.stem}_{namespace}.db"))

    def session_factory(self, namespace: str) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory bound to ``namespace``.

        Args:
            namespace: Tenant namespace key (already validated).

        Returns:
            async_sessionmaker: Factory whose sessions address the namespace's tables.
        """
        factory = self._session_factories.get(namespace)
        if factory is None:
            bound = self.engine.execution_options(schema_translate_map={None: namespace})
            factory = async_sessionmaker(
                bind=bound,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            self._session_factories[namespace] = factory
            logger.debug("Session factory created", namespace=namespace)
        return factory

    @asynccontextmanager
    async def session(self, namespace: str) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session scoped to one namespace.

        Yields:
            AsyncSession: SQLAlchemy async session.

        Example:
            async with db.session("acme") as session:
                async with session.begin():
                    await session.execute(...)
        """
        async with self.session_factory(namespace)() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def disconnect(self) -> None:
        """Close the database engine and all connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factories.clear()
            logger.info("Database engine disposed")

    async def check_connection(self) -> bool:
        """Check if database connection is working.

        Returns:
            bool: True if connection is successful, False otherwise.
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                logger.debug("Database connection check successful")
                return True
        except (SQLAlchemyError, OSError) as e:
            logger.error("Database connection check failed", error=str(e))
            return False


# Global database manager instance
_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Get the global database manager instance.

    Returns:
        DatabaseManager: Global database manager instance.
    """
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


def set_db_manager(manager: DatabaseManager | None) -> None:
    """Replace the global database manager (used by tests and the CLI)."""
    global _db_manager
    _db_manager = manager


async def init_database() -> None:
    """Initialize the database on application startup.

    Checks connectivity and, when configured, provisions the default
    namespace.
    """
    from cmsbase.infrastructure.persistence.namespace import NamespaceProvisioner

    db = get_db_manager()
    settings = db.settings

    # Create database directory if using a SQLite file
    if db.is_sqlite and not is_memory_database(db.database_url):
        db_dir = Path(make_url(db.database_url).database or ".").parent
        db_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Database directory created", path=str(db_dir))

    if not await db.check_connection():
        logger.error("Database connection failed")
        raise RuntimeError("Failed to connect to database")

    if settings.provision_default_namespace:
        await NamespaceProvisioner(db).provision(settings.default_namespace)


async def close_database() -> None:
    """Close the database connection on application shutdown."""
    db = get_db_manager()
    await db.disconnect()
