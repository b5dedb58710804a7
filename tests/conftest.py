"""Pytest configuration for all tests."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from cmsbase.core.config import Settings
from cmsbase.domain.services import CollectionService, ColumnService, DocumentService
from cmsbase.infrastructure.persistence.database import DatabaseManager, set_db_manager
from cmsbase.infrastructure.persistence.namespace import NamespaceProvisioner

NAMESPACE = "test_ns"
USER_ID = "user_1"


@pytest.fixture
def settings() -> Settings:
    """Settings for an in-memory SQLite database."""
    return Settings(
        _env_file=None,
        environment="testing",
        database_url="sqlite+aiosqlite:///:memory:",
        provision_default_namespace=False,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def db(settings: Settings) -> AsyncGenerator[DatabaseManager, None]:
    """Database manager with the test namespace provisioned.

    Every test gets a fresh in-memory database.
    """
    manager = DatabaseManager(settings)
    await NamespaceProvisioner(manager).provision(NAMESPACE)
    yield manager
    await manager.disconnect()


@pytest_asyncio.fixture
async def db_session(db: DatabaseManager) -> AsyncGenerator[AsyncSession, None]:
    """Session on the test namespace; uncommitted work is discarded."""
    async with db.session(NAMESPACE) as session:
        yield session
        await session.rollback()


@pytest.fixture
def collection_service(db: DatabaseManager) -> CollectionService:
    return CollectionService(db, NAMESPACE)


@pytest.fixture
def column_service(db: DatabaseManager) -> ColumnService:
    return ColumnService(db, NAMESPACE)


@pytest.fixture
def document_service(db: DatabaseManager) -> DocumentService:
    return DocumentService(db, NAMESPACE)


@pytest_asyncio.fixture
async def client(db: DatabaseManager) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the API, backed by the test database."""
    from cmsbase.infrastructure.api.app import create_app

    set_db_manager(db)
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    set_db_manager(None)


@pytest.fixture
def headers() -> dict[str, str]:
    return {"X-User-Id": USER_ID}


@pytest.fixture
def api_url() -> str:
    return f"/api/v1/namespaces/{NAMESPACE}"
