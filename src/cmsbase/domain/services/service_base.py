"""Shared plumbing for the namespace-scoped services.

Every service call opens its own session on the tenant namespace, runs
inside one transaction and turns any raised error into an envelope.
"""

import math
from collections.abc import Sequence
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cmsbase.core.exceptions import ArgumentError, CmsError, ValidationError
from cmsbase.core.logging import get_logger
from cmsbase.domain.entities import Envelope
from cmsbase.domain.services.field_types import FieldTypeRegistry, get_field_type_registry
from cmsbase.infrastructure.persistence.database import DatabaseManager
from cmsbase.infrastructure.persistence.namespace import validate_namespace

logger = get_logger(__name__)

STORAGE_ERROR_MESSAGE = "Unexpected storage error"


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed for ``total`` rows at ``limit`` per page."""
    if total <= 0 or limit <= 0:
        return 0
    return math.ceil(total / limit)


def join_messages(errors: Sequence[Any]) -> str:
    """Join validation error messages into one envelope error."""
    return "; ".join(error.message for error in errors)


class NamespaceService:
    """Base class for services bound to one tenant namespace."""

    name = "Service"

    def __init__(
        self,
        db: DatabaseManager,
        namespace: str,
        registry: FieldTypeRegistry | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            db: Database manager owning the engine.
            namespace: Tenant namespace key.
            registry: Field type registry, the built-in one by default.
        """
        self.db = db
        self.namespace = validate_namespace(namespace)
        self.registry = registry or get_field_type_registry()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session on the namespace and run one transaction in it."""
        async with self.db.session(self.namespace) as session:
            async with session.begin():
                yield session

    def operation(self, method: str) -> str:
        return f"{self.name}.{method}"

    def require(self, method: str, **arguments: Any) -> None:
        """Raise ArgumentError for the first missing argument.

        ``0`` and ``False`` count as missing only for id-like arguments,
        which are never legitimately zero.
        """
        for argument, value in arguments.items():
            if value is None or value == "" or value == [] or value == {} or value == 0:
                raise ArgumentError(self.operation(method), argument)

    def page_bounds(self, page: Any, limit: Any) -> tuple[int, int]:
        """Validate paging arguments, defaulting the limit from settings."""
        settings = self.db.settings
        if limit is None:
            limit = settings.default_page_size
        if page is None:
            page = 1
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise ValidationError("page must be a positive integer")
        if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= settings.max_page_size:
            raise ValidationError(f"limit must be between 1 and {settings.max_page_size}")
        return page, limit

    def failure(self, method: str, error: Exception) -> Envelope:
        """Convert an error raised during ``method`` into an envelope."""
        if isinstance(error, CmsError):
            logger.info(
                "Operation rejected",
                operation=self.operation(method),
                namespace=self.namespace,
                error=error.message,
                code=error.code,
            )
            return Envelope.failure(error)

        logger.error(
            "Storage operation failed",
            operation=self.operation(method),
            namespace=self.namespace,
            error=str(error),
            exc_info=error,
        )
        return Envelope.failure(STORAGE_ERROR_MESSAGE, code="storage_error")


# Errors a service converts into envelopes; anything else is a bug and propagates
HANDLED_ERRORS = (CmsError, SQLAlchemyError)
