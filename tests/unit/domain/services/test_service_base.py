from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from cmsbase.core.config import Settings
from cmsbase.core.exceptions import ArgumentError, DuplicateError, NamespaceError, ValidationError
from cmsbase.domain.services.service_base import (
    STORAGE_ERROR_MESSAGE,
    NamespaceService,
    total_pages,
)


class ExampleService(NamespaceService):
    name = "ExampleService"


@pytest.fixture
def service() -> ExampleService:
    db = MagicMock()
    db.settings = Settings(_env_file=None, default_page_size=10, max_page_size=50)
    return ExampleService(db, "tenant_a")


class TestTotalPages:
    @pytest.mark.parametrize(
        ("total", "limit", "expected"),
        [(0, 10, 0), (1, 10, 1), (10, 10, 1), (12, 10, 2), (5, 0, 0)],
    )
    def test_total_pages(self, total, limit, expected):
        assert total_pages(total, limit) == expected


class TestNamespaceService:
    def test_invalid_namespace(self):
        with pytest.raises(NamespaceError):
            ExampleService(MagicMock(), "Bad Name")

    def test_require(self, service):
        service.require("get", collection_id=3, name="posts")
        with pytest.raises(ArgumentError) as exc_info:
            service.require("get", collection_id=3, data={})
        assert exc_info.value.message == "ExampleService.get requires a 'data' argument"

    @pytest.mark.parametrize("value", [None, "", [], {}, 0])
    def test_require_missing_values(self, service, value):
        with pytest.raises(ArgumentError):
            service.require("remove", ids=value)

    def test_page_bounds(self, service):
        assert service.page_bounds(None, None) == (1, 10)
        assert service.page_bounds(3, 50) == (3, 50)

    @pytest.mark.parametrize(("page", "limit"), [(0, 10), (1, 0), (1, 51), ("2", 10), (True, 10)])
    def test_page_bounds_rejects(self, service, page, limit):
        with pytest.raises(ValidationError):
            service.page_bounds(page, limit)

    def test_failure_from_domain_error(self, service):
        envelope = service.failure("insert", DuplicateError())
        assert envelope.to_dict() == {"data": [], "error": "Duplicate, already exists"}
        assert envelope.error_code == "duplicate"

    def test_failure_from_storage_error(self, service):
        envelope = service.failure("insert", OperationalError("SELECT 1", {}, Exception("disk I/O error")))
        assert envelope.error == STORAGE_ERROR_MESSAGE
        assert envelope.error_code == "storage_error"
