"""Integration tests for CollectionService."""

import pytest

from cmsbase.domain.services import CollectionService

USER_ID = "user_1"


async def create(service: CollectionService, name: str) -> int:
    envelope = await service.insert({"name": name}, USER_ID)
    assert envelope.error == ""
    return envelope.data[0]["id"]


@pytest.mark.asyncio
async def test_insert_applies_defaults(collection_service):
    envelope = await collection_service.insert(
        {"name": "posts"}, USER_ID, returning=["name", "type", "roles", "column_order", "is_published"]
    )

    assert envelope.to_dict() == {
        "data": [{"name": "posts", "type": "multiple", "roles": [], "column_order": [], "is_published": False}],
        "error": "",
    }


@pytest.mark.asyncio
async def test_insert_duplicate(collection_service):
    await create(collection_service, "posts")

    envelope = await collection_service.insert({"name": "posts"}, USER_ID)

    assert envelope.to_dict() == {"data": [], "error": "Duplicate, already exists"}
    assert envelope.error_code == "duplicate"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("data", "user_id", "message"),
    [
        (None, USER_ID, "CollectionService.insert requires a 'data' argument"),
        ({}, USER_ID, "CollectionService.insert requires a 'data' argument"),
        ({"name": "posts"}, "", "CollectionService.insert requires a 'user_id' argument"),
    ],
)
async def test_insert_missing_arguments(collection_service, data, user_id, message):
    envelope = await collection_service.insert(data, user_id)

    assert envelope.error == message
    assert envelope.error_code == "missing_argument"
    assert envelope.data == []


@pytest.mark.asyncio
async def test_insert_validation_error(collection_service):
    envelope = await collection_service.insert({"name": " ", "type": "many"}, USER_ID)

    assert envelope.error == "Name is required.; Type must be one of: single, multiple."
    assert envelope.error_code == "validation_error"


@pytest.mark.asyncio
async def test_get_paginates(collection_service):
    for number in range(12):
        await create(collection_service, f"collection {number}")

    first = await collection_service.get(page=1, limit=10)
    second = await collection_service.get(page=2, limit=10)
    beyond = await collection_service.get(page=3, limit=10)

    assert len(first.data) == 10
    assert first.total_pages == 2
    assert len(second.data) == 2
    assert second.total_pages == 2
    assert beyond.to_dict() == {"data": [], "error": "", "total_pages": 0}


@pytest.mark.asyncio
async def test_get_uses_default_page_size(collection_service):
    for number in range(11):
        await create(collection_service, f"collection {number}")

    envelope = await collection_service.get()

    assert len(envelope.data) == 10
    assert envelope.total_pages == 2


@pytest.mark.asyncio
async def test_get_with_column_aliases(collection_service):
    await create(collection_service, "posts")

    envelope = await collection_service.get(columns={"label": "name"})

    assert envelope.data == [{"label": "posts"}]


@pytest.mark.asyncio
async def test_get_unknown_sort_field_falls_back_to_id_ascending(collection_service):
    for name in ("alpha", "bravo", "charlie"):
        await create(collection_service, name)

    envelope = await collection_service.get(columns=["name"], order_by=["ghost", "desc"])

    assert envelope.error == ""
    assert [row["name"] for row in envelope.data] == ["alpha", "bravo", "charlie"]


@pytest.mark.asyncio
async def test_get_rejects_unknown_columns_and_bad_limits(collection_service):
    unknown = await collection_service.get(columns=["nope"])
    assert unknown.error == "Unknown column 'nope' for collections"
    assert unknown.error_code == "validation_error"

    too_large = await collection_service.get(limit=1000)
    assert too_large.error == "limit must be between 1 and 100"


@pytest.mark.asyncio
async def test_lookups(collection_service):
    collection_id = await create(collection_service, "posts")

    by_id = await collection_service.get_by_id(collection_id, ["name"])
    by_name = await collection_service.get_by_name("posts", ["id"])
    missing = await collection_service.get_by_id(99)

    assert by_id.data == [{"name": "posts"}]
    assert by_name.data == [{"id": collection_id}]
    assert missing.to_dict() == {"data": [], "error": ""}


@pytest.mark.asyncio
async def test_get_all_lists_columns(collection_service, column_service):
    collection_id = await create(collection_service, "posts")
    await column_service.insert(
        {"collection_id": collection_id, "column_name": "Title", "field_id": "title", "type": "text"}, USER_ID
    )

    envelope = await collection_service.get_all()

    assert envelope.data[0]["name"] == "posts"
    assert envelope.data[0]["columns"] == [{"field_id": "title", "column_name": "Title", "type": "text"}]


@pytest.mark.asyncio
async def test_update(collection_service):
    collection_id = await create(collection_service, "posts")

    renamed = await collection_service.update(collection_id, {"name": "articles"}, "user_2", ["name", "updated_by"])
    missing = await collection_service.update(99, {"name": "ghost"}, USER_ID)
    bad_id = await collection_service.update("1", {"name": "ghost"}, USER_ID)

    assert renamed.data == [{"name": "articles", "updated_by": "user_2"}]
    assert missing.to_dict() == {"data": [], "error": ""}
    assert bad_id.error == "Collection id must be a number"


@pytest.mark.asyncio
async def test_update_to_taken_name(collection_service):
    await create(collection_service, "posts")
    pages_id = await create(collection_service, "pages")

    envelope = await collection_service.update(pages_id, {"name": "posts"}, USER_ID)

    assert envelope.error_code == "duplicate"


@pytest.mark.asyncio
async def test_reorder_columns(collection_service, column_service):
    collection_id = await create(collection_service, "posts")
    for field_id in ("title", "body"):
        await column_service.insert(
            {"collection_id": collection_id, "column_name": field_id, "field_id": field_id, "type": "text"},
            USER_ID,
        )

    ok = await collection_service.reorder_columns(collection_id, ["_select", "body", "title", "_action"], USER_ID)
    unknown = await collection_service.reorder_columns(collection_id, ["body", "ghost"], USER_ID)
    duplicate = await collection_service.reorder_columns(collection_id, ["body", "body"], USER_ID)

    assert ok.data == [{"id": collection_id, "column_order": ["_select", "body", "title", "_action"]}]
    assert unknown.error == "Unknown columns in column_order: ghost"
    assert duplicate.error == "column_order must not contain duplicates"


@pytest.mark.asyncio
async def test_remove_cascades_to_documents(collection_service, column_service, document_service):
    collection_id = await create(collection_service, "posts")
    await column_service.insert(
        {"collection_id": collection_id, "column_name": "Title", "field_id": "title", "type": "text"}, USER_ID
    )
    await document_service.insert(collection_id, {"title": "hello"}, USER_ID)

    removed = await collection_service.remove(collection_id, ["id", "name"])
    view = await document_service.get("posts")
    document = await document_service.get_by_id(1)

    assert removed.data == [{"id": collection_id, "name": "posts"}]
    assert view.to_dict() == {"data": {}, "error": "", "total_pages": 0}
    assert document.data == []


@pytest.mark.asyncio
async def test_remove_requires_id(collection_service):
    envelope = await collection_service.remove(None)
    assert envelope.error == "CollectionService.remove requires a 'id' argument"
