"""Integration tests for DocumentRepository and the documents view."""

import pytest
import pytest_asyncio

from cmsbase.core.exceptions import ArgumentError
from cmsbase.infrastructure.persistence.repositories import (
    CollectionRepository,
    ColumnRepository,
    DocumentRepository,
)

USER_ID = "user_1"


@pytest_asyncio.fixture
async def repo(db_session) -> DocumentRepository:
    """Documents repository with a ``posts`` collection holding a title column."""
    await CollectionRepository(db_session).insert(
        {"name": "posts", "type": "multiple", "roles": ["editor"], "column_order": [], "is_published": True},
        USER_ID,
    )
    await ColumnRepository(db_session).insert(
        {
            "collection_id": 1,
            "column_name": "Title",
            "field_id": "title",
            "type": "text",
            "validation": {"required": True},
        },
        USER_ID,
    )
    return DocumentRepository(db_session)


@pytest.mark.asyncio
async def test_insert_batch(repo):
    rows = await repo.insert(1, [{"title": "a"}, {"title": "b"}], USER_ID, returning=["id", "data", "created_by"])

    assert rows == [
        {"id": 1, "data": {"title": "a"}, "created_by": USER_ID},
        {"id": 2, "data": {"title": "b"}, "created_by": USER_ID},
    ]
    assert await repo.count(1) == 2


@pytest.mark.asyncio
async def test_insert_requires_records(repo):
    with pytest.raises(ArgumentError) as exc_info:
        await repo.insert(1, [], USER_ID)
    assert exc_info.value.argument == "data"


@pytest.mark.asyncio
async def test_view_shape(repo):
    await repo.insert(1, [{"title": "hello"}], USER_ID)

    view, total = await repo.get_view("posts")

    assert total == 1
    assert view["collection_id"] == 1
    assert view["collection_name"] == "posts"
    assert view["type"] == "multiple"
    assert view["roles"] == ["editor"]
    assert view["column_order"] == ["title"]
    assert view["is_published"] is True

    [column] = view["columns"]
    assert column["field_id"] == "title"
    assert column["validation"] == {"required": True}
    assert column["enable_sort"] is True

    [document] = view["documents"]
    assert document["id"] == 1
    assert document["title"] == "hello"
    assert document["created_by"] == USER_ID
    assert "data" not in document


@pytest.mark.asyncio
async def test_view_of_empty_collection(repo):
    view, total = await repo.get_view("posts")

    assert total == 0
    assert view["documents"] == []
    assert len(view["columns"]) == 1


@pytest.mark.asyncio
async def test_view_of_unknown_collection(repo):
    assert await repo.get_view("pages") == (None, 0)


@pytest.mark.asyncio
async def test_view_sorting(repo):
    await repo.insert(1, [{"title": "b"}, {"title": "a"}, {}, {"title": "c"}], USER_ID)

    async def titles(order_by, page=1, limit=10):
        view, _ = await repo.get_view("posts", page, limit, order_by)
        return [document.get("title") for document in view["documents"]]

    assert await titles(None) == ["b", "a", None, "c"]
    assert await titles(["title", "asc"]) == ["a", "b", "c", None]
    assert await titles(["title", "asc", "first"]) == [None, "a", "b", "c"]
    assert await titles(["title", "desc"]) == ["c", "b", "a", None]
    assert await titles(["id", "desc"]) == ["c", None, "a", "b"]
    assert await titles(["title", "desc"], page=2, limit=2) == ["a", None]
    assert await titles(["unknown", "desc"]) == ["b", "a", None, "c"]


@pytest.mark.asyncio
async def test_update_merges_payload(repo):
    await repo.insert(1, [{"title": "a", "views": 1}], USER_ID)

    rows = await repo.update(1, {"views": 2}, "user_2", returning=["data", "updated_by"])

    assert rows == [{"data": {"title": "a", "views": 2}, "updated_by": "user_2"}]
    assert await repo.update(99, {"views": 2}, USER_ID) == []


@pytest.mark.asyncio
async def test_remove_ignores_unknown_ids(repo):
    await repo.insert(1, [{"title": "a"}, {"title": "b"}], USER_ID)

    rows = await repo.remove([2, 42, 1])

    assert rows == [{"id": 2}, {"id": 1}]
    assert await repo.count(1) == 0


@pytest.mark.asyncio
async def test_remove_single_id(repo):
    await repo.insert(1, [{"title": "a"}], USER_ID)
    assert await repo.remove(1, returning=["id", "collection_id"]) == [{"id": 1, "collection_id": 1}]


@pytest.mark.asyncio
async def test_strip_key_only_touches_documents_with_key(repo):
    await repo.insert(1, [{"title": "a", "body": "x"}, {"body": "y"}], USER_ID)

    assert await repo.strip_key(1, "title") == 1
    first = await repo.get_by_id(1, ["data"])
    assert first["data"] == {"body": "x"}


@pytest.mark.asyncio
async def test_concurrent_merge_updates_are_last_writer_wins(db, monkeypatch):
    namespace = "test_ns"
    async with db.session(namespace) as session:
        await CollectionRepository(session).insert(
            {"name": "posts", "type": "multiple", "roles": [], "column_order": [], "is_published": True},
            USER_ID,
        )
        await DocumentRepository(session).insert(1, [{"title": "a"}], USER_ID)
        await session.commit()

    async with db.session(namespace) as first, db.session(namespace) as second:
        read_payload = first.scalar

        async def read_then_yield(*args, **kwargs):
            # The second writer commits after the first has read its payload.
            payload = await read_payload(*args, **kwargs)
            await DocumentRepository(second).update(1, {"views": 5}, "user_2")
            return payload

        monkeypatch.setattr(first, "scalar", read_then_yield)
        await DocumentRepository(first).update(1, {"likes": 2}, USER_ID)

    async with db.session(namespace) as session:
        row = await DocumentRepository(session).get_by_id(1, ["data", "updated_by"])

    assert row["data"] == {"title": "a", "likes": 2}
    assert row["updated_by"] == USER_ID
