"""Integration tests for the HTTP API."""

import pytest


async def create_posts(client, api_url, headers) -> int:
    response = await client.post(f"{api_url}/collections", json={"name": "posts"}, headers=headers)
    assert response.status_code == 201
    return response.json()["data"][0]["id"]


async def add_title_column(client, api_url, headers, collection_id: int) -> None:
    response = await client.post(
        f"{api_url}/collections/{collection_id}/columns",
        json={"column_name": "Title", "field_id": "title", "type": "text", "validation": {"required": True}},
        headers=headers,
    )
    assert response.status_code == 201


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_ready(self, client):
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_correlation_id_is_echoed(self, client):
        response = await client.get("/live", headers={"X-Correlation-ID": "abc123"})
        assert response.headers["X-Correlation-ID"] == "abc123"


class TestNamespaces:
    @pytest.mark.asyncio
    async def test_provision(self, client, headers):
        created = await client.post("/api/v1/namespaces/tenant_b/provision", headers=headers)
        again = await client.post("/api/v1/namespaces/tenant_b/provision", headers=headers)

        assert created.status_code == 201
        assert created.json() == {"data": [{"namespace": "tenant_b", "created": True}], "error": ""}
        assert again.status_code == 200
        assert again.json()["data"][0]["created"] is False

    @pytest.mark.asyncio
    async def test_invalid_namespace(self, client, headers):
        response = await client.post("/api/v1/namespaces/Bad-Name/provision", headers=headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unprovisioned_namespace(self, client):
        response = await client.get("/api/v1/namespaces/nowhere/collections")
        assert response.status_code == 404
        assert response.json()["detail"] == "Namespace 'nowhere' is not provisioned"


class TestCollections:
    @pytest.mark.asyncio
    async def test_create_and_list(self, client, api_url, headers):
        await create_posts(client, api_url, headers)

        response = await client.get(f"{api_url}/collections", params={"limit": 5})

        assert response.status_code == 200
        body = response.json()
        assert body["error"] == ""
        assert body["total_pages"] == 1
        assert body["data"][0]["name"] == "posts"
        assert body["data"][0]["created_by"] == "user_1"

    @pytest.mark.asyncio
    async def test_mutations_require_user(self, client, api_url):
        response = await client.post(f"{api_url}/collections", json={"name": "posts"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Missing X-User-Id header"

    @pytest.mark.asyncio
    async def test_duplicate_is_conflict(self, client, api_url, headers):
        await create_posts(client, api_url, headers)

        response = await client.post(f"{api_url}/collections", json={"name": "posts"}, headers=headers)

        assert response.status_code == 409
        assert response.json() == {"data": [], "error": "Duplicate, already exists"}

    @pytest.mark.asyncio
    async def test_validation_is_bad_request(self, client, api_url, headers):
        response = await client.post(f"{api_url}/collections", json={"name": " "}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Name is required."

    @pytest.mark.asyncio
    async def test_update_reorder_and_delete(self, client, api_url, headers):
        collection_id = await create_posts(client, api_url, headers)
        await add_title_column(client, api_url, headers, collection_id)

        renamed = await client.patch(
            f"{api_url}/collections/{collection_id}", json={"is_published": True}, headers=headers
        )
        reordered = await client.put(
            f"{api_url}/collections/{collection_id}/column-order",
            json={"column_order": ["_select", "title"]},
            headers=headers,
        )
        summary = await client.get(f"{api_url}/collections/all")
        deleted = await client.delete(f"{api_url}/collections/{collection_id}", headers=headers)

        assert renamed.json()["data"][0]["is_published"] is True
        assert reordered.json()["data"] == [{"id": collection_id, "column_order": ["_select", "title"]}]
        assert summary.json()["data"][0]["columns"][0]["field_id"] == "title"
        assert deleted.json() == {"data": [{"id": collection_id, "name": "posts"}], "error": ""}


class TestColumns:
    @pytest.mark.asyncio
    async def test_column_lifecycle(self, client, api_url, headers):
        collection_id = await create_posts(client, api_url, headers)
        await add_title_column(client, api_url, headers, collection_id)
        columns_url = f"{api_url}/collections/{collection_id}/columns"

        listed = await client.get(columns_url)
        fetched = await client.get(f"{columns_url}/title")
        updated = await client.patch(f"{columns_url}/title", json={"column_name": "Heading"}, headers=headers)
        immutable = await client.patch(f"{columns_url}/title", json={"field_id": "heading"}, headers=headers)
        deleted = await client.delete(f"{columns_url}/title", headers=headers)
        missing = await client.get(f"{columns_url}/title")

        assert [column["field_id"] for column in listed.json()["data"]] == ["title"]
        assert fetched.json()["data"][0]["validation"]["required"] is True
        assert updated.json()["data"][0]["column_name"] == "Heading"
        assert immutable.status_code == 400
        assert immutable.json()["error"] == "field_id cannot be changed."
        assert deleted.json()["data"] == [{"id": 1, "field_id": "title"}]
        assert missing.json() == {"data": [], "error": ""}

    @pytest.mark.asyncio
    async def test_reserved_field_id(self, client, api_url, headers):
        collection_id = await create_posts(client, api_url, headers)

        response = await client.post(
            f"{api_url}/collections/{collection_id}/columns",
            json={"column_name": "Id", "field_id": "id", "type": "text"},
            headers=headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "'id' is reserved."

    @pytest.mark.asyncio
    async def test_sort(self, client, api_url, headers):
        collection_id = await create_posts(client, api_url, headers)
        await add_title_column(client, api_url, headers, collection_id)
        await client.post(
            f"{api_url}/collections/{collection_id}/documents",
            json={"data": [{"title": "b"}, {"title": "a"}]},
            headers=headers,
        )

        toggled = await client.post(f"{api_url}/collections/posts/columns/title/sort", headers=headers)
        explicit = await client.post(
            f"{api_url}/collections/posts/columns/title/sort", json={"sort_by": "desc"}, headers=headers
        )

        assert [d["title"] for d in toggled.json()["data"]["documents"]] == ["b", "a"]
        assert [d["title"] for d in explicit.json()["data"]["documents"]] == ["b", "a"]
        assert explicit.json()["total_pages"] == 1


class TestDocuments:
    @pytest.mark.asyncio
    async def test_document_lifecycle(self, client, api_url, headers):
        collection_id = await create_posts(client, api_url, headers)
        await add_title_column(client, api_url, headers, collection_id)

        created = await client.post(
            f"{api_url}/collections/{collection_id}/documents",
            json={"data": {"title": "Hello"}},
            headers=headers,
        )
        updated = await client.patch(f"{api_url}/documents/1", json={"data": {"title": "Hi"}}, headers=headers)
        view = await client.get(f"{api_url}/documents/posts", params={"sort": "title", "direction": "desc"})
        deleted = await client.delete(f"{api_url}/documents", params={"ids": [1, 5]}, headers=headers)

        assert created.status_code == 201
        assert created.json()["data"][0]["data"] == {"title": "Hello"}
        assert updated.json()["data"][0]["data"] == {"title": "Hi"}
        assert view.json()["data"]["documents"][0]["title"] == "Hi"
        assert deleted.json()["data"] == [{"id": 1}]

    @pytest.mark.asyncio
    async def test_document_validation(self, client, api_url, headers):
        collection_id = await create_posts(client, api_url, headers)
        await add_title_column(client, api_url, headers, collection_id)

        response = await client.post(
            f"{api_url}/collections/{collection_id}/documents", json={"data": {}}, headers=headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "DocumentService.insert requires a 'documents' argument"

    @pytest.mark.asyncio
    async def test_unknown_collection_view(self, client, api_url):
        response = await client.get(f"{api_url}/documents/ghosts")

        assert response.status_code == 200
        assert response.json() == {"data": {}, "error": "", "total_pages": 0}


class TestFieldTypes:
    @pytest.mark.asyncio
    async def test_list_field_types(self, client):
        user_types = await client.get("/api/v1/field-types")
        all_types = await client.get("/api/v1/field-types", params={"include_system": True})

        keys = [item["type"] for item in user_types.json()]
        assert "richtext" in keys
        assert "info" not in keys
        assert len(all_types.json()) == len(keys) + 2
