import pytest
from fastapi.testclient import TestClient

from golink_app.config import Settings
from golink_app.storage.exceptions import BackendFaultError
from golink_app.storage.strategies import InMemoryGolinkStorage
from main import build_storage


def create(client: TestClient, short_link="go/test", url="https://example.com"):
    return client.post("/golinks", json={"short_link": short_link, "url": url})


class TestGolinkAPI:
    """Test the HTTP surface"""

    def test_create_golink(self, client: TestClient):
        response = create(client)
        assert response.status_code == 201

        data = response.json()
        assert data["short_link"] == "go/test"
        assert data["url"] == "https://example.com"
        assert isinstance(data["id"], str)
        assert isinstance(data["created_at"], str)

    def test_create_invalid_pattern(self, client: TestClient):
        response = create(client, short_link="invalid")
        assert response.status_code == 400
        assert "Invalid golink pattern" in response.json()["error"]

    def test_create_duplicate(self, client: TestClient):
        assert create(client).status_code == 201

        response = create(client, url="https://other.com")
        assert response.status_code == 409
        assert "already exists" in response.json()["error"]

    def test_create_missing_field(self, client: TestClient):
        response = client.post("/golinks", json={"short_link": "go/test"})
        assert response.status_code == 422

    def test_get_golink(self, client: TestClient):
        create(client)

        response = client.get("/golinks/go/test")
        assert response.status_code == 200
        data = response.json()
        assert data["short_link"] == "go/test"
        assert data["url"] == "https://example.com"

    def test_get_nonexistent(self, client: TestClient):
        response = client.get("/golinks/go/nonexistent")
        assert response.status_code == 404
        assert "not found" in response.json()["error"]

    def test_update_golink(self, client: TestClient):
        created = create(client).json()

        response = client.put("/golinks/go/test", json={"url": "https://updated.com"})
        assert response.status_code == 200
        data = response.json()
        assert data["url"] == "https://updated.com"
        assert data["id"] == created["id"]
        assert data["created_at"] == created["created_at"]

    def test_update_ignores_short_link_in_body(self, client: TestClient):
        create(client)

        response = client.put(
            "/golinks/go/test",
            json={"url": "https://updated.com", "short_link": "go/renamed"}
        )
        assert response.status_code == 200
        assert response.json()["short_link"] == "go/test"
        assert client.get("/golinks/go/renamed").status_code == 404

    def test_update_nonexistent(self, client: TestClient):
        response = client.put("/golinks/go/nonexistent", json={"url": "https://updated.com"})
        assert response.status_code == 404
        assert "not found" in response.json()["error"]

    def test_delete_golink(self, client: TestClient):
        create(client)

        response = client.delete("/golinks/go/test")
        assert response.status_code == 200
        assert "deleted successfully" in response.json()["message"]

        assert client.get("/golinks/go/test").status_code == 404

    def test_delete_nonexistent(self, client: TestClient):
        response = client.delete("/golinks/go/nonexistent")
        assert response.status_code == 404
        assert "not found" in response.json()["error"]


class TestListAPI:
    """Test both list response shapes"""

    def test_empty_list(self, client: TestClient):
        response = client.get("/golinks")
        assert response.status_code == 200
        assert response.json() == []

    def test_unpaginated_list(self, client: TestClient):
        for name in ["go/a", "go/b", "go/c"]:
            create(client, short_link=name)

        response = client.get("/golinks")
        assert response.status_code == 200
        assert [g["short_link"] for g in response.json()] == ["go/c", "go/b", "go/a"]

    def test_paginated_list(self, client: TestClient):
        for name in ["go/a", "go/b", "go/c"]:
            create(client, short_link=name)

        response = client.get("/golinks", params={"page": 2, "page_size": 2})
        assert response.status_code == 200

        body = response.json()
        assert [g["short_link"] for g in body["data"]] == ["go/a"]
        assert body["pagination"] == {
            "page": 2,
            "page_size": 2,
            "total_items": 3,
            "total_pages": 2,
        }

    def test_page_size_is_capped(self, client: TestClient):
        response = client.get("/golinks", params={"page_size": 1000})
        assert response.status_code == 200
        assert response.json()["pagination"]["page_size"] == 100

    def test_unparseable_page_falls_back_to_defaults(self, client: TestClient):
        for i in range(12):
            create(client, short_link=f"go/item{i}")

        for params in [{"page": "abc"}, {"page": ""}, {"page": "-2"}]:
            response = client.get("/golinks", params=params)
            assert response.status_code == 200

            body = response.json()
            assert body["pagination"]["page"] == 1
            assert body["pagination"]["page_size"] == 10
            assert body["pagination"]["total_items"] == 12
            assert body["data"][0]["short_link"] == "go/item11"

    def test_unparseable_page_size_falls_back_to_default(self, client: TestClient):
        create(client)

        response = client.get("/golinks", params={"page": "1", "page_size": "ten"})
        assert response.status_code == 200
        assert response.json()["pagination"]["page_size"] == 10

    def test_configured_default_page_size(self, small_page_client: TestClient):
        for i in range(5):
            create(small_page_client, short_link=f"go/item{i}")

        response = small_page_client.get("/golinks", params={"page": 1})
        assert response.status_code == 200

        body = response.json()
        assert body["pagination"]["page_size"] == 3
        assert body["pagination"]["total_pages"] == 2
        assert [g["short_link"] for g in body["data"]] == ["go/item4", "go/item3", "go/item2"]

    def test_full_crud_workflow(self, client: TestClient):
        assert client.get("/golinks").json() == []

        assert create(client, short_link="go/example").status_code == 201
        assert len(client.get("/golinks").json()) == 1

        response = client.put("/golinks/go/example", json={"url": "https://changed.com"})
        assert response.status_code == 200

        assert client.delete("/golinks/go/example").status_code == 200
        assert client.get("/golinks").json() == []


class TestAuth:
    """Test the optional bearer token"""

    def test_open_without_token_configured(self, client: TestClient):
        assert client.get("/golinks").status_code == 200

    def test_missing_token_rejected(self, auth_client: TestClient):
        response = auth_client.get("/golinks")
        assert response.status_code == 401

    def test_wrong_token_rejected(self, auth_client: TestClient):
        response = auth_client.post(
            "/golinks",
            json={"short_link": "go/test", "url": "https://example.com"},
            headers={"Authorization": "Bearer wrong"}
        )
        assert response.status_code == 401
        assert auth_client.get(
            "/golinks", headers={"Authorization": "Bearer s3cret-token"}
        ).json() == []

    def test_valid_token_accepted(self, auth_client: TestClient):
        headers = {"Authorization": "Bearer s3cret-token"}

        response = auth_client.post(
            "/golinks",
            json={"short_link": "go/test", "url": "https://example.com"},
            headers=headers
        )
        assert response.status_code == 201
        assert auth_client.get("/golinks/go/test", headers=headers).status_code == 200

    def test_health_is_public(self, auth_client: TestClient):
        response = auth_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestBuildStorage:
    """Test backend selection at startup"""

    def test_sqlite_failure_aborts_by_default(self, tmp_path):
        app_settings = Settings(storage_backend="sqlite", database_path=str(tmp_path))

        with pytest.raises(BackendFaultError):
            build_storage(app_settings)

    def test_sqlite_failure_can_fall_back_to_memory(self, tmp_path):
        app_settings = Settings(
            storage_backend="sqlite",
            database_path=str(tmp_path),
            storage_fallback_to_memory=True,
        )

        assert isinstance(build_storage(app_settings), InMemoryGolinkStorage)

    def test_memory_backend(self):
        storage = build_storage(Settings(storage_backend="memory"))
        assert isinstance(storage, InMemoryGolinkStorage)
