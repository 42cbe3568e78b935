"""Tests for the /users routes."""

import logging
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from users_api.main import app
from users_api.services import get_document_store
from users_common.infra.document_store import DocumentStore
from users_common.infra.errors import InvalidDocumentError, RevisionConflictError, StoreError
from users_common.infra.memory.memory_document_store import InMemoryDocumentStore

pytestmark = pytest.mark.unit


def _create(client: TestClient, **fields) -> dict:
    response = client.post("/users", json={"name": "A", "description": "d", **fields})
    assert response.status_code == 201, response.text
    return response.json()


def test_list_starts_empty(client: TestClient) -> None:
    response = client.get("/users")

    assert response.status_code == 200
    assert response.json() == []


def test_create_returns_201_with_id_and_revision(client: TestClient) -> None:
    created = _create(client, team="infra")

    assert created["id"]
    assert created["revision"]
    assert created["name"] == "A"
    assert created["team"] == "infra"


def test_create_then_get(client: TestClient) -> None:
    created = _create(client)

    response = client.get(f"/users/{created['id']}")

    assert response.status_code == 200
    assert response.json() == created


@pytest.mark.parametrize(
    "body",
    [{"name": "", "description": "d"}, {"name": "A"}, ["not", "an", "object"]],
)
def test_create_invalid_body_is_400(client: TestClient, body) -> None:
    response = client.post("/users", json=body)

    assert response.status_code == 400
    assert response.json()["kind"] == "validation"
    assert client.get("/users").json() == []


def test_create_malformed_json_is_400(client: TestClient) -> None:
    response = client.post("/users", content=b"{not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["kind"] == "validation"


def test_create_duplicate_id_is_409(client: TestClient) -> None:
    _create(client, id="jane")

    response = client.post("/users", json={"id": "jane", "name": "B", "description": "e"})

    assert response.status_code == 409
    assert response.json()["kind"] == "conflict"


def test_get_missing_is_404(client: TestClient) -> None:
    response = client.get("/users/nobody")

    assert response.status_code == 404
    assert response.json() == {"error": "User nobody not found", "kind": "not_found"}


def test_update_merges_and_returns_new_revision(client: TestClient) -> None:
    created = _create(client, extra="x")

    response = client.put(f"/users/{created['id']}", json={"name": "B"})

    assert response.status_code == 200
    updated = response.json()
    assert updated["name"] == "B"
    assert updated["description"] == "d"
    assert updated["extra"] == "x"
    assert updated["revision"] != created["revision"]
    assert client.get(f"/users/{created['id']}").json() == updated


def test_update_missing_is_404(client: TestClient) -> None:
    response = client.put("/users/nobody", json={"name": "B"})

    assert response.status_code == 404


def test_update_with_empty_description_is_400(client: TestClient) -> None:
    created = _create(client)

    response = client.put(f"/users/{created['id']}", json={"description": ""})

    assert response.status_code == 400


def test_update_conflict_is_409(store: InMemoryDocumentStore) -> None:
    racing = MagicMock(wraps=store)
    created = store.insert({"id": "u1", "name": "A", "description": "d"})
    racing.insert.side_effect = RevisionConflictError("u1", created.revision)
    app.dependency_overrides[get_document_store] = lambda: racing
    try:
        response = TestClient(app).put("/users/u1", json={"name": "B"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 409
    assert response.json()["kind"] == "conflict"
    assert store.get("u1")["name"] == "A"


def test_delete_returns_204_then_get_is_404(client: TestClient) -> None:
    created = _create(client)

    response = client.delete(f"/users/{created['id']}")

    assert response.status_code == 204
    assert response.content == b""
    assert client.get(f"/users/{created['id']}").status_code == 404


def test_delete_missing_is_404(client: TestClient) -> None:
    assert client.delete("/users/nobody").status_code == 404


def test_list_reflects_mutations(client: TestClient) -> None:
    a = _create(client, name="A")
    b = _create(client, name="B")
    client.delete(f"/users/{a['id']}")

    ids = [user["id"] for user in client.get("/users").json()]

    assert ids == [b["id"]]


def test_store_failure_is_500_without_details() -> None:
    failing = MagicMock(spec=DocumentStore)
    failing.list.side_effect = StoreError("auth failed for key abc123")
    app.dependency_overrides[get_document_store] = lambda: failing
    try:
        response = TestClient(app).get("/users")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error", "kind": "internal"}


def test_unexpected_exception_is_500_without_details() -> None:
    failing = MagicMock(spec=DocumentStore)
    failing.get.side_effect = RuntimeError("secret stack detail")
    app.dependency_overrides[get_document_store] = lambda: failing
    try:
        response = TestClient(app, raise_server_exceptions=False).get("/users/u1")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert "secret" not in response.text
    assert response.json()["kind"] == "internal"


def test_trailing_slash_routes_answer_directly(client: TestClient) -> None:
    response = client.post("/users/", json={"name": "A", "description": "d"})

    assert response.status_code == 201
    listed = client.get("/users/", follow_redirects=False)
    assert listed.status_code == 200
    assert [user["id"] for user in listed.json()] == [response.json()["id"]]


@pytest.mark.parametrize("user_id", ["a/b", "a\\b", "a?b", "a#b", "x" * 256])
def test_create_with_unroutable_id_is_400(client: TestClient, user_id: str) -> None:
    response = client.post("/users", json={"id": user_id, "name": "A", "description": "d"})

    assert response.status_code == 400
    assert response.json()["kind"] == "validation"
    assert client.get("/users").json() == []


def test_create_rejected_by_store_is_400() -> None:
    rejecting = MagicMock(spec=DocumentStore)
    rejecting.insert.side_effect = InvalidDocumentError("u1", "Id contains illegal chars.")
    app.dependency_overrides[get_document_store] = lambda: rejecting
    try:
        response = TestClient(app).post("/users", json={"id": "u1", "name": "A", "description": "d"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 400
    assert response.json()["kind"] == "validation"


def test_update_missing_with_invalid_body_is_404(client: TestClient) -> None:
    response = client.put("/users/nobody", json={"name": ""})

    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


def test_unsupported_method_is_405_in_error_shape(client: TestClient) -> None:
    response = client.patch("/users/x", json={"name": "B"})

    assert response.status_code == 405
    assert response.json()["kind"] == "validation"
    assert "detail" not in response.json()
    assert "allow" in response.headers


@pytest.mark.parametrize("path", ["/users/a%2Fb", "/nowhere"])
def test_unknown_path_is_404_in_error_shape(client: TestClient, path: str) -> None:
    response = client.get(path)

    assert response.status_code == 404
    assert set(response.json()) == {"error", "kind"}
    assert response.json()["kind"] == "not_found"


def test_unexpected_exception_is_logged_and_tagged(caplog: pytest.LogCaptureFixture) -> None:
    failing = MagicMock(spec=DocumentStore)
    failing.get.side_effect = RuntimeError("boom")
    app.dependency_overrides[get_document_store] = lambda: failing
    try:
        with caplog.at_level(logging.INFO, logger="users_api.access"):
            response = TestClient(app, raise_server_exceptions=False).get(
                "/users/u1", headers={"X-Request-ID": "trace-500"}
            )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.headers["X-Request-ID"] == "trace-500"
    access = [record for record in caplog.records if record.name == "users_api.access"]
    assert access
    assert access[-1].levelno == logging.ERROR
    assert "trace-500" in access[-1].getMessage()
