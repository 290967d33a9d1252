import json

import httpx
import pytest

from warehouse.client import WarehouseClient


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/api/auth/login":
        body = json.loads(request.content)
        if body["password"] != "admin123":
            return httpx.Response(401, json={"code": "http_error", "message": "Invalid credentials"})
        return httpx.Response(
            200,
            json={"user": {"id": 1, "username": "admin"}, "token": "tok-1", "refresh_token": "ref-1"},
        )
    if request.url.path == "/api/auth/me":
        if request.headers.get("Authorization") != "Bearer tok-1":
            return httpx.Response(401, json={"code": "http_error", "message": "Invalid token."})
        return httpx.Response(200, json={"id": 1, "username": "admin"})
    if request.url.path == "/api/products":
        return httpx.Response(200, json={"products": [], "pagination": {"page": int(request.url.params["page"])}})
    return httpx.Response(404, json={"message": "Not Found"})


@pytest.fixture()
def client(tmp_path):
    with WarehouseClient(
        "http://warehouse.test",
        token_path=tmp_path / "token.json",
        transport=httpx.MockTransport(_handler),
    ) as api:
        yield api


def test_login_persists_token(client, tmp_path):
    result = client.login("admin", "admin123")

    assert result == {"success": True, "user": {"id": 1, "username": "admin"}}
    assert client.is_authenticated
    stored = json.loads((tmp_path / "token.json").read_text())
    assert stored == {"token": "tok-1", "refresh_token": "ref-1"}
    assert client.fetch_profile() == {"id": 1, "username": "admin"}


def test_failed_login_returns_message(client):
    result = client.login("admin", "wrong")

    assert result == {"success": False, "message": "Invalid credentials"}
    assert not client.is_authenticated


def test_unauthorized_response_clears_token(client, tmp_path):
    (tmp_path / "token.json").write_text(json.dumps({"token": "stale"}))
    assert client.is_authenticated

    assert client.fetch_profile() is None
    assert not client.is_authenticated
    assert not (tmp_path / "token.json").exists()


def test_logout_and_json_helpers(client):
    client.login("admin", "admin123")

    assert client.get("/api/products", page=2)["pagination"] == {"page": 2}
    with pytest.raises(httpx.HTTPStatusError):
        client.get("/api/missing")

    client.logout()
    assert client.fetch_profile() is None
    assert client.user is None
