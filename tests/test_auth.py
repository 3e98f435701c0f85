"""Tests for owner authentication."""

from fastapi.testclient import TestClient

from expense_split.api.app import create_app
from expense_split.api.auth import AUTH_COOKIE, sign_username, verify_auth_cookie
from tests.conftest import login


def test_signed_cookie_roundtrip() -> None:
    value = sign_username("alice.smith", "secret")

    assert verify_auth_cookie(value, "secret") == "alice.smith"
    assert verify_auth_cookie(value, "other-secret") is None
    assert verify_auth_cookie("alice.smith.deadbeef", "secret") is None
    assert verify_auth_cookie("no-signature", "secret") is None
    assert verify_auth_cookie(None, "secret") is None


def test_login_sets_cookie_and_grants_access(container) -> None:
    client = TestClient(create_app(container))

    response = login(client)

    assert response.status_code == 204
    assert AUTH_COOKIE in response.cookies
    assert client.get("/api/sessions").status_code == 200


def test_login_rejects_bad_credentials(container) -> None:
    client = TestClient(create_app(container))

    response = login(client, password="wrong")

    assert response.status_code == 401
    assert response.json() == {"error": "invalid_credentials"}
    assert client.get("/api/sessions").status_code == 401


def test_forged_cookie_is_rejected(container) -> None:
    client = TestClient(create_app(container))
    client.cookies.set(AUTH_COOKIE, sign_username("admin", "not-the-secret"))

    assert client.get("/api/sessions").status_code == 401


def test_logout_clears_cookie(container) -> None:
    client = TestClient(create_app(container))
    login(client)

    response = client.post("/api/logout")

    assert response.status_code == 204
    assert client.get("/api/sessions").status_code == 401


def test_username_header_does_not_replace_login(
    container, session_repository
) -> None:
    owner = TestClient(create_app(container))
    login(owner)
    created = owner.post("/api/sessions", json={"name": "Mine"})
    session_id = created.json()["sessionId"]
    anonymous = TestClient(create_app(container))

    headers = {"X-Username": "admin"}
    listed = anonymous.get("/api/sessions", headers=headers)
    deleted = anonymous.delete(f"/api/sessions/{session_id}", headers=headers)

    assert listed.status_code == 401
    assert deleted.status_code == 401
    assert len(session_repository.sessions) == 1
