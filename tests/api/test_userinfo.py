from __future__ import annotations

from urllib.parse import parse_qs, urlparse

from fastapi.testclient import TestClient

from tests.conftest import CLIENT_ID, CLIENT_SECRET, REDIRECT_URI


def _get_token(client: TestClient, user_id: str = "7") -> str:
    resp = client.get(
        "/auth/callback",
        params={"user_id": user_id, "client_id": CLIENT_ID, "redirect_uri": REDIRECT_URI},
    )
    code = parse_qs(urlparse(resp.headers["location"]).query)["code"][0]
    resp = client.post(
        "/token",
        data={
            "grant_type": "authorization_code",
            "code": code,
            "client_id": CLIENT_ID,
            "client_secret": CLIENT_SECRET,
            "redirect_uri": REDIRECT_URI,
        },
    )
    assert resp.status_code == 200
    return resp.json()["access_token"]


def test_userinfo_via_query_param(client: TestClient) -> None:
    token = _get_token(client)
    resp = client.get("/userinfo", params={"access_token": token})
    assert resp.status_code == 200
    assert resp.json() == {"id": "7", "name": "Jane Doe", "email": "jane@example.com"}


def test_userinfo_via_bearer_header(client: TestClient) -> None:
    token = _get_token(client, user_id="8")
    resp = client.get("/userinfo", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    body = resp.json()
    # Raw record: numeric id and extra fields come back untouched.
    assert body["id"] == 8
    assert body["locale"] == "de"


def test_userinfo_query_param_wins_over_header(client: TestClient) -> None:
    token = _get_token(client)
    resp = client.get(
        "/userinfo",
        params={"access_token": "does-not-exist"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 401


def test_userinfo_missing_token(client: TestClient) -> None:
    resp = client.get("/userinfo")
    assert resp.status_code == 401
    assert resp.text == "Invalid access token"
    assert resp.headers["www-authenticate"] == "Bearer"


def test_userinfo_unknown_token(client: TestClient) -> None:
    resp = client.get("/userinfo", params={"access_token": "does-not-exist"})
    assert resp.status_code == 401
    assert resp.text == "Invalid access token"


def test_userinfo_non_bearer_header_ignored(client: TestClient) -> None:
    token = _get_token(client)
    resp = client.get("/userinfo", headers={"Authorization": f"Basic {token}"})
    assert resp.status_code == 401


def test_userinfo_user_not_found(client: TestClient) -> None:
    # /auth/callback does not check the registry, so a code can name
    # a user that does not exist.
    token = _get_token(client, user_id="999")
    resp = client.get("/userinfo", params={"access_token": token})
    assert resp.status_code == 404
    assert resp.text == "User not found"


def test_userinfo_is_repeatable(client: TestClient) -> None:
    token = _get_token(client)
    first = client.get("/userinfo", params={"access_token": token})
    second = client.get("/userinfo", params={"access_token": token})
    assert first.json() == second.json()
