from __future__ import annotations

from urllib.parse import parse_qs, urlparse

from fastapi import FastAPI
from fastapi.testclient import TestClient

from tests.conftest import CLIENT_ID, REDIRECT_URI


def _callback(client: TestClient, **params: str):
    base = {"user_id": "7", "client_id": CLIENT_ID, "redirect_uri": REDIRECT_URI}
    base.update(params)
    return client.get("/auth/callback", params=base)


def test_callback_redirects_with_code(client: TestClient, app: FastAPI) -> None:
    resp = _callback(client, state="xyz-anti-csrf")
    assert resp.status_code == 302

    location = urlparse(resp.headers["location"])
    assert f"{location.scheme}://{location.netloc}{location.path}" == REDIRECT_URI
    query = parse_qs(location.query)
    assert query["state"] == ["xyz-anti-csrf"]

    record = app.state.authorization_server.codes.get(query["code"][0])
    assert record is not None
    assert (record.user_id, record.client_id) == ("7", CLIENT_ID)


def test_callback_without_state(client: TestClient) -> None:
    resp = _callback(client)
    assert resp.status_code == 302
    query = parse_qs(urlparse(resp.headers["location"]).query, keep_blank_values=True)
    assert set(query) == {"code"}


def test_callback_with_empty_state(client: TestClient) -> None:
    resp = _callback(client, state="")
    query = parse_qs(urlparse(resp.headers["location"]).query, keep_blank_values=True)
    assert query["state"] == [""]


def test_callback_keeps_existing_query(client: TestClient) -> None:
    resp = _callback(client, redirect_uri="https://x.test/cb?tenant=a")
    query = parse_qs(urlparse(resp.headers["location"]).query)
    assert query["tenant"] == ["a"]
    assert "code" in query


def test_callback_fresh_code_every_time(client: TestClient) -> None:
    codes = {
        parse_qs(urlparse(_callback(client).headers["location"]).query)["code"][0]
        for _ in range(5)
    }
    assert len(codes) == 5


def test_callback_rejects_relative_redirect(client: TestClient, app: FastAPI) -> None:
    resp = _callback(client, redirect_uri="/not/absolute")
    assert resp.status_code == 400
    assert resp.text == "Invalid redirect_uri"
    assert len(app.state.authorization_server.codes) == 0


def test_callback_rejects_missing_redirect(client: TestClient) -> None:
    resp = client.get("/auth/callback", params={"user_id": "7", "client_id": CLIENT_ID})
    assert resp.status_code == 400
    assert resp.text == "Invalid redirect_uri"


def test_callback_rejects_missing_user(client: TestClient) -> None:
    resp = client.get(
        "/auth/callback", params={"client_id": CLIENT_ID, "redirect_uri": REDIRECT_URI}
    )
    assert resp.status_code == 400
    assert resp.text == "Missing user_id or client_id"
