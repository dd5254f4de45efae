from __future__ import annotations

from urllib.parse import parse_qs, urlparse

from fastapi.testclient import TestClient

from tests.conftest import CLIENT_ID, REDIRECT_URI


def test_health_reports_registry_and_stores(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {
        "status": "ok",
        "registry": {"clients": 2, "users": 2},
        "outstanding": {"authorization_codes": 0, "access_tokens": 0},
    }


def test_health_counts_outstanding_codes(client: TestClient) -> None:
    resp = client.get(
        "/auth/callback",
        params={"user_id": "7", "client_id": CLIENT_ID, "redirect_uri": REDIRECT_URI},
    )
    assert parse_qs(urlparse(resp.headers["location"]).query)["code"]
    assert client.get("/health").json()["outstanding"]["authorization_codes"] == 1


def test_ready_returns_200(client: TestClient) -> None:
    resp = client.get("/ready")
    assert resp.status_code == 200
