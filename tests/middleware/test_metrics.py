"""Tests for Prometheus metrics.

prometheus-client uses a global registry and counters cannot be reset, so
every assertion is on the delta around the action under test.
"""

from __future__ import annotations

from urllib.parse import parse_qs, urlparse

from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from mock_oauth.middleware.metrics import UNMATCHED_ENDPOINT
from tests.conftest import CLIENT_ID, CLIENT_SECRET, REDIRECT_URI


def _get_sample(name: str, labels: dict | None = None) -> float:
    value = REGISTRY.get_sample_value(name, labels=labels or {})
    return value if value is not None else 0.0


def test_request_counter_increments(client: TestClient) -> None:
    labels = {"method": "GET", "endpoint": "/health", "status_code": "200"}
    before = _get_sample("http_requests_total", labels)
    client.get("/health")
    assert _get_sample("http_requests_total", labels) - before >= 1


def test_request_duration_histogram_observes(client: TestClient) -> None:
    labels = {"method": "GET", "endpoint": "/health"}
    before = _get_sample("http_request_duration_seconds_count", labels)
    client.get("/health")
    assert _get_sample("http_request_duration_seconds_count", labels) - before >= 1


def test_unmatched_paths_share_one_endpoint_label(client: TestClient) -> None:
    shared = {"method": "GET", "endpoint": UNMATCHED_ENDPOINT, "status_code": "404"}
    before = _get_sample("http_requests_total", shared)

    for path in ("/wp-admin", "/.env", "/scan/12345"):
        assert client.get(path).status_code == 404

    assert _get_sample("http_requests_total", shared) - before == 3
    for path in ("/wp-admin", "/.env", "/scan/12345"):
        labels = {"method": "GET", "endpoint": path, "status_code": "404"}
        assert REGISTRY.get_sample_value("http_requests_total", labels) is None


def test_metrics_endpoint_not_self_instrumented(client: TestClient) -> None:
    labels = {"method": "GET", "endpoint": "/metrics", "status_code": "200"}
    before = _get_sample("http_requests_total", labels)
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "http_requests_total" in resp.text
    assert _get_sample("http_requests_total", labels) == before


def test_oauth_counters_track_flow(client: TestClient) -> None:
    codes_before = _get_sample("oauth_codes_issued_total")
    issued_before = _get_sample("oauth_token_exchanges_total", {"result": "issued"})
    invalid_before = _get_sample("oauth_token_exchanges_total", {"result": "invalid_grant"})
    ok_before = _get_sample("oauth_userinfo_requests_total", {"result": "ok"})
    bad_before = _get_sample("oauth_userinfo_requests_total", {"result": "invalid_token"})

    resp = client.get(
        "/auth/callback",
        params={"user_id": "7", "client_id": CLIENT_ID, "redirect_uri": REDIRECT_URI},
    )
    code = parse_qs(urlparse(resp.headers["location"]).query)["code"][0]
    form = {
        "grant_type": "authorization_code",
        "code": code,
        "client_id": CLIENT_ID,
        "client_secret": CLIENT_SECRET,
        "redirect_uri": REDIRECT_URI,
    }
    token = client.post("/token", data=form).json()["access_token"]
    client.post("/token", data=form)
    client.get("/userinfo", params={"access_token": token})
    client.get("/userinfo", params={"access_token": "does-not-exist"})

    assert _get_sample("oauth_codes_issued_total") - codes_before == 1
    assert _get_sample("oauth_token_exchanges_total", {"result": "issued"}) - issued_before == 1
    assert (
        _get_sample("oauth_token_exchanges_total", {"result": "invalid_grant"})
        - invalid_before
        == 1
    )
    assert _get_sample("oauth_userinfo_requests_total", {"result": "ok"}) - ok_before == 1
    assert (
        _get_sample("oauth_userinfo_requests_total", {"result": "invalid_token"})
        - bad_before
        == 1
    )
