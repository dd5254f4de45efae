"""Prometheus metric inventory for mock-oauth.

All metrics are defined here and incremented at the point of action:
HTTP traffic by MetricsMiddleware, OAuth outcomes by the AuthorizationServer.
Scraped through GET /metrics.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    # Everything is an in-memory lookup; anything past 100ms is suspicious.
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# OAuth flow metrics
# ---------------------------------------------------------------------------

CODES_ISSUED = Counter(
    "oauth_codes_issued_total",
    "Authorization codes minted by /auth/callback",
)

TOKEN_EXCHANGES = Counter(
    "oauth_token_exchanges_total",
    "Token endpoint outcomes",
    # "issued", "unsupported_grant_type", "invalid_client",
    # "invalid_redirect", "invalid_grant"
    ["result"],
)

USERINFO_REQUESTS = Counter(
    "oauth_userinfo_requests_total",
    "Userinfo lookups by result",
    ["result"],  # "ok", "invalid_token", "user_not_found"
)
