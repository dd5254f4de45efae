from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from mock_oauth.main import create_app
from mock_oauth.services.oauth_service import AuthorizationServer
from mock_oauth.services.registry import Registry, build_registry

# Ensure repo root is on sys.path so `import mock_oauth` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

CLIENT_ID = "c1"
CLIENT_SECRET = "s1"
REDIRECT_URI = "https://x.test/cb"

OTHER_CLIENT_ID = "c2"
OTHER_CLIENT_SECRET = "s2"
OTHER_REDIRECT_URI = "https://y.test/cb"

CLIENT_RECORDS = [
    {
        "client_id": CLIENT_ID,
        "client_secret": CLIENT_SECRET,
        "redirect_uris": [REDIRECT_URI, "https://x.test/cb?tenant=a"],
    },
    {
        "client_id": OTHER_CLIENT_ID,
        "client_secret": OTHER_CLIENT_SECRET,
        "name": "Other App",
        "redirect_uris": [OTHER_REDIRECT_URI],
    },
]

USER_RECORDS = [
    {"id": "7", "name": "Jane Doe", "email": "jane@example.com"},
    {"id": 8, "name": "Max Mustermann", "email": "max@example.com", "locale": "de"},
]


@pytest.fixture
def registry() -> Registry:
    return build_registry(CLIENT_RECORDS, USER_RECORDS)


@pytest.fixture
def server(registry: Registry) -> AuthorizationServer:
    return AuthorizationServer(clients=registry.clients, users=registry.users)


@pytest.fixture
def app(registry: Registry) -> FastAPI:
    # A fresh app per test: its stores start empty.
    return create_app(registry=registry)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, follow_redirects=False)
