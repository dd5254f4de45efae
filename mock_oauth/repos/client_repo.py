from __future__ import annotations

import hmac
from typing import Protocol

from mock_oauth.models.client import Client


class ClientRepo(Protocol):
    def get(self, client_id: str) -> Client | None: ...
    def find_by_credentials(
        self, client_id: str, client_secret: str
    ) -> Client | None: ...
    def register(self, client: Client) -> None: ...
    def list_all(self) -> list[Client]: ...


class InMemoryClientRepo:
    def __init__(self) -> None:
        self._by_client_id: dict[str, Client] = {}

    def get(self, client_id: str) -> Client | None:
        return self._by_client_id.get(client_id)

    def find_by_credentials(self, client_id: str, client_secret: str) -> Client | None:
        client = self._by_client_id.get(client_id)
        if client is None:
            return None
        if not hmac.compare_digest(
            client.client_secret.encode(), client_secret.encode()
        ):
            return None
        return client

    def register(self, client: Client) -> None:
        if client.client_id in self._by_client_id:
            raise ValueError(f"client_id already registered: {client.client_id!r}")
        self._by_client_id[client.client_id] = client

    def list_all(self) -> list[Client]:
        return list(self._by_client_id.values())

    def __len__(self) -> int:
        return len(self._by_client_id)
