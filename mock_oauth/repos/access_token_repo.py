from __future__ import annotations

from typing import Protocol

from mock_oauth.models.access_token import AccessToken
from mock_oauth.services.errors import CredentialCollision


class AccessTokenRepo(Protocol):
    def create(self, record: AccessToken) -> None: ...
    def get(self, token: str) -> AccessToken | None: ...
    def __contains__(self, token: object) -> bool: ...
    def clear(self) -> None: ...
    def __len__(self) -> int: ...


class InMemoryAccessTokenRepo:
    def __init__(self) -> None:
        self._by_token: dict[str, AccessToken] = {}

    def create(self, record: AccessToken) -> None:
        if record.token in self._by_token:
            raise CredentialCollision("access token already outstanding")
        self._by_token[record.token] = record

    def get(self, token: str) -> AccessToken | None:
        return self._by_token.get(token)

    def clear(self) -> None:
        self._by_token.clear()

    def __contains__(self, token: object) -> bool:
        return token in self._by_token

    def __len__(self) -> int:
        return len(self._by_token)
