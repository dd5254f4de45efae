from __future__ import annotations

from typing import Protocol

from mock_oauth.models.authorization_code import AuthorizationCode
from mock_oauth.services.errors import CredentialCollision


class AuthCodeRepo(Protocol):
    def create(self, record: AuthorizationCode) -> None: ...
    def get(self, code: str) -> AuthorizationCode | None: ...
    def delete(self, code: str) -> AuthorizationCode | None: ...
    def clear(self) -> None: ...
    def __len__(self) -> int: ...


class InMemoryAuthCodeRepo:
    """Outstanding authorization codes.

    Not thread-safe on its own: the AuthorizationServer serializes every
    read-check-delete sequence under its lock.
    """

    def __init__(self) -> None:
        self._by_code: dict[str, AuthorizationCode] = {}

    def create(self, record: AuthorizationCode) -> None:
        if record.code in self._by_code:
            raise CredentialCollision("authorization code already outstanding")
        self._by_code[record.code] = record

    def get(self, code: str) -> AuthorizationCode | None:
        return self._by_code.get(code)

    def delete(self, code: str) -> AuthorizationCode | None:
        return self._by_code.pop(code, None)

    def clear(self) -> None:
        self._by_code.clear()

    def __len__(self) -> int:
        return len(self._by_code)
