from __future__ import annotations

from typing import Protocol

from mock_oauth.models.user import User


class UserRepo(Protocol):
    def get_by_id(self, user_id: str) -> User | None: ...
    def add(self, user: User) -> None: ...
    def list_all(self) -> list[User]: ...


class InMemoryUserRepo:
    def __init__(self) -> None:
        self._by_id: dict[str, User] = {}

    def get_by_id(self, user_id: str) -> User | None:
        return self._by_id.get(user_id)

    def add(self, user: User) -> None:
        if user.id in self._by_id:
            raise ValueError(f"user id already exists: {user.id!r}")
        self._by_id[user.id] = user

    def list_all(self) -> list[User]:
        return list(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)
