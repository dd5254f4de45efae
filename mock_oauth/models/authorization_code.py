from __future__ import annotations

import datetime
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthorizationCode:
    code: str
    user_id: str
    client_id: str
    issued_at: int

    @staticmethod
    def new(*, code: str, user_id: str, client_id: str) -> AuthorizationCode:
        return AuthorizationCode(
            code=code,
            user_id=user_id,
            client_id=client_id,
            issued_at=int(datetime.datetime.now(datetime.UTC).timestamp()),
        )
