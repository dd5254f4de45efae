from __future__ import annotations

import datetime
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AccessToken:
    # No expires_at: tokens stay valid for the life of the process.
    token: str
    user_id: str
    issued_at: int

    @staticmethod
    def new(*, token: str, user_id: str) -> AccessToken:
        return AccessToken(
            token=token,
            user_id=user_id,
            issued_at=int(datetime.datetime.now(datetime.UTC).timestamp()),
        )
