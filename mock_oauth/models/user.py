from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class User:
    """A registry user.

    ``id`` is the identifier in string form, which is how codes and tokens
    refer to users.  ``profile`` is the record exactly as it was loaded
    (``id`` value and type included); /userinfo returns it
    as-is.
    """

    id: str
    profile: dict[str, Any] = field(compare=False)

    @staticmethod
    def from_record(record: dict[str, Any]) -> User:
        return User(id=str(record["id"]), profile=dict(record))

    @property
    def name(self) -> str | None:
        return self.profile.get("name")

    @property
    def email(self) -> str | None:
        return self.profile.get("email")
