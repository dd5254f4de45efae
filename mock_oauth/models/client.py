from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Client:
    client_id: str
    client_secret: str
    redirect_uris: tuple[str, ...]
    name: str | None = None

    @staticmethod
    def new(
        *,
        client_id: str,
        client_secret: str,
        redirect_uris: tuple[str, ...] | list[str],
        name: str | None = None,
    ) -> Client:
        # Duplicates are dropped but order is kept for display.
        return Client(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uris=tuple(dict.fromkeys(redirect_uris)),
            name=name,
        )

    def allows_redirect(self, redirect_uri: str) -> bool:
        # Exact string match only: no prefix, wildcard or normalization.
        return redirect_uri in self.redirect_uris
