"""OAuth error taxonomy.

Each error carries the HTTP status and the plain-text body the endpoint
answers with.  Client applications under test match on these exact
strings, so they are part of the wire contract.
"""

from __future__ import annotations


class OAuthError(Exception):
    status_code: int = 400
    message: str = "Bad request"
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidRequest(OAuthError):
    message = "Missing client_id or redirect_uri"


class UnknownClient(OAuthError):
    message = "Invalid client_id"


class InvalidClient(OAuthError):
    # Unknown client and wrong secret are deliberately indistinguishable.
    message = "Invalid client_id or client_secret"


class InvalidRedirect(OAuthError):
    message = "Invalid redirect_uri"


class UnsupportedGrantType(OAuthError):
    message = "Invalid grant_type"


class InvalidGrant(OAuthError):
    message = "Invalid authorization code"


class InvalidToken(OAuthError):
    status_code = 401
    message = "Invalid access token"
    headers = {"WWW-Authenticate": "Bearer"}


class UserNotFound(OAuthError):
    status_code = 404
    message = "User not found"


class CredentialCollision(RuntimeError):
    """A freshly generated code or token is already outstanding."""
