"""Authorization-code state machine.

One AuthorizationServer owns the registry and the two credential stores
for the lifetime of an app instance:

  validate_authorization_request   GET  /auth
  issue_code                       GET  /auth/callback
  exchange_code                    POST /token
  resolve_identity                 GET  /userinfo

Every failure is raised as an OAuthError subclass before any store is
touched.  The code store and token store are only ever mutated while
holding ``_lock``: FastAPI runs sync endpoints on a thread pool, and two
concurrent redemptions of the same code must not both succeed.
"""

from __future__ import annotations

import logging
import secrets
import threading
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from mock_oauth.core.logging import redact
from mock_oauth.core.metrics import CODES_ISSUED, TOKEN_EXCHANGES, USERINFO_REQUESTS
from mock_oauth.models.access_token import AccessToken
from mock_oauth.models.authorization_code import AuthorizationCode
from mock_oauth.models.client import Client
from mock_oauth.repos.access_token_repo import AccessTokenRepo, InMemoryAccessTokenRepo
from mock_oauth.repos.auth_code_repo import AuthCodeRepo, InMemoryAuthCodeRepo
from mock_oauth.repos.client_repo import ClientRepo
from mock_oauth.repos.user_repo import UserRepo
from mock_oauth.services.errors import (
    CredentialCollision,
    InvalidClient,
    InvalidGrant,
    InvalidRedirect,
    InvalidRequest,
    InvalidToken,
    UnknownClient,
    UnsupportedGrantType,
    UserNotFound,
)

logger = logging.getLogger(__name__)

GRANT_TYPE_AUTHORIZATION_CODE = "authorization_code"
TOKEN_TYPE = "Bearer"
# Reported to clients only; tokens are never expired server-side.
ACCESS_TOKEN_EXPIRES_IN = 3600
# Not a JWT.  Clients that need a verifiable id_token need a real IdP.
ID_TOKEN_PLACEHOLDER = "mock_id_token"

# 32 bytes → 256 bits of entropy, 43 URL-safe characters.
CREDENTIAL_BYTES = 32


def new_credential() -> str:
    return secrets.token_urlsafe(CREDENTIAL_BYTES)


@dataclass(frozen=True, slots=True)
class TokenGrant:
    access_token: str
    token_type: str = TOKEN_TYPE
    expires_in: int = ACCESS_TOKEN_EXPIRES_IN
    id_token: str = ID_TOKEN_PLACEHOLDER


def append_query_params(url: str, params: dict[str, str]) -> str:
    """Set query parameters on an absolute URL.

    Existing parameters with the same names are replaced; all other
    parameters and the fragment are kept.  Raises InvalidRedirect when
    ``url`` is not an absolute URL.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        raise InvalidRedirect() from None
    if not parts.scheme or not parts.netloc:
        raise InvalidRedirect()

    query = [
        (k, v)
        for k, v in parse_qsl(parts.query, keep_blank_values=True)
        if k not in params
    ]
    query.extend(params.items())
    return urlunsplit(parts._replace(query=urlencode(query)))


class AuthorizationServer:
    def __init__(
        self,
        clients: ClientRepo,
        users: UserRepo,
        codes: AuthCodeRepo | None = None,
        tokens: AccessTokenRepo | None = None,
    ) -> None:
        self.clients = clients
        self.users = users
        self.codes = codes if codes is not None else InMemoryAuthCodeRepo()
        self.tokens = tokens if tokens is not None else InMemoryAccessTokenRepo()
        self._lock = threading.Lock()

    # ========================== /auth =====================================

    def validate_authorization_request(
        self, client_id: str | None, redirect_uri: str | None
    ) -> Client:
        """Check that the client exists and may receive codes at redirect_uri."""
        if not client_id or not redirect_uri:
            logger.warning(
                "CODE FLOW [authorize] FAIL: missing client_id or redirect_uri"
            )
            raise InvalidRequest()

        client = self.clients.get(client_id)
        if client is None:
            logger.warning(
                "CODE FLOW [authorize] FAIL: unknown client_id=%s", client_id
            )
            raise UnknownClient()

        # Exact match against the registered set, never prefix/substring.
        if not client.allows_redirect(redirect_uri):
            logger.warning(
                "CODE FLOW [authorize] FAIL: redirect_uri not registered  "
                "client_id=%s redirect_uri=%s",
                client_id,
                redirect_uri,
            )
            raise InvalidRedirect()

        logger.info(
            "CODE FLOW [authorize] client_id=%s redirect_uri=%s  ✓",
            client_id,
            redirect_uri,
        )
        return client

    # ========================== /auth/callback ============================

    def issue_code(
        self,
        user_id: str | None,
        client_id: str | None,
        redirect_uri: str | None,
        state: str | None = None,
    ) -> str:
        """Mint a code for (user_id, client_id) and return the redirect URL.

        The client and redirect_uri are not re-checked against the registry
        here; /auth already did that for the page that links to this step.
        ``state`` is echoed verbatim when not None, including "".
        """
        if not redirect_uri:
            raise InvalidRedirect()
        if not user_id or not client_id:
            logger.warning("CODE FLOW [callback] FAIL: missing user_id or client_id")
            raise InvalidRequest("Missing user_id or client_id")

        # Parse before minting so a bad redirect never leaves a stored code.
        append_query_params(redirect_uri, {})

        code = new_credential()
        with self._lock:
            self.codes.create(
                AuthorizationCode.new(code=code, user_id=user_id, client_id=client_id)
            )
        CODES_ISSUED.inc()

        params = {"code": code}
        if state is not None:
            params["state"] = state
        location = append_query_params(redirect_uri, params)

        logger.info(
            "CODE FLOW [callback] code issued  user_id=%s client_id=%s code=%s",
            user_id,
            client_id,
            redact(code),
        )
        return location

    # ========================== /token ====================================

    def exchange_code(
        self,
        grant_type: str | None,
        code: str | None,
        client_id: str | None,
        client_secret: str | None,
        redirect_uri: str | None,
    ) -> TokenGrant:
        """Redeem an authorization code for an access token.

        Checks run in a fixed order and each one fails before any store
        is mutated, so a request rejected for a bad secret or redirect
        leaves the code redeemable.
        """
        logger.info(
            "CODE FLOW [token] received  client_id=%s grant_type=%s",
            client_id,
            grant_type,
        )

        if grant_type != GRANT_TYPE_AUTHORIZATION_CODE:
            TOKEN_EXCHANGES.labels(result="unsupported_grant_type").inc()
            logger.warning(
                "CODE FLOW [token] FAIL: unsupported grant_type=%s", grant_type
            )
            raise UnsupportedGrantType()

        client = self.clients.find_by_credentials(client_id or "", client_secret or "")
        if client is None:
            TOKEN_EXCHANGES.labels(result="invalid_client").inc()
            # Never log the secret, and do not say which half was wrong.
            logger.warning(
                "CODE FLOW [token] FAIL: bad client credentials  client_id=%s",
                client_id,
            )
            raise InvalidClient()

        if not redirect_uri or not client.allows_redirect(redirect_uri):
            TOKEN_EXCHANGES.labels(result="invalid_redirect").inc()
            logger.warning(
                "CODE FLOW [token] FAIL: redirect_uri not registered  redirect_uri=%s",
                redirect_uri,
            )
            raise InvalidRedirect()

        with self._lock:
            record = self.codes.get(code) if code else None
            # Unknown, already redeemed and issued-to-another-client all look
            # the same from outside.
            if record is None or record.client_id != client.client_id:
                TOKEN_EXCHANGES.labels(result="invalid_grant").inc()
                logger.warning(
                    "CODE FLOW [token] FAIL: invalid authorization code=%s",
                    redact(code),
                )
                raise InvalidGrant()

            access_token = new_credential()
            if access_token in self.tokens:
                raise CredentialCollision("access token already outstanding")

            self.codes.delete(record.code)
            self.tokens.create(
                AccessToken.new(token=access_token, user_id=record.user_id)
            )

        TOKEN_EXCHANGES.labels(result="issued").inc()
        logger.info(
            "CODE FLOW [token] access token issued  "
            "user_id=%s client_id=%s token=%s  ✓",
            record.user_id,
            client.client_id,
            redact(access_token),
        )
        return TokenGrant(access_token=access_token)

    # ========================== /userinfo =================================

    def resolve_identity(self, access_token: str | None) -> dict[str, Any]:
        """Return the user profile bound to ``access_token``, as stored."""
        record = self.tokens.get(access_token) if access_token else None
        if record is None:
            USERINFO_REQUESTS.labels(result="invalid_token").inc()
            logger.warning(
                "CODE FLOW [userinfo] FAIL: invalid access token=%s",
                redact(access_token),
            )
            raise InvalidToken()

        user = self.users.get_by_id(record.user_id)
        if user is None:
            USERINFO_REQUESTS.labels(result="user_not_found").inc()
            logger.warning(
                "CODE FLOW [userinfo] FAIL: user not found  user_id=%s",
                record.user_id,
            )
            raise UserNotFound()

        USERINFO_REQUESTS.labels(result="ok").inc()
        logger.info("CODE FLOW [userinfo] resolved  user_id=%s", user.id)
        return dict(user.profile)

    def reset(self) -> None:
        """Drop every outstanding code and token."""
        with self._lock:
            self.codes.clear()
            self.tokens.clear()
