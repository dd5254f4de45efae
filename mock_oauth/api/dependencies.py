from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from mock_oauth.services.oauth_service import AuthorizationServer

# auto_error=False: a missing header is not an error by itself, because
# /userinfo also accepts the token as a query parameter.
bearer_scheme = OAuth2PasswordBearer(tokenUrl="/token", auto_error=False)


def get_authorization_server(request: Request) -> AuthorizationServer:
    """The AuthorizationServer owned by the running app instance."""
    return request.app.state.authorization_server


ServerDep = Annotated[AuthorizationServer, Depends(get_authorization_server)]
BearerTokenDep = Annotated[str | None, Depends(bearer_scheme)]
