from __future__ import annotations

import logging

from fastapi import APIRouter, Form, Query, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel

from mock_oauth.api.dependencies import BearerTokenDep, ServerDep
from mock_oauth.api.pages import render_user_picker

# ---------------------------------------------------------------------------
# Mock authorization server — OAuth2 Authorization Code grant
#
# Endpoints:
#   GET  /auth           — validate client + redirect_uri, show user picker
#   GET  /auth/callback  — mint a code for the picked user, redirect to client
#   POST /token          — exchange code + client credentials for access token
#   GET  /userinfo       — resolve access token to the user's profile
#
# All protocol rules live in AuthorizationServer; these handlers only
# translate between HTTP and its method calls.  OAuthError subclasses
# are turned into plain-text responses by the handler in main.py.
# ---------------------------------------------------------------------------

logger = logging.getLogger(__name__)

router = APIRouter(tags=["oauth"])


class Token(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    id_token: str


# ========================== GET /auth =====================================


@router.get("/auth", response_class=HTMLResponse)
def authorize(
    server: ServerDep,
    client_id: str | None = Query(None),
    redirect_uri: str | None = Query(None),
    state: str | None = Query(None),
) -> HTMLResponse:
    client = server.validate_authorization_request(client_id, redirect_uri)
    page = render_user_picker(
        server.users.list_all(),
        client=client,
        redirect_uri=redirect_uri or "",
        state=state,
    )
    return HTMLResponse(page)


# ========================== GET /auth/callback ============================


@router.get("/auth/callback")
def auth_callback(
    server: ServerDep,
    user_id: str | None = Query(None),
    client_id: str | None = Query(None),
    redirect_uri: str | None = Query(None),
    state: str | None = Query(None),
) -> RedirectResponse:
    location = server.issue_code(user_id, client_id, redirect_uri, state)
    return RedirectResponse(url=location, status_code=status.HTTP_302_FOUND)


# ========================== POST /token ===================================


@router.post("/token", response_model=Token)
def exchange_token(
    server: ServerDep,
    grant_type: str | None = Form(None),
    code: str | None = Form(None),
    client_id: str | None = Form(None),
    client_secret: str | None = Form(None),
    redirect_uri: str | None = Form(None),
) -> Token:
    # Every field is optional at the HTTP layer so that a missing field
    # fails the same ordered check a wrong value would.
    grant = server.exchange_code(
        grant_type=grant_type,
        code=code,
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=redirect_uri,
    )
    return Token(
        access_token=grant.access_token,
        token_type=grant.token_type,
        expires_in=grant.expires_in,
        id_token=grant.id_token,
    )


# ========================== GET /userinfo =================================


@router.get("/userinfo")
def userinfo(
    server: ServerDep,
    bearer_token: BearerTokenDep,
    access_token: str | None = Query(None),
) -> dict:
    # The query parameter wins when both are sent.
    token = access_token if access_token is not None else bearer_token
    return server.resolve_identity(token)
