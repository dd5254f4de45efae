"""Browser pages: home, registry listings and the /auth user picker.

Inline HTML keeps the mock dependency-free (no template engine, no static
files).  Everything interpolated into a page goes through html.escape.
"""

from __future__ import annotations

import html
from collections.abc import Iterable
from urllib.parse import urlencode

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from mock_oauth.api.dependencies import ServerDep
from mock_oauth.models.client import Client
from mock_oauth.models.user import User

router = APIRouter(tags=["pages"])

_PAGE_HTML = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{title} — Mock OAuth2 Server</title>
  <style>
    * {{ margin: 0; padding: 0; box-sizing: border-box; }}
    body {{
      font-family: system-ui, -apple-system, sans-serif;
      display: flex; justify-content: center; align-items: flex-start;
      min-height: 100vh; background: #f5f5f5; padding-top: 4rem;
    }}
    .card {{
      background: #fff; padding: 2rem; border-radius: 8px;
      box-shadow: 0 2px 8px rgba(0,0,0,.1); width: 480px;
    }}
    h1 {{ font-size: 1.25rem; margin-bottom: 1.5rem; text-align: center; }}
    p {{ margin-bottom: 1rem; font-size: .9rem; }}
    ul {{ list-style: none; }}
    li {{ padding: .6rem 0; border-bottom: 1px solid #eee; font-size: .9rem; }}
    li:last-child {{ border-bottom: none; }}
    a {{ color: #111; }}
    .muted {{ color: #666; font-size: .8rem; }}
    code {{ font-size: .8rem; }}
  </style>
</head>
<body>
  <div class="card">
    <h1>{title}</h1>
    {body}
  </div>
</body>
</html>
"""


def _page(title: str, body: str) -> str:
    return _PAGE_HTML.format(title=html.escape(title), body=body)


def render_user_picker(
    users: Iterable[User],
    *,
    client: Client,
    redirect_uri: str,
    state: str | None,
) -> str:
    """The login step: one link per user, each pointing at /auth/callback."""
    items = []
    for user in users:
        params = {
            "user_id": user.id,
            "client_id": client.client_id,
            "redirect_uri": redirect_uri,
        }
        if state is not None:
            params["state"] = state
        href = html.escape(f"/auth/callback?{urlencode(params)}", quote=True)
        label = html.escape(str(user.name or user.id))
        email = html.escape(str(user.email or ""))
        items.append(
            f'<li><a href="{href}">{label}</a> <span class="muted">{email}</span></li>'
        )

    client_label = html.escape(client.name or client.client_id)
    body = (
        f"<p>Sign in to <strong>{client_label}</strong> as:</p>"
        f"<ul>{''.join(items) or '<li>No users configured.</li>'}</ul>"
    )
    return _page("Login", body)


# ========================== GET / =========================================


@router.get("/", response_class=HTMLResponse)
def home() -> HTMLResponse:
    body = (
        "<p>A mock OAuth2 authorization server for testing client applications.</p>"
        "<ul>"
        '<li><a href="/clients">Clients</a></li>'
        '<li><a href="/users">Users</a></li>'
        "<li><code>GET /auth</code> · <code>GET /auth/callback</code> · "
        "<code>POST /token</code> · <code>GET /userinfo</code></li>"
        "</ul>"
    )
    return HTMLResponse(_page("Mock OAuth2 Server", body))


# ========================== GET /clients ==================================


@router.get("/clients", response_class=HTMLResponse)
def list_clients(server: ServerDep) -> HTMLResponse:
    # Secrets are shown on purpose: this page is how testers find the
    # credentials to configure their client application with.
    items = []
    for client in server.clients.list_all():
        uris = "<br>".join(
            f"<code>{html.escape(uri)}</code>" for uri in client.redirect_uris
        )
        items.append(
            "<li>"
            f"<strong>{html.escape(client.client_id)}</strong>"
            ' <span class="muted">secret: '
            f"<code>{html.escape(client.client_secret)}</code></span>"
            f"<br>{uris}"
            "</li>"
        )
    body = f"<ul>{''.join(items) or '<li>No clients configured.</li>'}</ul>"
    return HTMLResponse(_page("Clients", body))


# ========================== GET /users ====================================


@router.get("/users", response_class=HTMLResponse)
def list_users(server: ServerDep) -> HTMLResponse:
    items = [
        "<li>"
        f"<strong>{html.escape(str(user.name or user.id))}</strong>"
        f' <span class="muted">id: <code>{html.escape(user.id)}</code>'
        f" {html.escape(str(user.email or ''))}</span>"
        "</li>"
        for user in server.users.list_all()
    ]
    body = f"<ul>{''.join(items) or '<li>No users configured.</li>'}</ul>"
    return HTMLResponse(_page("Users", body))
