from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from mock_oauth.api.health import router as health_router
from mock_oauth.api.metrics_endpoint import router as metrics_router
from mock_oauth.api.oauth import router as oauth_router
from mock_oauth.api.pages import router as pages_router
from mock_oauth.core.config import SETTINGS, Settings
from mock_oauth.core.logging import setup_logging
from mock_oauth.middleware.metrics import MetricsMiddleware
from mock_oauth.middleware.request_context import RequestContextMiddleware
from mock_oauth.services.errors import OAuthError
from mock_oauth.services.oauth_service import AuthorizationServer
from mock_oauth.services.registry import Registry, load_registry

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)


async def _oauth_error_handler(_request: Request, exc: OAuthError) -> PlainTextResponse:
    return PlainTextResponse(
        exc.message, status_code=exc.status_code, headers=exc.headers
    )


def create_app(
    settings: Settings = SETTINGS,
    registry: Registry | None = None,
) -> FastAPI:
    """Build an app instance with its own, empty credential stores.

    ``registry`` defaults to the JSON files named in ``settings``; tests
    pass one built in memory.
    """
    if registry is None:
        registry = load_registry(settings.clients_file, settings.users_file)

    app = FastAPI(
        title="mock-oauth",
        docs_url="/docs" if settings.is_dev else None,
        redoc_url="/redoc" if settings.is_dev else None,
    )
    app.state.authorization_server = AuthorizationServer(
        clients=registry.clients,
        users=registry.users,
    )

    app.add_exception_handler(OAuthError, _oauth_error_handler)

    # Browser-based clients call /token and /userinfo cross-origin.
    # Preflights and cookie-bearing requests get their Origin echoed, not "*".
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Origin",
            "X-Requested-With",
            "Content-Type",
            "Accept",
            "Authorization",
        ],
    )

    # Middleware execution order: last-added runs first (outermost layer).
    # RequestContext (outermost) → Metrics → CORS → route handler
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(metrics_router)
    app.include_router(health_router)
    app.include_router(pages_router)
    app.include_router(oauth_router)

    logger.info(
        "mock-oauth ready  env=%s log_level=%s port=%d docs=%s",
        settings.app_env,
        settings.log_level,
        settings.port,
        "on" if settings.is_dev else "off",
    )
    return app


app = create_app()
