"""Health and readiness endpoints.

/health is the liveness probe: if the process answers, it is alive.  The
body also reports registry size and how many codes and tokens are
outstanding, which is handy when a test suite leaks state between runs.

/ready is the readiness probe.  The registry is loaded before the app
object exists, so an instance that answers at all can serve traffic.
"""

from __future__ import annotations

from fastapi import APIRouter, Response

from mock_oauth.api.dependencies import ServerDep

router = APIRouter(tags=["health"])


@router.get("/health")
def health(server: ServerDep) -> dict:
    return {
        "status": "ok",
        "registry": {
            "clients": len(server.clients.list_all()),
            "users": len(server.users.list_all()),
        },
        "outstanding": {
            "authorization_codes": len(server.codes),
            "access_tokens": len(server.tokens),
        },
    }


@router.get("/ready")
def ready() -> Response:
    return Response(status_code=200)
