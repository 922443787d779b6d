"""Shared-secret guard for the HTTP API."""

from __future__ import annotations

import hmac

from fastapi import Request, Response
from starlette.middleware.base import (
    BaseHTTPMiddleware,
    RequestResponseEndpoint,
)
from starlette.responses import JSONResponse

from codenote.constants import AUTH_EXEMPT_PATHS

API_KEY_HEADER = "X-API-Key"


def _needs_key(request: Request) -> bool:
    # CORS preflights carry no custom headers
    if request.method == "OPTIONS":
        return False
    return request.url.path not in AUTH_EXEMPT_PATHS


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Require ``X-API-Key`` when ``Settings.api_key`` is set.

    An empty setting leaves the API open, which is how the browser
    extension talks to a local server.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        expected: str = request.app.state.settings.api_key
        if expected and _needs_key(request):
            provided = request.headers.get(API_KEY_HEADER, "")
            if not hmac.compare_digest(
                provided.encode(), expected.encode()
            ):
                return JSONResponse(
                    status_code=401,
                    content={"error": "Invalid or missing API key"},
                )
        return await call_next(request)
