"""Reject request bodies larger than the configured cap."""

from __future__ import annotations

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


def _too_large(limit: int) -> JSONResponse:
    return JSONResponse(
        status_code=413,
        content={"error": "Request body too large", "limit_bytes": limit},
    )


class BodySizeLimitMiddleware:
    """Enforce ``Settings.max_request_bytes`` on every request body.

    A declared Content-Length is checked before anything is read.
    Bodies sent without one are counted as they arrive; reading stops
    at the first chunk that crosses the cap, so an oversized upload is
    never held in memory whole.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] not in _BODY_METHODS:
            await self.app(scope, receive, send)
            return

        limit: int = scope["app"].state.settings.max_request_bytes
        headers = dict(scope["headers"])
        declared = headers.get(b"content-length")
        if declared is not None:
            try:
                too_large = int(declared) > limit
            except ValueError:
                response = JSONResponse(
                    status_code=400,
                    content={"error": "Invalid Content-Length header"},
                )
                await response(scope, receive, send)
                return
            if too_large:
                await _too_large(limit)(scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        # No declared length: buffer while counting, then replay
        buffered: list[Message] = []
        received = 0
        while True:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > limit:
                await _too_large(limit)(scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay, send)
