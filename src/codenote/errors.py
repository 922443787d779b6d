"""Exception types and error classification.

Annotation failures are raised as typed exceptions carrying a kind;
callers branch on ``kind`` rather than parsing messages. Publishing
does not raise for remote failures; see ``PublishResult``.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any

from codenote.constants import (
    ANNOTATION_ERROR_MESSAGES,
    AnnotationErrorKind,
    ParseErrorKind,
)


class PayloadParseError(Exception):
    """Generated text could not be turned into an annotation record."""

    def __init__(
        self,
        kind: ParseErrorKind,
        *,
        snippet: str | None = None,
        parsed: Any = None,
    ) -> None:
        if kind is ParseErrorKind.MALFORMED_PAYLOAD:
            msg = "Failed to parse generated output as JSON after cleaning"
        else:
            msg = "Generated JSON is missing commented_code"
        super().__init__(msg)
        self.kind = kind
        self.snippet = snippet
        self.parsed = parsed

    def diagnostic(self) -> dict[str, Any]:
        """Return the diagnostic payload for this failure."""
        if self.kind is ParseErrorKind.MALFORMED_PAYLOAD:
            return {"snippet": self.snippet}
        return {"parsed": self.parsed}


class AnnotationError(Exception):
    """annotate() failed; ``kind`` says why."""

    def __init__(
        self,
        kind: AnnotationErrorKind,
        message: str | None = None,
        *,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message or ANNOTATION_ERROR_MESSAGES[kind])
        self.kind = kind
        self.detail: dict[str, Any] = detail or {}

    @property
    def message(self) -> str:
        return str(self)


class ErrorClass(Enum):
    TRANSIENT = "transient"  # 429, network errors
    SERVER = "server"  # 500, 502, 503
    TIMEOUT = "timeout"
    CLIENT = "client"  # 400, 401, 403
    UNKNOWN = "unknown"


def classify_error(error: BaseException) -> ErrorClass:
    """Classify a transport or provider error for structured logging.

    Checks a structured ``status_code`` attribute first (httpx,
    litellm), then exception types, then message text.
    """
    status_code = getattr(error, "status_code", None)
    if status_code is None:
        response = getattr(error, "response", None)
        status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        if status_code == 429:
            return ErrorClass.TRANSIENT
        if 400 <= status_code < 500:
            return ErrorClass.CLIENT
        if 500 <= status_code < 600:
            return ErrorClass.SERVER

    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return ErrorClass.TIMEOUT

    msg = str(error).lower()
    if "timeout" in msg or "timed out" in msg:
        return ErrorClass.TIMEOUT
    if "rate limit" in msg or "429" in msg:
        return ErrorClass.TRANSIENT
    if "connection" in msg or "econnrefused" in msg:
        return ErrorClass.TRANSIENT
    return ErrorClass.UNKNOWN
