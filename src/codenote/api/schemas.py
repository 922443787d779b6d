"""Request/response schemas for the HTTP API."""

from typing import Any

from pydantic import BaseModel, Field

from codenote.constants import Verbosity


class EnhanceCodeRequest(BaseModel):
    """Request body for POST /api/ai/enhance-code.

    ``code`` defaults to empty so a missing field is reported as
    "Missing code" (400) rather than a schema error.
    """

    code: str = ""
    language: str | None = Field(default=None, max_length=64)
    verbosity: Verbosity | None = None


class PublishRequest(BaseModel):
    """Request body for POST /api/publish."""

    repo: str = Field(min_length=1, max_length=100)
    path: str = Field(min_length=1, max_length=1024)
    content: str
    branch: str | None = Field(default=None, max_length=255)
    owner: str | None = Field(default=None, max_length=100)


class EnhanceCodeResponse(BaseModel):
    """Success envelope for enhance-code."""

    ok: bool = True
    data: dict[str, Any]


class PublishResponse(BaseModel):
    ok: bool
    outcome: str
    message: str
    path: str
    branch: str
    commit_sha: str | None = None
