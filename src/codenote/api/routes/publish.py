"""Publish an accepted file to the user's GitHub repository."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header
from starlette.responses import JSONResponse

from codenote.api.dependencies import get_publisher, get_settings, get_store
from codenote.api.schemas import PublishRequest, PublishResponse
from codenote.config import Settings
from codenote.constants import PublishOutcome
from codenote.publishing.github import GitHubContentStore, RemoteStoreError
from codenote.publishing.publisher import RemoteFilePublisher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["publish"])

OUTCOME_STATUS: dict[PublishOutcome, int] = {
    PublishOutcome.NO_CHANGE: 200,
    PublishOutcome.CREATED: 201,
    PublishOutcome.UPDATED: 200,
    PublishOutcome.CONFLICT: 409,
    PublishOutcome.REMOTE_READ_FAILED: 502,
    PublishOutcome.REMOTE_WRITE_FAILED: 502,
}


def _bearer_token(authorization: str | None) -> str | None:
    """Accept ``token <t>`` (GitHub style) or ``Bearer <t>``."""
    if not authorization:
        return None
    scheme, _, value = authorization.strip().partition(" ")
    if scheme.lower() not in ("token", "bearer"):
        return None
    return value.strip() or None


@router.post("/publish", response_model=PublishResponse)
async def publish_file(
    body: PublishRequest,
    authorization: str | None = Header(default=None),
    publisher: RemoteFilePublisher = Depends(get_publisher),
    store: GitHubContentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Create or update ``path`` only when its content changed."""
    token = _bearer_token(authorization)
    if token is None:
        return JSONResponse(
            status_code=401, content={"error": "Please authenticate first."}
        )

    owner = body.owner
    if not owner:
        try:
            owner = await store.get_authenticated_login(token)
        except RemoteStoreError as exc:
            logger.warning("event=owner_lookup_failed status=%s", exc.status_code)
            return JSONResponse(
                status_code=401 if exc.status_code == 401 else 502,
                content={"error": str(exc)},
            )

    branch = body.branch or settings.default_branch
    result = await publisher.publish(
        owner,
        body.repo,
        body.path,
        branch,
        body.content.encode("utf-8"),
        token,
    )

    content = PublishResponse(
        ok=result.ok,
        outcome=result.outcome,
        message=result.message,
        path=result.path,
        branch=result.branch,
        commit_sha=result.commit_sha,
    ).model_dump()
    if not result.ok:
        content["error"] = result.message
    return JSONResponse(
        status_code=OUTCOME_STATUS[result.outcome], content=content
    )
