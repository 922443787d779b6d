"""Conflict-safe, idempotent publish of one file to a content store.

One publish attempt is a straight line through four states::

    ReadingRemote → Deciding → WritingCreate | WritingUpdate → Done

The fingerprint observed in ReadingRemote is the only guard against a
lost update, so it lives in a local of ``publish()`` and is handed to
exactly one conditional write. Nothing is cached on the publisher; a
stale fingerprint makes the store answer CONFLICT, which is surfaced
to the caller and never retried here.
"""

from __future__ import annotations

import base64
import logging

from codenote.constants import (
    COMMIT_SUFFIX,
    ERROR_TRUNCATION_CHARS,
    PublishOutcome,
    ReadStatus,
    WriteStatus,
)
from codenote.errors import classify_error
from codenote.publishing.protocols import ContentStore
from codenote.publishing.schemas import PublishResult, ReadResult

logger = logging.getLogger(__name__)


def encode_content(content: bytes) -> str:
    """Canonical single-line base64 encoding of local content."""
    return base64.b64encode(content).decode("ascii")


def normalize_remote(encoded: str | None) -> str:
    """Strip the line wrapping stores add to base64 payloads."""
    return "".join((encoded or "").split())


def commit_message(path: str, *, exists: bool) -> str:
    verb = "Update" if exists else "Add"
    return f"{verb} {path} {COMMIT_SUFFIX}"


class RemoteFilePublisher:
    """Create-or-update a file with optimistic concurrency."""

    def __init__(self, store: ContentStore) -> None:
        self._store = store

    async def publish(
        self,
        owner: str,
        repo_name: str,
        path: str,
        branch: str,
        content: bytes,
        auth_token: str,
    ) -> PublishResult:
        # ReadingRemote
        try:
            remote = await self._store.read_file(
                owner, repo_name, path, branch, token=auth_token
            )
        except Exception as exc:
            logger.error(
                "event=remote_read_failed path=%s error_class=%s",
                path,
                classify_error(exc).value,
            )
            remote = ReadResult.failed(str(exc)[:ERROR_TRUNCATION_CHARS])

        if remote.status is ReadStatus.ERROR:
            return self._done(
                PublishOutcome.REMOTE_READ_FAILED, path, branch, remote.error
            )
        if remote.status is ReadStatus.FOUND and not remote.fingerprint:
            return self._done(
                PublishOutcome.REMOTE_READ_FAILED,
                path,
                branch,
                "Remote file has no version fingerprint",
            )

        # Deciding
        local = encode_content(content)
        if remote.status is ReadStatus.FOUND:
            if normalize_remote(remote.content) == local:
                return self._done(PublishOutcome.NO_CHANGE, path, branch)
            return await self._write(
                owner, repo_name, path, branch, local, auth_token,
                fingerprint=remote.fingerprint,
            )
        return await self._write(
            owner, repo_name, path, branch, local, auth_token,
            fingerprint=None,
        )

    async def _write(
        self,
        owner: str,
        repo_name: str,
        path: str,
        branch: str,
        encoded: str,
        auth_token: str,
        *,
        fingerprint: str | None,
    ) -> PublishResult:
        """WritingUpdate when a fingerprint is given, else WritingCreate."""
        updating = fingerprint is not None
        try:
            result = await self._store.write_file(
                owner,
                repo_name,
                path,
                branch,
                encoded,
                commit_message(path, exists=updating),
                token=auth_token,
                fingerprint=fingerprint,
            )
        except Exception as exc:
            logger.error(
                "event=remote_write_failed path=%s error_class=%s",
                path,
                classify_error(exc).value,
            )
            return self._done(
                PublishOutcome.REMOTE_WRITE_FAILED,
                path,
                branch,
                str(exc)[:ERROR_TRUNCATION_CHARS],
            )

        if result.status is WriteStatus.SUCCESS:
            outcome = (
                PublishOutcome.UPDATED if updating else PublishOutcome.CREATED
            )
            return self._done(
                outcome, path, branch, commit_sha=result.commit_sha
            )
        if result.status is WriteStatus.CONFLICT and updating:
            return self._done(
                PublishOutcome.CONFLICT, path, branch, result.error
            )
        return self._done(
            PublishOutcome.REMOTE_WRITE_FAILED, path, branch, result.error
        )

    @staticmethod
    def _done(
        outcome: PublishOutcome,
        path: str,
        branch: str,
        detail: str | None = None,
        *,
        commit_sha: str | None = None,
    ) -> PublishResult:
        level = logging.INFO if outcome in (
            PublishOutcome.NO_CHANGE,
            PublishOutcome.CREATED,
            PublishOutcome.UPDATED,
        ) else logging.WARNING
        logger.log(
            level,
            "event=publish_done outcome=%s path=%s branch=%s",
            outcome,
            path,
            branch,
        )
        return PublishResult(
            outcome=outcome,
            path=path,
            branch=branch,
            detail=detail,
            commit_sha=commit_sha,
        )
