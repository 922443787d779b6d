"""Result types for the content store and the publisher."""

from __future__ import annotations

from dataclasses import dataclass

from codenote.constants import (
    PUBLISH_MESSAGES,
    PublishOutcome,
    ReadStatus,
    WriteStatus,
)


@dataclass(frozen=True)
class ReadResult:
    """One read of one file at one ref.

    ``fingerprint`` is the store's version token (a blob SHA for
    GitHub). It authorizes exactly one following conditional write
    and must not be kept beyond the publish attempt that read it.
    """

    status: ReadStatus
    fingerprint: str | None = None
    content: str | None = None  # base64, possibly line-wrapped
    error: str | None = None

    @classmethod
    def found(cls, fingerprint: str, content: str) -> ReadResult:
        return cls(ReadStatus.FOUND, fingerprint=fingerprint, content=content)

    @classmethod
    def not_found(cls) -> ReadResult:
        return cls(ReadStatus.NOT_FOUND)

    @classmethod
    def failed(cls, error: str) -> ReadResult:
        return cls(ReadStatus.ERROR, error=error)


@dataclass(frozen=True)
class WriteResult:
    status: WriteStatus
    commit_sha: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class PublishResult:
    """Terminal outcome of RemoteFilePublisher.publish()."""

    outcome: PublishOutcome
    path: str
    branch: str
    detail: str | None = None
    commit_sha: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome in (
            PublishOutcome.NO_CHANGE,
            PublishOutcome.CREATED,
            PublishOutcome.UPDATED,
        )

    @property
    def message(self) -> str:
        base = PUBLISH_MESSAGES[self.outcome]
        if self.detail and not self.ok:
            return f"{base} {self.detail}"
        return base
