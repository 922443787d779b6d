"""In-memory content store for testing.

Dict-backed ContentStore with conditional-write semantics: an update
whose fingerprint does not match the current version is a CONFLICT.
No httpx, no I/O.
"""

from __future__ import annotations

import base64
import hashlib
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from codenote.constants import WriteStatus
from codenote.publishing.github import RemoteStoreError
from codenote.publishing.schemas import ReadResult, WriteResult

_Key = tuple[str, str, str, str]


@dataclass
class WriteCall:
    path: str
    branch: str
    content: str
    message: str
    fingerprint: str | None


def _wrap(encoded: str, width: int = 60) -> str:
    """Line-wrap base64 the way GitHub returns it."""
    return "\n".join(
        encoded[i : i + width] for i in range(0, len(encoded), width)
    ) + "\n"


class FakeContentStore:
    """Dict-backed ContentStore keyed by (owner, repo, path, branch)."""

    def __init__(self) -> None:
        self._files: dict[_Key, tuple[str, bytes]] = {}
        self._version = 0
        self.reads = 0
        self.writes: list[WriteCall] = []
        self.read_error: str | None = None
        self.write_error: str | None = None
        # Runs between a read and the following write (concurrent writer)
        self.before_write: Callable[[], Awaitable[None]] | None = None
        # None simulates a rejected token on the user lookup
        self.login: str | None = "octocat"

    async def get_authenticated_login(self, token: str) -> str:
        if self.login is None:
            raise RemoteStoreError(
                "Failed to fetch user: Bad credentials", status_code=401
            )
        return self.login

    def seed(
        self, owner: str, repo: str, path: str, branch: str, content: bytes
    ) -> str:
        """Place a file directly; return its fingerprint."""
        self._version += 1
        fingerprint = hashlib.sha1(
            f"{self._version}:".encode() + content
        ).hexdigest()
        self._files[(owner, repo, path, branch)] = (fingerprint, content)
        return fingerprint

    def content_of(
        self, owner: str, repo: str, path: str, branch: str
    ) -> bytes | None:
        entry = self._files.get((owner, repo, path, branch))
        return entry[1] if entry else None

    async def read_file(
        self, owner: str, repo: str, path: str, ref: str, *, token: str
    ) -> ReadResult:
        self.reads += 1
        if self.read_error is not None:
            return ReadResult.failed(self.read_error)
        entry = self._files.get((owner, repo, path, ref))
        if entry is None:
            return ReadResult.not_found()
        fingerprint, data = entry
        return ReadResult.found(
            fingerprint, _wrap(base64.b64encode(data).decode("ascii"))
        )

    async def write_file(
        self,
        owner: str,
        repo: str,
        path: str,
        branch: str,
        content: str,
        message: str,
        *,
        token: str,
        fingerprint: str | None = None,
    ) -> WriteResult:
        if self.before_write is not None:
            hook, self.before_write = self.before_write, None
            await hook()
        self.writes.append(
            WriteCall(path, branch, content, message, fingerprint)
        )
        if self.write_error is not None:
            return WriteResult(WriteStatus.ERROR, error=self.write_error)

        key = (owner, repo, path, branch)
        current = self._files.get(key)
        if fingerprint is None and current is not None:
            return WriteResult(
                WriteStatus.ERROR, error='"sha" wasn\'t supplied.'
            )
        if fingerprint is not None and (
            current is None or current[0] != fingerprint
        ):
            return WriteResult(
                WriteStatus.CONFLICT,
                error=f"{path} does not match {fingerprint}",
            )
        self.seed(owner, repo, path, branch, base64.b64decode(content))
        return WriteResult(WriteStatus.SUCCESS, commit_sha=f"c{self._version}")
