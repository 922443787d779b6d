"""Protocol-based content store interface.

The GitHub implementation satisfies this structurally (no
inheritance). Test doubles can be plain classes matching the same
signatures.
"""

from typing import Protocol

from codenote.publishing.schemas import ReadResult, WriteResult


class ContentStore(Protocol):
    async def read_file(
        self, owner: str, repo: str, path: str, ref: str, *, token: str
    ) -> ReadResult: ...

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
    ) -> WriteResult: ...
