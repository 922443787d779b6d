"""GitHub contents API as a ContentStore."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from codenote.constants import (
    ERROR_TRUNCATION_CHARS,
    GITHUB_ACCEPT,
    WriteStatus,
)
from codenote.errors import classify_error
from codenote.publishing.schemas import ReadResult, WriteResult

logger = logging.getLogger(__name__)


class RemoteStoreError(Exception):
    """A store call that has no outcome type of its own failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _error_message(resp: httpx.Response) -> str:
    """GitHub error bodies carry ``message``; fall back to the reason."""
    try:
        body: Any = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])[:ERROR_TRUNCATION_CHARS]
    return resp.reason_phrase or f"HTTP {resp.status_code}"


class GitHubContentStore:
    """Read and write single files through ``/repos/{o}/{r}/contents``.

    The httpx client is owned by the caller (created once in the app
    lifespan) so connections are pooled across requests.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_url: str = "https://api.github.com",
    ) -> None:
        self._client = client
        self._api_url = api_url.rstrip("/")

    def _contents_url(self, owner: str, repo: str, path: str) -> str:
        return (
            f"{self._api_url}/repos/{quote(owner, safe='')}"
            f"/{quote(repo, safe='')}"
            f"/contents/{quote(path.lstrip('/'), safe='/')}"
        )

    @staticmethod
    def _headers(token: str) -> dict[str, str]:
        return {
            "Authorization": f"token {token}",
            "Accept": GITHUB_ACCEPT,
        }

    async def read_file(
        self, owner: str, repo: str, path: str, ref: str, *, token: str
    ) -> ReadResult:
        url = self._contents_url(owner, repo, path)
        try:
            resp = await self._client.get(
                url, params={"ref": ref}, headers=self._headers(token)
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "event=remote_read_error path=%s error_class=%s",
                path,
                classify_error(exc).value,
            )
            return ReadResult.failed(str(exc)[:ERROR_TRUNCATION_CHARS])

        if resp.status_code == 404:
            return ReadResult.not_found()
        if resp.status_code != 200:
            return ReadResult.failed(_error_message(resp))

        try:
            body: Any = resp.json()
        except ValueError:
            return ReadResult.failed("Unreadable response from GitHub")
        if not isinstance(body, dict) or body.get("type", "file") != "file":
            return ReadResult.failed(f"{path} is not a file")
        sha = body.get("sha")
        if not isinstance(sha, str) or not sha:
            return ReadResult.failed("Response carried no file sha")
        return ReadResult.found(sha, str(body.get("content") or ""))

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
        payload: dict[str, str] = {
            "message": message,
            "content": content,
            "branch": branch,
        }
        if fingerprint is not None:
            payload["sha"] = fingerprint

        url = self._contents_url(owner, repo, path)
        try:
            resp = await self._client.put(
                url, json=payload, headers=self._headers(token)
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "event=remote_write_error path=%s error_class=%s",
                path,
                classify_error(exc).value,
            )
            return WriteResult(
                WriteStatus.ERROR, error=str(exc)[:ERROR_TRUNCATION_CHARS]
            )

        if resp.status_code in (200, 201):
            try:
                body: Any = resp.json()
            except ValueError:
                body = {}
            commit = body.get("commit") if isinstance(body, dict) else None
            return WriteResult(
                WriteStatus.SUCCESS,
                commit_sha=(
                    commit.get("sha") if isinstance(commit, dict) else None
                ),
            )
        if resp.status_code == 409:
            return WriteResult(WriteStatus.CONFLICT, error=_error_message(resp))
        return WriteResult(WriteStatus.ERROR, error=_error_message(resp))

    async def get_authenticated_login(self, token: str) -> str:
        """Return the login of the token's owner (``GET /user``)."""
        try:
            resp = await self._client.get(
                f"{self._api_url}/user", headers=self._headers(token)
            )
        except httpx.HTTPError as exc:
            raise RemoteStoreError(
                f"Failed to fetch user: {exc}"[:ERROR_TRUNCATION_CHARS]
            ) from exc
        if resp.status_code != 200:
            raise RemoteStoreError(
                f"Failed to fetch user: {_error_message(resp)}",
                status_code=resp.status_code,
            )
        try:
            body: Any = resp.json()
        except ValueError:
            body = None
        login = body.get("login") if isinstance(body, dict) else None
        if not isinstance(login, str) or not login:
            raise RemoteStoreError("Failed to fetch user: no login in response")
        return login
