"""Tests for GitHubContentStore over a mocked HTTP transport."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from codenote.constants import ReadStatus, WriteStatus
from codenote.publishing.github import GitHubContentStore, RemoteStoreError
from codenote.publishing.schemas import WriteResult

API = "https://api.example.test"

Handler = Callable[[httpx.Request], httpx.Response]


def _store(handler: Handler) -> GitHubContentStore:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GitHubContentStore(client, API + "/")


# ── read_file ────────────────────────────────────────────────


async def test_read_found() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"type": "file", "sha": "abc123", "content": "eD0x\n"},
        )

    result = await _store(handler).read_file(
        "octo cat", "notes", "/src/a b.py", "dev", token="tok"
    )

    assert result.status is ReadStatus.FOUND
    assert result.fingerprint == "abc123"
    assert result.content == "eD0x\n"
    (request,) = seen
    raw_path = request.url.raw_path.split(b"?")[0]
    assert raw_path == b"/repos/octo%20cat/notes/contents/src/a%20b.py"
    assert request.url.params["ref"] == "dev"
    assert request.headers["Authorization"] == "token tok"
    assert "github" in request.headers["Accept"]


async def test_read_not_found() -> None:
    result = await _store(
        lambda r: httpx.Response(404, json={"message": "Not Found"})
    ).read_file("o", "r", "p", "main", token="t")
    assert result.status is ReadStatus.NOT_FOUND


async def test_read_unauthorized_is_error() -> None:
    result = await _store(
        lambda r: httpx.Response(401, json={"message": "Bad credentials"})
    ).read_file("o", "r", "p", "main", token="t")
    assert result.status is ReadStatus.ERROR
    assert result.error == "Bad credentials"


async def test_read_directory_is_error() -> None:
    result = await _store(
        lambda r: httpx.Response(200, json=[{"type": "file"}])
    ).read_file("o", "r", "dir", "main", token="t")
    assert result.status is ReadStatus.ERROR


async def test_read_missing_sha_is_error() -> None:
    result = await _store(
        lambda r: httpx.Response(200, json={"type": "file", "content": ""})
    ).read_file("o", "r", "p", "main", token="t")
    assert result.status is ReadStatus.ERROR


async def test_read_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = await _store(handler).read_file("o", "r", "p", "main", token="t")
    assert result.status is ReadStatus.ERROR
    assert "connection refused" in (result.error or "")


# ── write_file ───────────────────────────────────────────────


async def test_write_create_omits_sha() -> None:
    bodies: list[dict[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "PUT"
        bodies.append(json.loads(request.content))
        return httpx.Response(
            201, json={"content": {"sha": "new1"}, "commit": {"sha": "c9"}}
        )

    result = await _store(handler).write_file(
        "o", "r", "a.py", "main", "eD0x", "Add a.py (via codenote)", token="t"
    )

    assert result == WriteResult(WriteStatus.SUCCESS, commit_sha="c9")
    assert bodies == [{
        "message": "Add a.py (via codenote)",
        "content": "eD0x",
        "branch": "main",
    }]


async def test_write_update_sends_sha() -> None:
    bodies: list[dict[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"content": {"sha": "v2"}})

    result = await _store(handler).write_file(
        "o", "r", "a.py", "main", "eQ==", "msg", token="t", fingerprint="v1"
    )
    assert result.status is WriteStatus.SUCCESS
    assert result.commit_sha is None
    assert bodies[0]["sha"] == "v1"


async def test_write_conflict() -> None:
    result = await _store(
        lambda r: httpx.Response(
            409, json={"message": "a.py does not match v1"}
        )
    ).write_file("o", "r", "a.py", "main", "e", "m", token="t", fingerprint="v1")
    assert result.status is WriteStatus.CONFLICT
    assert result.error == "a.py does not match v1"


@pytest.mark.parametrize("status", [403, 422, 500])
async def test_write_other_failures(status: int) -> None:
    result = await _store(
        lambda r: httpx.Response(status, text="nope")
    ).write_file("o", "r", "a.py", "main", "e", "m", token="t")
    assert result.status is WriteStatus.ERROR
    assert result.error


# ── get_authenticated_login ──────────────────────────────────


async def test_login_lookup() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/user"
        return httpx.Response(200, json={"login": "octocat"})

    assert await _store(handler).get_authenticated_login("t") == "octocat"


async def test_login_lookup_rejected() -> None:
    store = _store(
        lambda r: httpx.Response(401, json={"message": "Bad credentials"})
    )
    with pytest.raises(RemoteStoreError) as exc_info:
        await store.get_authenticated_login("t")
    assert exc_info.value.status_code == 401
    assert "Bad credentials" in str(exc_info.value)


async def test_login_lookup_without_login() -> None:
    store = _store(lambda r: httpx.Response(200, json={"id": 1}))
    with pytest.raises(RemoteStoreError):
        await store.get_authenticated_login("t")
