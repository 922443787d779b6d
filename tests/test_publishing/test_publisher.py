"""Tests for the conflict-safe publish flow against the fake store."""

from __future__ import annotations

import base64

from codenote.constants import PublishOutcome
from codenote.publishing.fakes import FakeContentStore
from codenote.publishing.publisher import (
    RemoteFilePublisher,
    commit_message,
    encode_content,
    normalize_remote,
)
from codenote.publishing.schemas import PublishResult, ReadResult

OWNER, REPO, PATH, BRANCH, TOKEN = "octocat", "notes", "two_sum.py", "main", "t"


async def _publish(
    store: FakeContentStore, content: bytes, path: str = PATH
) -> PublishResult:
    return await RemoteFilePublisher(store).publish(
        OWNER, REPO, path, BRANCH, content, TOKEN
    )


# ── Helpers ──────────────────────────────────────────────────


def test_encode_content_is_single_line() -> None:
    encoded = encode_content(b"x" * 200)
    assert "\n" not in encoded
    assert base64.b64decode(encoded) == b"x" * 200


def test_normalize_remote_strips_wrapping() -> None:
    assert normalize_remote("YWJj\nZGVm\r\n") == "YWJjZGVm"
    assert normalize_remote(None) == ""


def test_commit_message() -> None:
    assert commit_message("a.py", exists=False) == "Add a.py (via codenote)"
    assert commit_message("a.py", exists=True) == "Update a.py (via codenote)"


# ── Outcomes ─────────────────────────────────────────────────


async def test_create_then_no_change(fake_store: FakeContentStore) -> None:
    content = b"print('hi')\n" * 20

    first = await _publish(fake_store, content)
    assert first.outcome is PublishOutcome.CREATED
    assert first.ok
    assert first.commit_sha == "c1"
    assert fake_store.writes[0].fingerprint is None
    assert fake_store.writes[0].message == f"Add {PATH} (via codenote)"

    second = await _publish(fake_store, content)
    assert second.outcome is PublishOutcome.NO_CHANGE
    assert second.message == "No changes detected; nothing was pushed."
    assert len(fake_store.writes) == 1
    assert fake_store.content_of(OWNER, REPO, PATH, BRANCH) == content


async def test_update_sends_fingerprint(fake_store: FakeContentStore) -> None:
    fingerprint = fake_store.seed(OWNER, REPO, PATH, BRANCH, b"old")

    result = await _publish(fake_store, b"new")

    assert result.outcome is PublishOutcome.UPDATED
    assert result.message == "File updated successfully."
    (write,) = fake_store.writes
    assert write.fingerprint == fingerprint
    assert write.message == f"Update {PATH} (via codenote)"
    assert fake_store.content_of(OWNER, REPO, PATH, BRANCH) == b"new"


async def test_concurrent_change_is_conflict(
    fake_store: FakeContentStore,
) -> None:
    fake_store.seed(OWNER, REPO, PATH, BRANCH, b"v1")

    async def _someone_else_pushes() -> None:
        fake_store.seed(OWNER, REPO, PATH, BRANCH, b"v2 from elsewhere")

    fake_store.before_write = _someone_else_pushes
    result = await _publish(fake_store, b"mine")

    assert result.outcome is PublishOutcome.CONFLICT
    assert not result.ok
    assert result.message.startswith("Conflict:")
    assert len(fake_store.writes) == 1
    assert (
        fake_store.content_of(OWNER, REPO, PATH, BRANCH)
        == b"v2 from elsewhere"
    )


async def test_conflict_is_not_retried_and_next_attempt_rereads(
    fake_store: FakeContentStore,
) -> None:
    fake_store.seed(OWNER, REPO, PATH, BRANCH, b"v1")

    async def _race() -> None:
        fake_store.seed(OWNER, REPO, PATH, BRANCH, b"v2")

    fake_store.before_write = _race
    first = await _publish(fake_store, b"mine")
    second = await _publish(fake_store, b"mine")

    assert first.outcome is PublishOutcome.CONFLICT
    assert second.outcome is PublishOutcome.UPDATED
    assert fake_store.reads == 2
    assert fake_store.content_of(OWNER, REPO, PATH, BRANCH) == b"mine"


async def test_file_created_between_read_and_write(
    fake_store: FakeContentStore,
) -> None:
    async def _race() -> None:
        fake_store.seed(OWNER, REPO, PATH, BRANCH, b"theirs")

    fake_store.before_write = _race
    result = await _publish(fake_store, b"mine")

    assert result.outcome is PublishOutcome.REMOTE_WRITE_FAILED
    assert fake_store.content_of(OWNER, REPO, PATH, BRANCH) == b"theirs"


async def test_read_error(fake_store: FakeContentStore) -> None:
    fake_store.read_error = "Bad credentials"
    result = await _publish(fake_store, b"x")
    assert result.outcome is PublishOutcome.REMOTE_READ_FAILED
    assert "Bad credentials" in result.message
    assert fake_store.writes == []


async def test_write_error(fake_store: FakeContentStore) -> None:
    fake_store.write_error = "Branch is protected"
    result = await _publish(fake_store, b"x")
    assert result.outcome is PublishOutcome.REMOTE_WRITE_FAILED
    assert result.detail == "Branch is protected"


async def test_store_exceptions_become_outcomes() -> None:
    class _Broken(FakeContentStore):
        async def read_file(self, *args: object, **kwargs: object) -> ReadResult:
            raise ConnectionError("connection reset")

    result = await _publish(_Broken(), b"x")
    assert result.outcome is PublishOutcome.REMOTE_READ_FAILED
    assert result.detail == "connection reset"


async def test_write_exception_becomes_outcome() -> None:
    class _Broken(FakeContentStore):
        async def write_file(self, *args: object, **kwargs: object) -> object:
            raise TimeoutError("write timed out")

    result = await _publish(_Broken(), b"x")
    assert result.outcome is PublishOutcome.REMOTE_WRITE_FAILED
    assert result.detail == "write timed out"


async def test_found_without_fingerprint_is_read_failure() -> None:
    class _NoSha(FakeContentStore):
        async def read_file(self, *args: object, **kwargs: object) -> ReadResult:
            return ReadResult.found("", "eA==")

    store = _NoSha()
    result = await _publish(store, b"x")
    assert result.outcome is PublishOutcome.REMOTE_READ_FAILED
    assert store.writes == []


async def test_non_ascii_content_round_trips(
    fake_store: FakeContentStore,
) -> None:
    content = "# Überprüfung: 二分探索 🚀\nx = 1\n".encode()
    assert (await _publish(fake_store, content)).outcome is (
        PublishOutcome.CREATED
    )
    assert (await _publish(fake_store, content)).outcome is (
        PublishOutcome.NO_CHANGE
    )
    assert fake_store.content_of(OWNER, REPO, PATH, BRANCH) == content


async def test_empty_content_is_published(
    fake_store: FakeContentStore,
) -> None:
    result = await _publish(fake_store, b"", path="empty.txt")
    assert result.outcome is PublishOutcome.CREATED
    assert fake_store.content_of(OWNER, REPO, "empty.txt", BRANCH) == b""


async def test_branches_are_independent(fake_store: FakeContentStore) -> None:
    fake_store.seed(OWNER, REPO, PATH, "dev", b"x")
    result = await _publish(fake_store, b"x")
    assert result.outcome is PublishOutcome.CREATED
