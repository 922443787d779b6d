"""Tests for POST /api/ai/enhance-code and GET /api/health."""

from __future__ import annotations

from httpx import AsyncClient

from codenote.config import Settings
from codenote.generation.fakes import FakeInvoker
from codenote.publishing.fakes import FakeContentStore
from tests.conftest import fenced, install_app_state, make_service

URL = "/api/ai/enhance-code"


async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["generation"] == "configured"
    assert "timestamp" in data


async def test_health_reports_unconfigured(
    client: AsyncClient,
    test_settings: Settings,
    fake_store: FakeContentStore,
) -> None:
    install_app_state(test_settings, make_service(None), fake_store)
    resp = await client.get("/api/health")
    assert resp.json()["generation"] == "unconfigured"


async def test_enhance_success(
    client: AsyncClient, fake_invoker: FakeInvoker
) -> None:
    resp = await client.post(
        URL, json={"code": "x=1", "language": "python", "verbosity": "concise"}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    data = body["data"]
    assert data["commented_code"] == "x=1 # set x"
    assert data["original_code"] == "x=1"
    assert data["verbosity"] == "concise"
    assert data["explanation"] == []
    assert "LANGUAGE: python" in fake_invoker.calls[0].user_content


async def test_enhance_defaults(
    client: AsyncClient, fake_invoker: FakeInvoker
) -> None:
    resp = await client.post(URL, json={"code": "x=1"})
    assert resp.status_code == 200
    assert resp.json()["data"]["verbosity"] == "concise"
    assert "LANGUAGE: code" in fake_invoker.calls[0].user_content


async def test_enhance_keeps_extra_fields(
    client: AsyncClient,
    test_settings: Settings,
    fake_store: FakeContentStore,
) -> None:
    invoker = FakeInvoker(
        fenced({"commented_code": "y", "pattern": "DP", "hints": ["memo"]})
    )
    install_app_state(test_settings, make_service(invoker), fake_store)
    resp = await client.post(URL, json={"code": "y"})
    data = resp.json()["data"]
    assert data["pattern"] == "DP"
    assert data["hints"] == ["memo"]


async def test_enhance_missing_code(
    client: AsyncClient, fake_invoker: FakeInvoker
) -> None:
    resp = await client.post(URL, json={})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing code", "kind": "missing_input"}
    assert fake_invoker.calls == []


async def test_enhance_invalid_verbosity(client: AsyncClient) -> None:
    resp = await client.post(URL, json={"code": "x", "verbosity": "chatty"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Invalid request"
    assert body["details"]


async def test_enhance_unconfigured(
    client: AsyncClient,
    test_settings: Settings,
    fake_store: FakeContentStore,
) -> None:
    install_app_state(test_settings, make_service(None), fake_store)
    resp = await client.post(URL, json={"code": "x=1"})
    assert resp.status_code == 503
    assert resp.json()["kind"] == "service_unavailable"


async def test_enhance_invocation_failure(
    client: AsyncClient,
    test_settings: Settings,
    fake_store: FakeContentStore,
) -> None:
    invoker = FakeInvoker(error=RuntimeError("quota exceeded"))
    install_app_state(test_settings, make_service(invoker), fake_store)
    resp = await client.post(URL, json={"code": "x=1"})
    assert resp.status_code == 502
    body = resp.json()
    assert body["kind"] == "invocation_failed"
    assert body["details"] == "quota exceeded"


async def test_enhance_invalid_payload_includes_snippet(
    client: AsyncClient,
    test_settings: Settings,
    fake_store: FakeContentStore,
) -> None:
    invoker = FakeInvoker("Sorry, no JSON today")
    install_app_state(test_settings, make_service(invoker), fake_store)
    resp = await client.post(URL, json={"code": "x=1"})
    assert resp.status_code == 502
    body = resp.json()
    assert body["kind"] == "invalid_payload"
    assert body["snippet"] == "Sorry, no JSON today"


async def test_enhance_extraction_failure(
    client: AsyncClient,
    test_settings: Settings,
    fake_store: FakeContentStore,
) -> None:
    invoker = FakeInvoker({"choices": []})
    install_app_state(test_settings, make_service(invoker), fake_store)
    resp = await client.post(URL, json={"code": "x=1"})
    assert resp.status_code == 502
    body = resp.json()
    assert body["kind"] == "extraction_failed"
    assert body["rawResponseSample"] is None


async def test_enhance_unexpected_error(
    client: AsyncClient,
    test_settings: Settings,
    fake_store: FakeContentStore,
) -> None:
    class _Broken:
        available = True

        async def annotate(self, request: object) -> object:
            raise KeyError("boom")

    install_app_state(test_settings, _Broken(), fake_store)  # type: ignore[arg-type]
    resp = await client.post(URL, json={"code": "x=1"})
    assert resp.status_code == 500
    assert resp.json()["error"] == "server error"


async def test_enhance_unencodable_output_is_502(
    client: AsyncClient,
    test_settings: Settings,
    fake_store: FakeContentStore,
) -> None:
    invoker = FakeInvoker('{"commented_code": "x = \\ud800"}')
    install_app_state(test_settings, make_service(invoker), fake_store)
    resp = await client.post(URL, json={"code": "x=1"})
    assert resp.status_code == 502
    body = resp.json()
    assert body["kind"] == "invalid_payload"
    assert body["snippet"] == '{"commented_code": "x = \\ud800"}'
