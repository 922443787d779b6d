"""Shared test fixtures: fake invoker, fake content store, ASGI client."""

import os

# Force a demo provider key and open API for all tests; no real calls.
# Set unconditionally at import time so real keys in the shell never
# reach Settings() during the test run.
os.environ["GEMINI_API_KEY"] = "for-demo-purposes-only"
os.environ["API_KEY"] = ""

import json
from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from codenote.annotation.service import AnnotationService
from codenote.config import Settings
from codenote.generation.capability import GenerationCapability
from codenote.generation.fakes import FakeInvoker
from codenote.main import app
from codenote.publishing.fakes import FakeContentStore
from codenote.publishing.publisher import RemoteFilePublisher

TEST_MODEL = "test/model"


def fenced(payload: dict[str, object]) -> str:
    """Wrap a payload the way chat models usually return it."""
    return f"```json\n{json.dumps(payload)}\n```"


def make_service(
    primary: FakeInvoker | None,
    alternate: FakeInvoker | None = None,
    *,
    max_code_chars: int = 20_000,
) -> AnnotationService:
    capability = (
        GenerationCapability(
            model=TEST_MODEL, primary=primary, alternate=alternate
        )
        if primary is not None
        else None
    )
    return AnnotationService(capability, max_code_chars=max_code_chars)


@pytest.fixture
def fake_invoker() -> FakeInvoker:
    return FakeInvoker(fenced({"commented_code": "x=1 # set x"}))


@pytest.fixture
def fake_store() -> FakeContentStore:
    return FakeContentStore()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(gemini_api_key="for-demo-purposes-only", api_key="")


def install_app_state(
    settings: Settings,
    service: AnnotationService,
    store: FakeContentStore,
) -> None:
    """Populate app.state the way the lifespan does, with fakes."""
    app.state.settings = settings
    app.state.annotation_service = service
    app.state.store = store
    app.state.publisher = RemoteFilePublisher(store)


@pytest.fixture
async def client(
    test_settings: Settings,
    fake_invoker: FakeInvoker,
    fake_store: FakeContentStore,
) -> AsyncIterator[AsyncClient]:
    """ASGI client over the real app with fake collaborators."""
    install_app_state(test_settings, make_service(fake_invoker), fake_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test"
    ) as c:
        yield c
