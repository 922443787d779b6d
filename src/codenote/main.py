"""FastAPI application with lifespan startup."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

# Phase 1: Singleton logging, MUST run before any codenote imports
# (they transitively import litellm which reads LITELLM_LOG at import time)
from codenote.logging_config import setup_logging

setup_logging()

import httpx  # noqa: E402
from fastapi import FastAPI, Request  # noqa: E402
from fastapi.exceptions import RequestValidationError  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from starlette.responses import JSONResponse  # noqa: E402

from codenote import __version__  # noqa: E402
from codenote.annotation.service import AnnotationService  # noqa: E402
from codenote.api.app_state import AppState  # noqa: E402
from codenote.api.middleware.auth import ApiKeyMiddleware  # noqa: E402
from codenote.api.middleware.body_limit import (  # noqa: E402
    BodySizeLimitMiddleware,
)
from codenote.api.routes import enhance, health, publish  # noqa: E402
from codenote.config import Settings  # noqa: E402
from codenote.generation.capability import build_capability  # noqa: E402
from codenote.logging_config import (  # noqa: E402
    apply_log_level,
    cleanup_third_party_handlers,
)
from codenote.publishing.github import GitHubContentStore  # noqa: E402
from codenote.publishing.publisher import RemoteFilePublisher  # noqa: E402

# Phase 2: Now that all imports (including litellm) are done,
# clear litellm's duplicate handlers.
cleanup_third_party_handlers()

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = _settings
    apply_log_level(settings.log_level)

    # 1. Generation capability, built once and injected into the service
    capability = build_capability(settings)
    annotation_service = AnnotationService(
        capability, max_code_chars=settings.max_code_chars
    )

    # 2. Content store over a pooled HTTP client
    http_client = httpx.AsyncClient(timeout=settings.github_timeout_seconds)
    store = GitHubContentStore(http_client, settings.github_api_url)
    publisher = RemoteFilePublisher(store)

    # 3. Store in app.state
    app.state.settings = settings
    app.state.annotation_service = annotation_service
    app.state.store = store
    app.state.publisher = publisher
    app.state.typed = AppState(
        settings=settings,
        annotation_service=annotation_service,
        store=store,
        publisher=publisher,
        http_client=http_client,
    )

    if not settings.api_key:
        _logger.warning("event=no_api_key action=all_endpoints_public")

    yield

    await http_client.aclose()


app = FastAPI(
    title="codenote",
    description="Annotate source code and publish the reviewed result",
    version=__version__,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

# Middleware stack (Starlette LIFO: last added = outermost = runs first)
#
# Inbound request order:
#   CORSMiddleware -> BodySizeLimitMiddleware -> ApiKeyMiddleware -> Router
_settings = Settings()

app.add_middleware(ApiKeyMiddleware)
app.add_middleware(BodySizeLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origin_list,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-API-Key"],
    allow_credentials=False,
)


@app.exception_handler(RequestValidationError)
async def _validation_error(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request",
            "details": [
                {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
                for e in exc.errors()
            ],
        },
    )


# Routes
app.include_router(health.router)
app.include_router(enhance.router)
app.include_router(publish.router)
