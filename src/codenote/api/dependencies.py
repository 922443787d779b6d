"""FastAPI dependency injection for services built in the lifespan."""

from __future__ import annotations

from fastapi import Request

from codenote.annotation.service import AnnotationService
from codenote.config import Settings
from codenote.publishing.github import GitHubContentStore
from codenote.publishing.publisher import RemoteFilePublisher


def get_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[no-any-return]


def get_annotation_service(request: Request) -> AnnotationService:
    """Get the shared AnnotationService from app.state."""
    return request.app.state.annotation_service  # type: ignore[no-any-return]


def get_store(request: Request) -> GitHubContentStore:
    return request.app.state.store  # type: ignore[no-any-return]


def get_publisher(request: Request) -> RemoteFilePublisher:
    """Get the shared RemoteFilePublisher from app.state."""
    return request.app.state.publisher  # type: ignore[no-any-return]
