"""Typed application state, replacing untyped getattr() access."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from codenote.annotation.service import AnnotationService
from codenote.config import Settings
from codenote.publishing.github import GitHubContentStore
from codenote.publishing.publisher import RemoteFilePublisher


@dataclass
class AppState:
    """Typed container for app.state attributes."""

    settings: Settings
    annotation_service: AnnotationService
    store: GitHubContentStore
    publisher: RemoteFilePublisher
    http_client: httpx.AsyncClient
