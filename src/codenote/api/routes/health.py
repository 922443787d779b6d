"""Health check endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from codenote import __version__
from codenote.annotation.service import AnnotationService
from codenote.api.dependencies import get_annotation_service

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health(
    service: AnnotationService = Depends(get_annotation_service),
) -> dict[str, str]:
    """Liveness plus whether the generation provider is configured."""
    return {
        "status": "healthy",
        "version": __version__,
        "generation": "configured" if service.available else "unconfigured",
        "timestamp": datetime.now(UTC).isoformat(),
    }
