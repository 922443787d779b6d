"""Code annotation route used by the browser extension."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from codenote.annotation.schemas import AnnotationRequest
from codenote.annotation.service import AnnotationService
from codenote.api.dependencies import get_annotation_service
from codenote.api.schemas import EnhanceCodeRequest, EnhanceCodeResponse
from codenote.constants import ERROR_TRUNCATION_CHARS, AnnotationErrorKind
from codenote.errors import AnnotationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["annotation"])

ERROR_STATUS: dict[AnnotationErrorKind, int] = {
    AnnotationErrorKind.MISSING_INPUT: 400,
    AnnotationErrorKind.SERVICE_UNAVAILABLE: 503,
    AnnotationErrorKind.INVOCATION_FAILED: 502,
    AnnotationErrorKind.EXTRACTION_FAILED: 502,
    AnnotationErrorKind.INVALID_PAYLOAD: 502,
}


@router.post("/enhance-code", response_model=EnhanceCodeResponse)
async def enhance_code(
    body: EnhanceCodeRequest,
    service: AnnotationService = Depends(get_annotation_service),
) -> JSONResponse:
    """Annotate ``code`` and return the record for review."""
    request = AnnotationRequest(
        source_code=body.code,
        language_hint=body.language,
        verbosity_level=body.verbosity,
    )
    try:
        record = await service.annotate(request)
    except AnnotationError as exc:
        return JSONResponse(
            status_code=ERROR_STATUS[exc.kind],
            content={"error": exc.message, "kind": exc.kind, **exc.detail},
        )
    except Exception as exc:
        logger.exception("event=enhance_unexpected_error")
        return JSONResponse(
            status_code=500,
            content={
                "error": "server error",
                "details": str(exc)[:ERROR_TRUNCATION_CHARS],
            },
        )

    return JSONResponse(
        content={"ok": True, "data": record.model_dump(mode="json", by_alias=True)}
    )
