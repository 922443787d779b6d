"""Annotate source code through the generation capability."""

from __future__ import annotations

import logging
from typing import Any

from codenote.annotation.extractor import extract_generated_text
from codenote.annotation.sanitizer import sanitize_payload
from codenote.annotation.schemas import AnnotationRecord, AnnotationRequest
from codenote.annotation.validator import validate_payload
from codenote.constants import (
    DEFAULT_MAX_CODE_CHARS,
    ERROR_TRUNCATION_CHARS,
    RAW_RESPONSE_SAMPLE_CHARS,
    AnnotationErrorKind,
)
from codenote.errors import AnnotationError, PayloadParseError, classify_error
from codenote.generation.capability import GenerationCapability
from codenote.prompts import build_system_prompt, build_user_prompt

logger = logging.getLogger(__name__)


class AnnotationService:
    """Request → prompt → generation → extract → sanitize → validate.

    The capability is injected at construction; ``None`` means the
    provider is not configured and every call fails fast with
    SERVICE_UNAVAILABLE. The service holds no per-call state, so a
    single instance serves concurrent requests.
    """

    def __init__(
        self,
        capability: GenerationCapability | None,
        *,
        max_code_chars: int = DEFAULT_MAX_CODE_CHARS,
    ) -> None:
        self._capability = capability
        self._max_code_chars = max_code_chars

    @property
    def available(self) -> bool:
        return self._capability is not None

    async def annotate(self, request: AnnotationRequest) -> AnnotationRecord:
        """Return a validated annotation or raise AnnotationError."""
        if not request.source_code.strip():
            raise AnnotationError(AnnotationErrorKind.MISSING_INPUT)

        sent = request.truncated(self._max_code_chars)
        if len(sent.source_code) < len(request.source_code):
            logger.info(
                "event=code_truncated original=%d cap=%d",
                len(request.source_code),
                self._max_code_chars,
            )

        capability = self._capability
        if capability is None:
            logger.error("event=generation_unavailable")
            raise AnnotationError(AnnotationErrorKind.SERVICE_UNAVAILABLE)

        system = build_system_prompt(sent.verbosity_level)
        user = build_user_prompt(
            sent.source_code, sent.language_hint, sent.verbosity_level
        )
        logger.info(
            "event=annotate_start model=%s language=%s verbosity=%s length=%d",
            capability.model,
            sent.language_hint,
            sent.verbosity_level,
            len(sent.source_code),
        )

        raw = await self._invoke(capability, system, user)

        text = extract_generated_text(raw)
        if text is None:
            logger.error(
                "event=extraction_failed response_type=%s",
                type(raw).__name__,
            )
            logger.debug("raw response: %r", raw)
            sample = (
                raw[:RAW_RESPONSE_SAMPLE_CHARS]
                if isinstance(raw, str)
                else None
            )
            raise AnnotationError(
                AnnotationErrorKind.EXTRACTION_FAILED,
                detail={"rawResponseSample": sample},
            )

        try:
            record = validate_payload(sanitize_payload(text))
        except PayloadParseError as exc:
            raise AnnotationError(
                AnnotationErrorKind.INVALID_PAYLOAD,
                str(exc),
                detail=exc.diagnostic(),
            ) from exc

        return record.model_copy(
            update={
                "original_code": sent.source_code,
                "verbosity_level": sent.verbosity_level,
            }
        )

    async def _invoke(
        self,
        capability: GenerationCapability,
        system: str,
        user: str,
    ) -> Any:
        """Primary convention, then the alternate exactly once."""
        try:
            return await capability.primary.invoke(
                capability.model, system, user
            )
        except Exception as exc:
            if capability.alternate is None:
                raise self._invocation_failed(exc) from exc
            logger.warning(
                "event=invoke_failed style=%s error_class=%s"
                " action=try_alternate",
                capability.primary.style,
                classify_error(exc).value,
            )

        try:
            return await capability.alternate.invoke(
                capability.model, system, user
            )
        except Exception as exc:
            raise self._invocation_failed(exc) from exc

    @staticmethod
    def _invocation_failed(exc: Exception) -> AnnotationError:
        logger.error(
            "event=invoke_failed error_class=%s error=%s",
            classify_error(exc).value,
            str(exc)[:ERROR_TRUNCATION_CHARS],
        )
        return AnnotationError(
            AnnotationErrorKind.INVOCATION_FAILED,
            detail={"details": str(exc)[:ERROR_TRUNCATION_CHARS]},
        )
