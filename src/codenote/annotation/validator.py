"""Parse the isolated payload and check the required field."""

from __future__ import annotations

import json
import logging
from typing import Any, cast

from pydantic import ValidationError

from codenote.annotation.schemas import AnnotationRecord
from codenote.constants import (
    ANNOTATED_CODE_KEYS,
    PAYLOAD_SNIPPET_CHARS,
    ParseErrorKind,
)
from codenote.errors import PayloadParseError

logger = logging.getLogger(__name__)


def _annotated_code(data: dict[str, Any]) -> str | None:
    for key in ANNOTATED_CODE_KEYS:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def validate_payload(candidate: str) -> AnnotationRecord:
    """Strictly parse ``candidate`` into an AnnotationRecord.

    Raises PayloadParseError(MALFORMED_PAYLOAD) with the first
    2000 characters when the text is not JSON, and
    PayloadParseError(MISSING_REQUIRED_FIELD) with the parsed value
    when ``commented_code`` is absent or empty. JSON that parses but
    cannot form a record (lone surrogates, wrongly typed fields) is
    reported as MALFORMED_PAYLOAD as well.
    """
    try:
        parsed: Any = json.loads(candidate)
    # Pathologically nested input exhausts the decoder stack
    except (ValueError, RecursionError):
        snippet = candidate[:PAYLOAD_SNIPPET_CHARS]
        logger.error(
            "event=payload_parse_failed length=%d", len(candidate)
        )
        logger.debug("payload preview: %s", snippet)
        raise PayloadParseError(
            ParseErrorKind.MALFORMED_PAYLOAD, snippet=snippet
        ) from None

    if not isinstance(parsed, dict):
        logger.error(
            "event=payload_not_object type=%s", type(parsed).__name__
        )
        raise PayloadParseError(
            ParseErrorKind.MISSING_REQUIRED_FIELD, parsed=parsed
        )

    data = cast(dict[str, Any], parsed)
    code = _annotated_code(data)
    if code is None:
        logger.error(
            "event=payload_missing_field keys=%s", sorted(data)
        )
        raise PayloadParseError(
            ParseErrorKind.MISSING_REQUIRED_FIELD, parsed=data
        )

    try:
        # Lone surrogate escapes parse but cannot be re-encoded as UTF-8
        json.dumps(data, ensure_ascii=False).encode("utf-8")
        return AnnotationRecord.from_payload(data, code)
    except (UnicodeEncodeError, RecursionError, ValidationError) as exc:
        logger.error(
            "event=payload_invalid_record error=%s", type(exc).__name__
        )
        raise PayloadParseError(
            ParseErrorKind.MALFORMED_PAYLOAD,
            snippet=candidate[:PAYLOAD_SNIPPET_CHARS],
        ) from None
