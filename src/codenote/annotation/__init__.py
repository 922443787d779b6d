"""Response normalization pipeline: extract, sanitize, validate."""

from codenote.annotation.extractor import extract_generated_text
from codenote.annotation.sanitizer import sanitize_payload
from codenote.annotation.schemas import (
    AnnotationRecord,
    AnnotationRequest,
    ComplexityEstimate,
)
from codenote.annotation.service import AnnotationService
from codenote.annotation.validator import validate_payload

__all__ = [
    "AnnotationRecord",
    "AnnotationRequest",
    "AnnotationService",
    "ComplexityEstimate",
    "extract_generated_text",
    "sanitize_payload",
    "validate_payload",
]
