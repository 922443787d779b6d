"""Pydantic models for the annotation data flow."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from codenote.constants import ANNOTATED_CODE_KEYS, DEFAULT_LANGUAGE, Verbosity

# Keys the service attaches itself; generated values are discarded
_SERVICE_OWNED_KEYS = frozenset({
    "original_code",
    "verbosity",
    "verbosity_level",
})


class AnnotationRequest(BaseModel):
    """Input to AnnotationService.annotate()."""

    source_code: str
    language_hint: str = DEFAULT_LANGUAGE
    verbosity_level: Verbosity = Verbosity.CONCISE

    @field_validator("language_hint", mode="before")
    @classmethod
    def _default_language(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_LANGUAGE
        return v.strip() if isinstance(v, str) else v

    @field_validator("verbosity_level", mode="before")
    @classmethod
    def _default_verbosity(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return Verbosity.CONCISE
        return v.strip().lower() if isinstance(v, str) else v

    def truncated(self, cap: int) -> AnnotationRequest:
        """Return a copy whose source_code is at most ``cap`` chars."""
        if len(self.source_code) <= cap:
            return self
        return self.model_copy(
            update={"source_code": self.source_code[:cap]}
        )


class ComplexityEstimate(BaseModel):
    """Big-O estimate with the model's self-reported confidence."""

    estimate: str = ""
    confidence: float | None = None

    @field_validator("estimate", mode="before")
    @classmethod
    def _coerce_estimate(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, v: Any) -> float | None:
        try:
            value = float(v)
        except (TypeError, ValueError):
            return None
        if math.isnan(value):
            return None
        return min(max(value, 0.0), 1.0)


class AnnotationRecord(BaseModel):
    """Validated annotation returned to callers.

    Only ``annotated_code`` is guaranteed. Other fields are
    best-effort: malformed values degrade to their defaults and
    unknown fields are kept as extras. Serializing with
    ``by_alias=True`` produces the wire names the browser
    extension reads (``commented_code``, ``verbosity``).
    """

    model_config = ConfigDict(extra="allow")

    annotated_code: str = Field(
        min_length=1, serialization_alias="commented_code"
    )
    pattern: str = ""
    time_complexity: ComplexityEstimate | None = None
    space_complexity: ComplexityEstimate | None = None
    explanation: list[str] = Field(default_factory=lambda: list[str]())
    notes: str = ""
    original_code: str = ""
    verbosity_level: Verbosity | None = Field(
        default=None, serialization_alias="verbosity"
    )

    @field_validator("pattern", "notes", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("time_complexity", "space_complexity", mode="before")
    @classmethod
    def _coerce_complexity(cls, v: Any) -> Any:
        if isinstance(v, str):
            return {"estimate": v}
        if isinstance(v, dict):
            return v
        return None

    @field_validator("explanation", mode="before")
    @classmethod
    def _coerce_explanation(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            return [v] if v.strip() else []
        if isinstance(v, (list, tuple)):
            return [str(item) for item in v if item is not None]
        return []

    @classmethod
    def from_payload(
        cls, data: dict[str, Any], annotated_code: str
    ) -> AnnotationRecord:
        """Build a record from a parsed generation payload."""
        fields = {
            k: v
            for k, v in data.items()
            if k not in ANNOTATED_CODE_KEYS
            and k not in _SERVICE_OWNED_KEYS
        }
        return cls.model_validate(
            {**fields, "annotated_code": annotated_code}
        )
