"""Shared constants: single source of truth for cross-module values.

StrEnum members are str-compatible, so JSON payloads and log lines
carry the plain values unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class Verbosity(StrEnum):
    """Comment density requested from the generation service."""

    CONCISE = "concise"
    VERBOSE = "verbose"
    TEACHING = "teaching"


class InvokeStyle(StrEnum):
    """Calling conventions for the generation capability."""

    CHAT = "chat"
    PROMPT = "prompt"


class AnnotationErrorKind(StrEnum):
    """Categories of annotate() failure."""

    MISSING_INPUT = "missing_input"
    SERVICE_UNAVAILABLE = "service_unavailable"
    INVOCATION_FAILED = "invocation_failed"
    EXTRACTION_FAILED = "extraction_failed"
    INVALID_PAYLOAD = "invalid_payload"


class ParseErrorKind(StrEnum):
    """Categories of payload validation failure."""

    MALFORMED_PAYLOAD = "malformed_payload"
    MISSING_REQUIRED_FIELD = "missing_required_field"


class PublishOutcome(StrEnum):
    """Terminal states of a single publish attempt."""

    NO_CHANGE = "no_change"
    CREATED = "created"
    UPDATED = "updated"
    CONFLICT = "conflict"
    REMOTE_READ_FAILED = "remote_read_failed"
    REMOTE_WRITE_FAILED = "remote_write_failed"


class ReadStatus(StrEnum):
    """Result of reading one file from the content store."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


class WriteStatus(StrEnum):
    """Result of writing one file to the content store."""

    SUCCESS = "success"
    CONFLICT = "conflict"
    ERROR = "error"


# ── Generation ───────────────────────────────────────────

DEFAULT_LANGUAGE = "code"
DEFAULT_MAX_CODE_CHARS = 20_000
LLM_MAX_OUTPUT_TOKENS = 8192

# ── Diagnostics ──────────────────────────────────────────

PAYLOAD_SNIPPET_CHARS = 2000
RAW_RESPONSE_SAMPLE_CHARS = 1000
ERROR_TRUNCATION_CHARS = 200

# Response fields that carry the annotated code, in lookup order
ANNOTATED_CODE_KEYS = ("commented_code", "annotated_code")

# ── Publishing ───────────────────────────────────────────

COMMIT_SUFFIX = "(via codenote)"
GITHUB_ACCEPT = "application/vnd.github.v3+json"

# ── HTTP ─────────────────────────────────────────────────

DEFAULT_MAX_REQUEST_BYTES = 1_048_576

AUTH_EXEMPT_PATHS = frozenset({
    "/api/health",
    "/api/docs",
    "/api/redoc",
    "/api/openapi.json",
})

# ── User-facing messages ─────────────────────────────────

ANNOTATION_ERROR_MESSAGES: dict[AnnotationErrorKind, str] = {
    AnnotationErrorKind.MISSING_INPUT: "Missing code",
    AnnotationErrorKind.SERVICE_UNAVAILABLE: (
        "Generation service is not configured on the server."
        " Set GEMINI_API_KEY and GENERATION_MODEL."
    ),
    AnnotationErrorKind.INVOCATION_FAILED: (
        "Generation service call failed; try again shortly"
    ),
    AnnotationErrorKind.EXTRACTION_FAILED: (
        "Failed to extract text from the generation service response"
    ),
    AnnotationErrorKind.INVALID_PAYLOAD: (
        "Generated output was not a usable annotation"
    ),
}

PUBLISH_MESSAGES: dict[PublishOutcome, str] = {
    PublishOutcome.NO_CHANGE: "No changes detected; nothing was pushed.",
    PublishOutcome.CREATED: "File created successfully.",
    PublishOutcome.UPDATED: "File updated successfully.",
    PublishOutcome.CONFLICT: (
        "Conflict: the remote file changed since it was read."
        " Pull or merge first, or publish under a new filename."
    ),
    PublishOutcome.REMOTE_READ_FAILED: "Failed to check the remote file.",
    PublishOutcome.REMOTE_WRITE_FAILED: "Failed to write the remote file.",
}

# ── Language detection ───────────────────────────────────

EXTENSION_MAP: dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".java": "java",
    ".c": "cpp",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cxx": "cpp",
    ".go": "go",
    ".rs": "rust",
    ".kt": "kotlin",
}
