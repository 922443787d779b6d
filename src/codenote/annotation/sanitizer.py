"""Strip formatting wrappers and isolate the JSON object in generated text."""

from __future__ import annotations

import re

# One opening fence, optionally tagged (```json, ```python ...)
_LEADING_FENCE = re.compile(r"^\s*```[\w+-]*[ \t]*\r?\n?")
_TRAILING_FENCE = re.compile(r"\r?\n?\s*```\s*$")


def strip_fences(text: str) -> str:
    """Remove at most one leading and one trailing fence marker."""
    without_lead = _LEADING_FENCE.sub("", text, count=1)
    return _TRAILING_FENCE.sub("", without_lead, count=1).strip()


def isolate_json_object(text: str) -> str:
    """Return the span from the first ``{`` to the last ``}`` inclusive.

    Discards any preamble or epilogue around the object. Without a
    brace pair the trimmed text is returned unchanged and parsing is
    expected to fail downstream.
    """
    first = text.find("{")
    last = text.rfind("}")
    if first != -1 and last > first:
        return text[first : last + 1]
    return text.strip()


def sanitize_payload(text: str) -> str:
    return isolate_json_object(strip_fences(text))
