"""Pull a single generated-text string out of an unknown response shape.

Generation backends (and SDK versions of the same backend) disagree on
where the text lives. The extractor tries an ordered list of known
shapes, then falls back to a depth-first scan for any non-empty
string. It never raises: every field access goes through ``_field``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

logger = logging.getLogger(__name__)

_MISSING = object()
_MAX_SCAN_DEPTH = 32

Matcher = Callable[[Any], "str | None"]


def _field(obj: Any, key: str) -> Any:
    """Read ``key`` from a mapping or attribute; None when absent."""
    if obj is None or isinstance(obj, (str, bytes)):
        return None
    try:
        if isinstance(obj, Mapping):
            return obj.get(key)
        value = getattr(obj, key, _MISSING)
    # SDK properties may raise on blocked or partial responses
    except Exception:  # noqa: BLE001
        return None
    return None if value is _MISSING else value


def _text(value: Any) -> str | None:
    """Return the trimmed string if ``value`` is a non-empty string."""
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def _items(value: Any) -> Sequence[Any]:
    """Return ``value`` as a sequence if it is a non-string sequence."""
    if isinstance(value, (list, tuple)):
        return value
    return ()


# ── Known shapes, in priority order ───────────────────────────────


def _direct_string(response: Any) -> str | None:
    return _text(response)


def _text_field(response: Any) -> str | None:
    return _text(_field(response, "text"))


def _output_content(response: Any) -> str | None:
    """``output[].content[]`` typed items (responses-style APIs)."""
    for out in _items(_field(response, "output")):
        for item in _items(_field(out, "content")):
            if _field(item, "type") == "output_text":
                found = _text(_field(item, "text"))
                if found:
                    return found
            found = _text(_field(item, "text"))
            if found:
                return found
            nested = _items(item)
            if nested:
                found = _text(nested[0])
                if found:
                    return found
        found = _text(_field(out, "content")) or _text(_field(out, "text"))
        if found:
            return found
    return None


def _candidate_strings(response: Any) -> str | None:
    """``candidates[]`` carrying content/output/message as plain text."""
    for cand in _items(_field(response, "candidates")):
        for key in ("content", "output", "message"):
            found = _text(_field(cand, key))
            if found:
                return found
    return None


def _generated_text_array(response: Any) -> str | None:
    """``[{"generated_text": ...}]`` (text-generation inference style)."""
    for entry in _items(response):
        value = _field(entry, "generated_text")
        if value is not None and not isinstance(value, (Mapping, list)):
            found = _text(str(value))
            if found:
                return found
    return None


def _candidate_message_parts(response: Any) -> str | None:
    """``candidates[0].message.content[].text``."""
    candidates = _items(_field(response, "candidates"))
    if not candidates:
        return None
    message = _field(candidates[0], "message")
    for item in _items(_field(message, "content")):
        found = _text(_field(item, "text"))
        if found:
            return found
    return None


def _chat_choices(response: Any) -> str | None:
    """``choices[].message.content`` (OpenAI-compatible chat shape)."""
    for choice in _items(_field(response, "choices")):
        message = _field(choice, "message")
        found = _text(_field(message, "content")) or _text(
            _field(choice, "text")
        )
        if found:
            return found
    return None


SHAPE_MATCHERS: tuple[tuple[str, Matcher], ...] = (
    ("direct_string", _direct_string),
    ("text_field", _text_field),
    ("output_content", _output_content),
    ("candidate_strings", _candidate_strings),
    ("generated_text_array", _generated_text_array),
    ("candidate_message_parts", _candidate_message_parts),
    ("chat_choices", _chat_choices),
)


# ── Fallback scan ─────────────────────────────────────────────────


def _as_plain(value: Any) -> Any:
    """Convert SDK model objects to plain containers where possible."""
    if isinstance(value, (str, bytes, Mapping, list, tuple)):
        return value
    dump = getattr(value, "model_dump", None)
    if callable(dump):
        try:
            return dump()
        except Exception:  # noqa: BLE001
            return None
    attrs = getattr(value, "__dict__", None)
    if isinstance(attrs, dict):
        return {k: v for k, v in attrs.items() if not k.startswith("_")}
    return None


def _scan(value: Any, depth: int, seen: set[int]) -> str | None:
    if depth > _MAX_SCAN_DEPTH or id(value) in seen:
        return None
    plain = _as_plain(value)
    if isinstance(plain, Mapping):
        children: Sequence[Any] = list(plain.values())
    elif isinstance(plain, (list, tuple)):
        children = plain
    else:
        return None
    seen.add(id(value))
    for child in children:
        found = _text(child)
        if found:
            return found
        if child is not None and not isinstance(child, (str, bytes)):
            found = _scan(child, depth + 1, seen)
            if found:
                return found
    return None


def search_for_string(response: Any) -> str | None:
    """Depth-first search for the first non-empty string value."""
    try:
        return _scan(response, 0, set())
    except Exception:  # noqa: BLE001
        return None


def extract_generated_text(response: Any) -> str | None:
    """Return the best-effort generated text, or None if there is none."""
    if response is None:
        return None
    for name, matcher in SHAPE_MATCHERS:
        try:
            found = matcher(response)
        except Exception:  # noqa: BLE001
            logger.debug("event=shape_matcher_error shape=%s", name)
            continue
        if found:
            logger.debug("event=text_extracted shape=%s", name)
            return found

    found = search_for_string(response)
    if found:
        logger.debug("event=text_extracted shape=fallback_scan")
    return found
