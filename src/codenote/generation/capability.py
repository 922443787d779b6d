"""The generation capability handle, built once at startup."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from codenote.config import Settings
from codenote.constants import InvokeStyle
from codenote.generation.invokers import INVOKERS, Invoker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationCapability:
    """A configured model plus its primary and alternate conventions."""

    model: str
    primary: Invoker
    alternate: Invoker | None = None


def build_capability(settings: Settings) -> GenerationCapability | None:
    """Build the capability from settings, or None if not configured.

    The configured style is primary; the other style is the single
    alternate tried when the primary call itself fails.
    """
    if not settings.generation_configured:
        logger.warning(
            "event=generation_unconfigured model=%s key_set=%s",
            settings.generation_model or "-",
            bool(settings.gemini_api_key),
        )
        return None

    primary_style = settings.generation_invoke_style
    alternate_style = (
        InvokeStyle.PROMPT
        if primary_style is InvokeStyle.CHAT
        else InvokeStyle.CHAT
    )
    key = settings.gemini_api_key
    timeout = settings.generation_timeout_seconds
    return GenerationCapability(
        model=settings.generation_model,
        primary=INVOKERS[primary_style](key, timeout),
        alternate=INVOKERS[alternate_style](key, timeout),
    )
