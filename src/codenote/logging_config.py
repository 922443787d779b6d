"""Process-wide logging setup in two phases.

litellm reads ``LITELLM_LOG`` and attaches its own stream handlers
while it is being imported, so entry points (``main``, ``cli``) call:

1. ``setup_logging()`` first, before anything that imports litellm;
2. ``cleanup_third_party_handlers()`` once their imports are done.

Each phase runs at most once per process.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

_LITELLM_LOGGERS = ("LiteLLM", "LiteLLM Router", "LiteLLM Proxy")

# Pinned to WARNING; request-level chatter from the HTTP stack and provider SDK
_SUPPRESSED_LOGGERS = (*_LITELLM_LOGGERS, "httpx", "httpcore")

_phase1_done = False
_phase2_done = False


def _resolve_level(level: str | None) -> int:
    """Explicit level, else LOG_LEVEL, else INFO; unknown names mean INFO."""
    name = (level or os.environ.get("LOG_LEVEL") or "INFO").strip().upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger before litellm is imported."""
    global _phase1_done  # noqa: PLW0603
    if _phase1_done:
        return
    _phase1_done = True

    os.environ.setdefault("LITELLM_LOG", "WARNING")
    logging.basicConfig(
        level=_resolve_level(level),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
    for name in _SUPPRESSED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def cleanup_third_party_handlers() -> None:
    """Route litellm records through the root handler only.

    Without this every litellm message is printed twice: once by the
    handler it installed at import and once after propagating to root.
    """
    global _phase2_done  # noqa: PLW0603
    if _phase2_done:
        return
    _phase2_done = True

    for name in _LITELLM_LOGGERS:
        litellm_logger = logging.getLogger(name)
        litellm_logger.handlers.clear()
        litellm_logger.propagate = True


def apply_log_level(level: str) -> None:
    """Apply the configured level once Settings (and .env) are loaded.

    Phase 1 runs before settings exist, so it only sees the process
    environment; a LOG_LEVEL that lives in ``.env`` lands here.
    """
    logging.getLogger().setLevel(_resolve_level(level))
