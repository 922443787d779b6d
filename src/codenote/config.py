"""Environment-based configuration."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

from codenote.constants import (
    DEFAULT_MAX_CODE_CHARS,
    DEFAULT_MAX_REQUEST_BYTES,
    EXTENSION_MAP,
    InvokeStyle,
)

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # Generation provider
    gemini_api_key: str = ""
    generation_model: str = "gemini/gemini-2.0-flash"
    generation_invoke_style: InvokeStyle = InvokeStyle.CHAT
    generation_timeout_seconds: int = 60
    max_code_chars: int = DEFAULT_MAX_CODE_CHARS

    # Content store
    github_api_url: str = "https://api.github.com"
    github_timeout_seconds: int = 30
    default_branch: str = "main"

    # Logging
    log_level: str = "INFO"

    # API
    api_key: str = ""
    cors_origins: str = "*"
    max_request_bytes: int = DEFAULT_MAX_REQUEST_BYTES

    @field_validator("generation_invoke_style", mode="before")
    @classmethod
    def _normalize_style(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("max_code_chars")
    @classmethod
    def _validate_cap(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_code_chars must be positive")
        return v

    @field_validator("github_api_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def generation_configured(self) -> bool:
        """True when a model and provider key are both present."""
        return bool(self.generation_model and self.gemini_api_key)

    @property
    def cors_origin_list(self) -> list[str]:
        return [
            o.strip() for o in self.cors_origins.split(",") if o.strip()
        ]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
    }


def detect_language(filename: str | Path | None) -> str | None:
    """Guess a language hint from a filename extension.

    Unknown extensions fall back to javascript, matching the
    browser extension's editor default. No filename → None.
    """
    if not filename:
        return None
    suffix = Path(filename).suffix.lower()
    return EXTENSION_MAP.get(suffix, "javascript")
