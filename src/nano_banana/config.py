"""Runtime configuration for nano-banana.

Settings are plain environment variables. They are read through
``pydantic-settings`` models that are instantiated per operation, so changes to
the environment take effect on the next call:

- ``GEMINI_API_KEY`` / ``GOOGLE_API_KEY``: backend credential (first wins)
- ``GEMINI_IMAGE_MODEL``: model override
- ``IMAGE_OUTPUT_DIR``: preferred default output directory
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ============================================================================
# Constants
# ============================================================================

API_KEY_ENV: Final[str] = "GEMINI_API_KEY"
FALLBACK_API_KEY_ENV: Final[str] = "GOOGLE_API_KEY"
MODEL_ENV: Final[str] = "GEMINI_IMAGE_MODEL"
OUTPUT_DIR_ENV: Final[str] = "IMAGE_OUTPUT_DIR"

DEFAULT_IMAGE_MODEL: Final[str] = "gemini-3-pro-image-preview"
REQUEST_TIMEOUT_MS: Final[int] = 60_000
MAX_RETRIES: Final[int] = 2
RETRY_BACKOFF_MS: Final[int] = 500
RETRYABLE_STATUS_CODES: Final[frozenset[int]] = frozenset({408, 429, 500, 502, 503, 504})

MAX_PROMPT_LENGTH: Final[int] = 4000
OUTPUT_MIME_TYPE: Final[str] = "image/jpeg"
JPEG_QUALITY: Final[int] = 85
JPEG_EXTENSIONS: Final[frozenset[str]] = frozenset({".jpg", ".jpeg"})

APP_DIR_NAME: Final[str] = "nano-banana"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class GenerationSettings(BaseSettings):
    """Credential and model used for a single generation call."""

    model_config = SettingsConfigDict(extra="ignore")

    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(API_KEY_ENV, FALLBACK_API_KEY_ENV),
    )
    model: str = Field(default=DEFAULT_IMAGE_MODEL, validation_alias=AliasChoices(MODEL_ENV))

    @field_validator("api_key", mode="before")
    @classmethod
    def _validate_api_key(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("model", mode="before")
    @classmethod
    def _validate_model(cls, value: Any) -> Any:
        return _blank_to_none(value) or DEFAULT_IMAGE_MODEL


class OutputSettings(BaseSettings):
    """Output directory override used for a single persistence call."""

    model_config = SettingsConfigDict(extra="ignore")

    output_dir: Path | None = Field(default=None, validation_alias=AliasChoices(OUTPUT_DIR_ENV))

    @field_validator("output_dir", mode="before")
    @classmethod
    def _validate_output_dir(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        if value is None:
            return None
        return Path(value).expanduser().absolute()
