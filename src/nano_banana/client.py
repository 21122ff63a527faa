"""Gemini image generation client with retries and error translation.

Every call reads the credential and model from the environment, reuses a
cached ``genai.Client`` while the credential is unchanged, and retries
transient backend failures with exponential backoff. Failures are translated
into typed :mod:`nano_banana.exceptions` once, after the last attempt.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from PIL import UnidentifiedImageError
from tenacity import Retrying, before_sleep_log, retry_if_exception, stop_after_attempt, wait_exponential

from nano_banana.config import (
    API_KEY_ENV,
    FALLBACK_API_KEY_ENV,
    MAX_RETRIES,
    OUTPUT_MIME_TYPE,
    REQUEST_TIMEOUT_MS,
    RETRY_BACKOFF_MS,
    RETRYABLE_STATUS_CODES,
    GenerationSettings,
)
from nano_banana.exceptions import (
    AuthenticationFailedError,
    BackendUnavailableError,
    EmptyResponseError,
    GenerationFailedError,
    MissingCredentialError,
    NanoBananaError,
    RateLimitedError,
)
from nano_banana.imaging import to_jpeg

logger = logging.getLogger(__name__)

RESPONSE_MODALITIES = ("TEXT", "IMAGE")
_TRANSIENT_MARKERS = ("timeout", "timed out", "etimedout", "econnreset", "connection reset", "temporar")


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """JPEG image produced for a prompt."""

    image_bytes: bytes
    mime_type: str
    model: str
    text: str | None = None


def _status_code(error: BaseException) -> int | None:
    if isinstance(error, genai_errors.APIError):
        return error.code
    for attr in ("status", "code", "status_code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def _error_detail(error: BaseException) -> str:
    if isinstance(error, genai_errors.APIError):
        return error.message or str(error)
    return getattr(error, "message", None) or str(error)


def is_retryable_error(error: BaseException) -> bool:
    """Return True when ``error`` is likely to succeed on another attempt."""
    if isinstance(error, NanoBananaError):
        return False
    if isinstance(error, httpx.TimeoutException):
        return True

    status = _status_code(error)
    if status is not None and status in RETRYABLE_STATUS_CODES:
        return True
    if isinstance(error, genai_errors.APIError):
        return False

    message = _error_detail(error).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


def to_user_facing_error(error: BaseException) -> NanoBananaError:
    """Translate a terminal backend failure into an actionable error."""
    if isinstance(error, NanoBananaError):
        return error

    status = _status_code(error)
    if status is None:
        return GenerationFailedError(f"Failed to generate image: {_error_detail(error)}")

    if status in (401, 403):
        return AuthenticationFailedError(
            f"Gemini API authentication failed. Check {API_KEY_ENV}/{FALLBACK_API_KEY_ENV} and permissions."
        )
    if status == 429:
        return RateLimitedError("Gemini API rate limit reached. Please retry in a moment.")
    if status >= 500:
        return BackendUnavailableError("Gemini API is temporarily unavailable. Please retry shortly.")
    return GenerationFailedError(
        f"Gemini API request failed (status {status}): {_error_detail(error)}", status=status
    )


def extract_image_parts(response: Any) -> tuple[bytes, str | None]:
    """Return the first inline image and the joined text fragments of ``response``."""
    candidates = getattr(response, "candidates", None) or []
    content = getattr(candidates[0], "content", None) if candidates else None
    parts = getattr(content, "parts", None) or []
    if not parts:
        raise EmptyResponseError("No content parts returned from Gemini API.")

    image_bytes: bytes | None = None
    texts: list[str] = []
    for part in parts:
        inline = getattr(part, "inline_data", None)
        data = getattr(inline, "data", None) if inline is not None else None
        if data:
            if image_bytes is None:
                image_bytes = bytes(data)
            continue
        text = getattr(part, "text", None)
        if text:
            texts.append(text)

    if image_bytes is None:
        raise EmptyResponseError("No image data found in the response.")
    return image_bytes, "\n".join(texts) if texts else None


class GenerationClient:
    """Generate JPEG images from prompts with the Gemini API."""

    def __init__(
        self,
        client_factory: Callable[..., Any] = genai.Client,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client_factory = client_factory
        self._sleep = sleep
        self._cached: tuple[str, Any] | None = None

    def _get_client(self, api_key: str) -> Any:
        cached = self._cached
        if cached is None or cached[0] != api_key:
            cached = (api_key, self._client_factory(api_key=api_key))
            self._cached = cached
        return cached[1]

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(MAX_RETRIES + 1),
            wait=wait_exponential(multiplier=RETRY_BACKOFF_MS / 1000, exp_base=2),
            retry=retry_if_exception(is_retryable_error),
            sleep=self._sleep,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    def _request(self, client: Any, model: str, prompt: str) -> Any:
        return client.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_modalities=list(RESPONSE_MODALITIES),
                http_options=types.HttpOptions(timeout=REQUEST_TIMEOUT_MS),
            ),
        )

    def generate(self, prompt: str) -> GenerationResult:
        """Generate an image for ``prompt``.

        Raises:
            MissingCredentialError: No credential is configured.
            AuthenticationFailedError: The backend rejected the credential.
            RateLimitedError: The backend kept throttling.
            BackendUnavailableError: The backend kept failing server-side.
            EmptyResponseError: The backend returned no image.
            GenerationFailedError: Any other failure.

        """
        settings = GenerationSettings()
        if not settings.api_key:
            raise MissingCredentialError(API_KEY_ENV, FALLBACK_API_KEY_ENV)

        client = self._get_client(settings.api_key)
        model = settings.model
        logger.info("Generating image with %s", model)

        try:
            for attempt in self._retrying():
                with attempt:
                    response = self._request(client, model, prompt)
            raw_bytes, text = extract_image_parts(response)
            jpeg_bytes = to_jpeg(raw_bytes)
        except UnidentifiedImageError as exc:
            raise GenerationFailedError(f"Failed to generate image: {exc}") from exc
        except Exception as exc:
            translated = to_user_facing_error(exc)
            logger.error("Image generation failed: %s", translated)
            if translated is exc:
                raise
            raise translated from exc

        return GenerationResult(image_bytes=jpeg_bytes, mime_type=OUTPUT_MIME_TYPE, model=model, text=text)
