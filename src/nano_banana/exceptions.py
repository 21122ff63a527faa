"""Centralized exceptions for nano-banana."""

from __future__ import annotations

from collections.abc import Sequence


class NanoBananaError(Exception):
    """Base exception for all nano-banana errors."""


class InvalidInputError(NanoBananaError):
    """Raised when tool arguments fail schema validation."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = list(errors)
        super().__init__("Invalid arguments: " + "; ".join(self.errors))


# ============================================================================
# Generation
# ============================================================================


class GenerationError(NanoBananaError):
    """Base exception for failures while talking to the image backend."""


class MissingCredentialError(GenerationError):
    """Raised when neither credential environment variable is set."""

    def __init__(self, primary_env: str, fallback_env: str) -> None:
        self.primary_env = primary_env
        self.fallback_env = fallback_env
        super().__init__(
            f"{primary_env} (or {fallback_env}) environment variable is required for image generation."
        )


class AuthenticationFailedError(GenerationError):
    """Raised when the backend rejects the configured credential."""


class RateLimitedError(GenerationError):
    """Raised when the backend keeps throttling after all retries."""


class BackendUnavailableError(GenerationError):
    """Raised when the backend keeps failing server-side after all retries."""


class EmptyResponseError(GenerationError):
    """Raised when the backend answers without usable image data."""


class GenerationFailedError(GenerationError):
    """Raised for any other generation failure."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)


# ============================================================================
# Persistence
# ============================================================================


class PersistenceError(NanoBananaError):
    """Base exception for failures while writing images to disk."""


class InvalidExtensionError(PersistenceError):
    """Raised when an explicit file path does not end in a JPEG extension."""

    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__(
            "save_path must use a .jpg or .jpeg extension because this tool outputs JPEG data, "
            f"got: {extension}"
        )


class InvalidPathError(PersistenceError):
    """Raised when a target path cannot be used at all."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path '{path}': {reason}")


class EmptyPayloadError(PersistenceError):
    """Raised when there are no image bytes to write."""

    def __init__(self) -> None:
        super().__init__("Image data is empty, nothing to save.")


class PersistenceExhaustedError(PersistenceError):
    """Raised when every candidate location failed."""

    def __init__(self, last_error: str, first_failure: str | None = None) -> None:
        self.last_error = last_error
        self.first_failure = first_failure
        message = f"Failed to save image to any location. Last error: {last_error}"
        if first_failure:
            message += f" (first failure: {first_failure})"
        super().__init__(message)


# ============================================================================
# Server
# ============================================================================


class UnknownToolError(NanoBananaError):
    """Raised when the MCP client calls a tool this server does not expose."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ToolExecutionError(NanoBananaError):
    """Raised to hand an error-flagged tool result to the MCP server."""
