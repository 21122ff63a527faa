"""Write generated image bytes to disk with fallback locations.

The caller's ``save_path`` is tried first, then each default output directory
in priority order. The first location that ends up holding a non-empty file
wins. A wrong extension on the caller's path is a caller error and is raised
immediately instead of falling back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from nano_banana.exceptions import (
    EmptyPayloadError,
    InvalidPathError,
    PersistenceExhaustedError,
)
from nano_banana.paths import default_output_dirs, resolve_output_path

logger = logging.getLogger(__name__)

CALLER_LABEL = "save_path"
DEFAULT_DIR_LABEL = "default output directory"


@dataclass(frozen=True, slots=True)
class SaveResult:
    """Where the image landed, and why if it is not where the caller asked."""

    file_path: Path
    warning: str | None = None


@dataclass(frozen=True, slots=True)
class SaveAttempt:
    label: str
    target: str | Path
    from_caller: bool = False


@dataclass(frozen=True, slots=True)
class _AttemptFailure:
    attempt: SaveAttempt
    message: str

    @property
    def summary(self) -> str:
        return f"{self.attempt.label}: {self.message}"


class ImagePersistor:
    """Persist image bytes, falling back to default directories."""

    def __init__(self, default_dirs: Callable[[], Sequence[Path]] = default_output_dirs) -> None:
        self._default_dirs = default_dirs

    def plan_attempts(self, save_path: str | Path | None) -> list[SaveAttempt]:
        attempts: list[SaveAttempt] = []
        if save_path is not None:
            attempts.append(SaveAttempt(CALLER_LABEL, save_path, from_caller=True))
        attempts.extend(SaveAttempt(DEFAULT_DIR_LABEL, directory) for directory in self._default_dirs())
        return attempts

    def save(self, data: bytes, save_path: str | Path | None = None) -> SaveResult:
        """Write ``data`` to the first usable location.

        Raises:
            EmptyPayloadError: ``data`` is empty.
            InvalidExtensionError: ``save_path`` is a non-JPEG file path.
            PersistenceExhaustedError: No location could be written.

        """
        if not data:
            raise EmptyPayloadError

        failures: list[_AttemptFailure] = []
        for attempt in self.plan_attempts(save_path):
            try:
                file_path = self._write(data, attempt)
            except (OSError, InvalidPathError) as exc:
                logger.warning("Could not save image to %s '%s': %s", attempt.label, attempt.target, exc)
                failures.append(_AttemptFailure(attempt, str(exc)))
                continue

            logger.info("Image saved to %s", file_path)
            return SaveResult(file_path=file_path, warning=self._warning(save_path, failures, file_path))

        last_error = failures[-1].message if failures else "no output locations available"
        first_failure = failures[0].summary if len(failures) > 1 else None
        raise PersistenceExhaustedError(last_error, first_failure)

    def _write(self, data: bytes, attempt: SaveAttempt) -> Path:
        if attempt.from_caller:
            file_path = resolve_output_path(attempt.target)
        else:
            file_path = resolve_output_path(None, candidate_dir=attempt.target, directory=True)

        file_path.write_bytes(data)
        if file_path.stat().st_size == 0:
            raise InvalidPathError(str(file_path), "file was written but is empty")
        return file_path

    @staticmethod
    def _warning(
        save_path: str | Path | None, failures: Sequence[_AttemptFailure], file_path: Path
    ) -> str | None:
        if save_path is None or not failures or not failures[0].attempt.from_caller:
            return None
        return (
            f"Requested save_path '{save_path}' could not be used ({failures[0].summary}). "
            f"Saved to '{file_path}' instead."
        )


def save_image(data: bytes, save_path: str | Path | None = None) -> SaveResult:
    """Persist ``data`` using the default output directories."""
    return ImagePersistor().save(data, save_path)
