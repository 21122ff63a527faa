"""Output path resolution for generated images.

A target is either a directory (no extension) that receives a freshly named
file, or a full ``.jpg``/``.jpeg`` file path. Home shorthand is expanded and
relative targets are resolved against the current working directory.
Default output locations are always directories, dotted names included.
"""

from __future__ import annotations

import logging
import random
import string
import tempfile
from datetime import UTC, datetime
from pathlib import Path

from nano_banana.config import APP_DIR_NAME, JPEG_EXTENSIONS, OutputSettings
from nano_banana.exceptions import InvalidExtensionError, InvalidPathError

logger = logging.getLogger(__name__)

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
_SUFFIX_LENGTH = 6


def build_generated_file_name(now: datetime | None = None) -> str:
    """Return ``generated-<timestamp>-<suffix>.jpg`` for the current instant."""
    instant = (now or datetime.now(UTC)).astimezone(UTC)
    timestamp = instant.strftime("%Y-%m-%dT%H-%M-%S-") + f"{instant.microsecond // 1000:03d}Z"
    suffix = "".join(random.choices(_SUFFIX_ALPHABET, k=_SUFFIX_LENGTH))
    return f"generated-{timestamp}-{suffix}.jpg"


def expand_target(target: str | Path) -> Path:
    """Expand ``~`` and make ``target`` absolute."""
    raw = str(target)
    if not raw.strip():
        raise InvalidPathError(raw, "path is empty")
    if "\0" in raw:
        raise InvalidPathError(raw.replace("\0", "\\0"), "path contains a null byte")

    try:
        path = Path(raw).expanduser()
    except RuntimeError as exc:
        raise InvalidPathError(raw, "cannot expand home directory") from exc
    if not path.is_absolute():
        path = Path.cwd() / path
    return path


def default_output_dirs() -> list[Path]:
    """Return the default output directories in priority order, without duplicates."""
    settings = OutputSettings()
    candidates: list[Path] = []
    if settings.output_dir is not None:
        candidates.append(settings.output_dir)
    try:
        candidates.append(Path.home() / "Pictures" / APP_DIR_NAME)
    except RuntimeError:
        logger.debug("No home directory, skipping ~/Pictures default")
    candidates.append(Path(tempfile.gettempdir()) / APP_DIR_NAME)

    unique: list[Path] = []
    for candidate in candidates:
        if candidate not in unique:
            unique.append(candidate)
    return unique


def resolve_output_path(
    target: str | Path | None,
    candidate_dir: str | Path | None = None,
    *,
    directory: bool = False,
) -> Path:
    """Decide the exact file the image is written to.

    Args:
        target: Caller-supplied directory or ``.jpg``/``.jpeg`` file path.
        candidate_dir: Directory used when ``target`` is absent.
        directory: Treat the effective path as a directory whatever its
            suffix. Always the case when ``target`` is absent.

    Returns:
        Absolute path of the file to write. Missing directories are created.

    Raises:
        InvalidExtensionError: ``target`` names a file with a non-JPEG extension.
        InvalidPathError: The path is empty, contains a null byte, or cannot
            be expanded, or a file sits where a directory is needed.
        OSError: A directory could not be created.

    """
    effective = target if target is not None else candidate_dir
    if effective is None:
        effective = default_output_dirs()[0]
    path = expand_target(effective)

    extension = path.suffix
    if directory or target is None or not extension:
        if path.exists() and not path.is_dir():
            raise InvalidPathError(str(path), "expected a directory but found a file")
        path.mkdir(parents=True, exist_ok=True)
        return path / build_generated_file_name()

    if extension.lower() not in JPEG_EXTENSIONS:
        raise InvalidExtensionError(extension)

    path.parent.mkdir(parents=True, exist_ok=True)
    logger.debug("Resolved explicit output file %s", path)
    return path
