"""Logging for nano-banana: one Rich handler on stderr."""

from __future__ import annotations

import logging
import os
from typing import Final

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["console", "configure_logging"]

LOG_LEVEL_ENV: Final[str] = "NANO_BANANA_LOG_LEVEL"

# stdout carries the MCP protocol
console = Console(stderr=True)

# SDK transports log every request at INFO/DEBUG
_NOISY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore", "google_genai")

_handler: RichHandler | None = None


def _parse_level(name: str | None) -> int:
    level = logging.getLevelName((name or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str | None = None) -> int:
    """Route log records to stderr through Rich and return the active level.

    ``level`` wins over ``NANO_BANANA_LOG_LEVEL``. Calling again only updates
    the level.
    """
    global _handler

    resolved = _parse_level(level or os.getenv(LOG_LEVEL_ENV))
    root = logging.getLogger()

    if _handler is None or _handler not in root.handlers:
        root.handlers.clear()
        _handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
        _handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(_handler)

    root.setLevel(resolved)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
    logging.captureWarnings(True)
    return resolved
