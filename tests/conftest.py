from __future__ import annotations

import pytest

from nano_banana.config import API_KEY_ENV, FALLBACK_API_KEY_ENV, MODEL_ENV, OUTPUT_DIR_ENV
from tests.fakes import make_png


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for name in (API_KEY_ENV, FALLBACK_API_KEY_ENV, MODEL_ENV, OUTPUT_DIR_ENV):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def sleeps() -> list[float]:
    """Collects backoff delays instead of sleeping."""
    return []
