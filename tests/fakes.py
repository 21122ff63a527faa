"""Fake Gemini responses and clients shared by the test suite."""

from __future__ import annotations

import io
from types import SimpleNamespace
from typing import Any

from PIL import Image


def make_png(size: tuple[int, int] = (4, 3), color: tuple[int, ...] = (255, 0, 0, 128)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def image_part(data: bytes) -> SimpleNamespace:
    return SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type="image/png"), text=None)


def text_part(text: str) -> SimpleNamespace:
    return SimpleNamespace(inline_data=None, text=text)


def make_response(*parts: SimpleNamespace) -> SimpleNamespace:
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


class _FakeModels:
    def __init__(self, outcomes: list[Any]) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[dict[str, Any]] = []

    def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeGenaiClient:
    """Stand-in for ``google.genai.Client`` replaying scripted outcomes.

    The last outcome repeats once the others are used up.
    """

    def __init__(self, outcomes: list[Any], api_key: str) -> None:
        self.api_key = api_key
        self.models = _FakeModels(outcomes)


class FakeClientFactory:
    """Callable used in place of ``genai.Client``; remembers every client it built."""

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes = list(outcomes)
        self.created: list[FakeGenaiClient] = []

    def __call__(self, *, api_key: str) -> FakeGenaiClient:
        client = FakeGenaiClient(self.outcomes, api_key)
        self.created.append(client)
        return client

    @property
    def calls(self) -> list[dict[str, Any]]:
        return [call for client in self.created for call in client.models.calls]
