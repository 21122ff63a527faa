from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from nano_banana import logging_setup
from nano_banana.logging_setup import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging(monkeypatch):
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    noisy = {name: logging.getLogger(name).level for name in ("httpx", "httpcore", "google_genai")}
    monkeypatch.setattr(logging_setup, "_handler", None)
    monkeypatch.delenv("NANO_BANANA_LOG_LEVEL", raising=False)
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, saved in noisy.items():
        logging.getLogger(name).setLevel(saved)
    logging.captureWarnings(False)


def _rich_handlers() -> list[logging.Handler]:
    return [handler for handler in logging.getLogger().handlers if isinstance(handler, RichHandler)]


def test_repeated_calls_keep_a_single_handler():
    configure_logging()
    configure_logging("debug")

    assert len(_rich_handlers()) == 1
    assert logging.getLogger().level == logging.DEBUG


def test_foreign_handlers_are_replaced():
    logging.getLogger().addHandler(logging.StreamHandler())

    configure_logging()

    assert logging.getLogger().handlers == _rich_handlers()


def test_handler_writes_to_stderr():
    configure_logging()

    assert _rich_handlers()[0].console.stderr is True


def test_level_comes_from_environment(monkeypatch):
    monkeypatch.setenv("NANO_BANANA_LOG_LEVEL", "debug")

    assert configure_logging() == logging.DEBUG
    assert logging.getLogger().level == logging.DEBUG


def test_explicit_level_overrides_environment(monkeypatch):
    monkeypatch.setenv("NANO_BANANA_LOG_LEVEL", "debug")

    assert configure_logging(" error ") == logging.ERROR


@pytest.mark.parametrize("value", ["chatty", "", "   "])
def test_unknown_level_falls_back_to_info(value):
    assert configure_logging(value or None) == logging.INFO


def test_transport_loggers_stay_at_warning_or_above():
    configure_logging("debug")

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("google_genai").level == logging.WARNING

    configure_logging("error")

    assert logging.getLogger("httpx").level == logging.ERROR
