"""Shared fixtures for all tests."""

from __future__ import annotations

from unittest.mock import patch

import pytest

import shared.config_store as config_mod
from document_translator.settings import TranslatorSettings
from document_translator.stream import TranslationChunk


@pytest.fixture(autouse=True)
def _isolate_config_dir(tmp_path):
    """Redirect CONFIG_DIR to tmp_path so no test reads the real data/config."""
    config_dir = tmp_path / "config"
    config_dir.mkdir(parents=True)
    with patch.object(config_mod, "CONFIG_DIR", config_dir):
        yield config_dir


@pytest.fixture()
def fast_settings():
    """Settings with a fast ticker so async tests never wait on real seconds."""
    return TranslatorSettings(tick_seconds=0.01, step_ticks=3)


def _as_chunk(item) -> TranslationChunk:
    return item if isinstance(item, TranslationChunk) else TranslationChunk(text=item)


@pytest.fixture()
def stream_factory():
    """Build a fake translator yielding the given chunks, optionally raising at the end.

    Every call the fake receives is recorded in ``fake.calls``.
    """

    def make(*items, error: Exception | None = None):
        calls: list[dict] = []

        async def fake(text, direction, *, anonymize=True):
            calls.append({"text": text, "direction": direction, "anonymize": anonymize})
            for item in items:
                yield _as_chunk(item)
            if error is not None:
                raise error

        fake.calls = calls
        return fake

    return make
