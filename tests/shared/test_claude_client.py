"""Tests for shared/claude_client.py — API key loading and stream wrapping."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from unittest.mock import patch

import pytest

import shared.claude_client as claude_mod


@pytest.fixture()
def env_file(tmp_path):
    path = tmp_path / ".env"
    with patch.object(claude_mod, "_ENV_PATH", path):
        yield path


# ── load_api_key ─────────────────────────────────────────────────────────


class TestLoadApiKey:
    def test_reads_key_from_env_file(self, env_file, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        env_file.write_text("ANTHROPIC_API_KEY=sk-test-file\n")
        assert claude_mod.load_api_key() == "sk-test-file"

    def test_falls_back_to_environment(self, env_file, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test-env")
        assert claude_mod.load_api_key() == "sk-test-env"

    def test_missing_key_raises(self, env_file, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(RuntimeError, match="ANTHROPIC_API_KEY"):
            claude_mod.load_api_key()


# ── stream_with_claude ───────────────────────────────────────────────────


class _FakeStream:
    def __init__(self, pieces, stop_reason):
        self._pieces = pieces
        self._stop_reason = stop_reason

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    @property
    def text_stream(self):
        async def gen():
            for piece in self._pieces:
                yield piece

        return gen()

    async def get_final_message(self):
        return SimpleNamespace(
            stop_reason=self._stop_reason,
            usage=SimpleNamespace(input_tokens=12, output_tokens=7),
        )


class _FakeClient:
    def __init__(self, stream, recorded):
        self.messages = SimpleNamespace(stream=self._stream)
        self._fake_stream = stream
        self._recorded = recorded

    def _stream(self, **kwargs):
        self._recorded.update(kwargs)
        return self._fake_stream


def _collect(agen):
    async def run():
        return [item async for item in agen]

    return asyncio.run(run())


class TestStreamWithClaude:
    def _patched(self, pieces, stop_reason, recorded):
        fake = _FakeStream(pieces, stop_reason)
        return (
            patch.object(claude_mod, "load_api_key", return_value="sk-test"),
            patch("anthropic.AsyncAnthropic", lambda api_key: _FakeClient(fake, recorded)),
        )

    def test_yields_deltas_then_stop_reason(self):
        recorded: dict = {}
        key_patch, client_patch = self._patched(["Bon", "jour"], "end_turn", recorded)
        with key_patch, client_patch:
            items = _collect(claude_mod.stream_with_claude("system", "Hello", max_tokens=100))
        assert items == [("Bon", None), ("jour", None), ("", "end_turn")]
        assert recorded["system"] == "system"
        assert recorded["max_tokens"] == 100
        assert recorded["messages"] == [{"role": "user", "content": "Hello"}]

    def test_reports_refusal(self):
        key_patch, client_patch = self._patched([], "refusal", {})
        with key_patch, client_patch:
            items = _collect(claude_mod.stream_with_claude("system", "Hello"))
        assert items == [("", "refusal")]
