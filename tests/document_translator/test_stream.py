"""Tests for document_translator/stream.py — chunk aggregation."""

from __future__ import annotations

import asyncio

from document_translator.stream import (
    EMPTY_RESULT_MESSAGE,
    UNKNOWN_FAILURE_MESSAGE,
    StreamCompleted,
    StreamFailed,
    StreamProgress,
    TranslationChunk,
    aggregate_stream,
)


async def _chunks(*items, error: Exception | None = None):
    for item in items:
        yield item if isinstance(item, TranslationChunk) else TranslationChunk(item)
    if error is not None:
        raise error


def _collect(*items, error: Exception | None = None) -> list:
    async def run():
        return [event async for event in aggregate_stream(_chunks(*items, error=error))]

    return asyncio.run(run())


class TestNormalStream:
    def test_one_progress_event_per_chunk_then_completion(self):
        events = _collect("Bon", "jour", " le", " monde")
        assert [type(e) for e in events] == [StreamProgress] * 4 + [StreamCompleted]
        assert events[-1] == StreamCompleted("Bonjour le monde")

    def test_increments_add_up_to_final_text(self):
        pieces = ["你", "好", "，", "世界", "\n\n", "再见"]
        events = _collect(*pieces)
        increments = [e.text for e in events if isinstance(e, StreamProgress)]
        final = events[-1].text
        assert "".join(increments) == final == "".join(pieces)
        assert sum(len(i) for i in increments) == len(final)
        assert events[-2].total_length == len(final)

    def test_empty_text_chunks_still_report_progress(self):
        events = _collect("A", "", "B")
        assert len([e for e in events if isinstance(e, StreamProgress)]) == 3
        assert events[-1] == StreamCompleted("AB")


class TestBlockedStream:
    def test_first_chunk_block_fails_without_text(self):
        events = _collect(TranslationChunk("", block_reason="SAFETY"), "never")
        assert len(events) == 1
        failed = events[0]
        assert isinstance(failed, StreamFailed)
        assert "SAFETY" in failed.message
        assert failed.partial_text == ""
        assert failed.block_reason == "SAFETY"

    def test_first_chunk_block_drops_its_text(self):
        events = _collect(TranslationChunk("partial", block_reason="OTHER"))
        assert len(events) == 1
        assert isinstance(events[0], StreamFailed)
        assert events[0].partial_text == ""

    def test_later_block_keeps_earlier_progress(self):
        events = _collect("Bon", TranslationChunk("jour", block_reason="refusal"), "!")
        assert isinstance(events[0], StreamProgress)
        assert isinstance(events[1], StreamFailed)
        assert len(events) == 2
        assert events[1].partial_text == "Bon"


class TestFailingStream:
    def test_failure_reports_partial_text(self):
        events = _collect("Bon", "jour", error=ConnectionError("stream reset"))
        assert [type(e) for e in events] == [StreamProgress, StreamProgress, StreamFailed]
        assert events[-1].message == "stream reset"
        assert events[-1].partial_text == "Bonjour"

    def test_failure_without_message_uses_generic_message(self):
        events = _collect(error=RuntimeError())
        assert events == [StreamFailed(message=UNKNOWN_FAILURE_MESSAGE, partial_text="")]

    def test_zero_chunks_is_an_empty_result(self):
        assert _collect() == [StreamFailed(message=EMPTY_RESULT_MESSAGE)]

    def test_only_empty_chunks_is_an_empty_result(self):
        events = _collect("", "")
        assert events[-1] == StreamFailed(message=EMPTY_RESULT_MESSAGE)
