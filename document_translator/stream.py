"""Aggregation of a streamed translation into progress and terminal events."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass

logger = logging.getLogger(__name__)

EMPTY_RESULT_MESSAGE = "The translation service returned an empty result."
UNKNOWN_FAILURE_MESSAGE = "An unknown error occurred during translation."


@dataclass(frozen=True)
class TranslationChunk:
    text: str
    block_reason: str | None = None


@dataclass(frozen=True)
class StreamProgress:
    """One chunk's worth of text, plus the running total length."""

    text: str
    total_length: int


@dataclass(frozen=True)
class StreamCompleted:
    text: str


@dataclass(frozen=True)
class StreamFailed:
    message: str
    partial_text: str = ""
    block_reason: str | None = None


StreamEvent = StreamProgress | StreamCompleted | StreamFailed


def block_message(reason: str) -> str:
    return (
        f"Translation was blocked due to: {reason}. "
        "This may be due to the document's content."
    )


async def aggregate_stream(chunks: AsyncIterable[TranslationChunk]) -> AsyncIterator[StreamEvent]:
    """Consume *chunks* once, in order, and yield aggregation events.

    Yields one StreamProgress per chunk, then exactly one terminal event:
    StreamCompleted with the full text, or StreamFailed. A chunk carrying a
    block reason ends the stream; when it is the first chunk nothing is
    emitted before the failure. If the source raises, the failure carries the
    text accumulated so far. A stream that produces no text at all fails with
    an empty-result message.
    """
    parts: list[str] = []
    length = 0
    first = True

    try:
        async for chunk in chunks:
            if chunk.block_reason:
                logger.warning(
                    "Translation blocked (%s) after %d characters",
                    chunk.block_reason,
                    length,
                )
                yield StreamFailed(
                    message=block_message(chunk.block_reason),
                    partial_text="" if first else "".join(parts),
                    block_reason=chunk.block_reason,
                )
                return
            first = False
            parts.append(chunk.text)
            length += len(chunk.text)
            yield StreamProgress(text=chunk.text, total_length=length)
    except Exception as exc:
        logger.warning("Translation stream failed after %d characters: %s", length, exc)
        yield StreamFailed(message=str(exc) or UNKNOWN_FAILURE_MESSAGE, partial_text="".join(parts))
        return

    text = "".join(parts)
    if not text:
        yield StreamFailed(message=EMPTY_RESULT_MESSAGE)
        return
    yield StreamCompleted(text=text)
