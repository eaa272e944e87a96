"""Thin wrapper around the Anthropic SDK for streaming Claude responses."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from pathlib import Path

logger = logging.getLogger(__name__)

_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
DEFAULT_MODEL = "claude-sonnet-4-5-20250929"


def load_api_key() -> str:
    """Return the Anthropic API key from the shared .env file or the environment.

    Raises RuntimeError if the key is missing.
    """
    from dotenv import dotenv_values

    env = dotenv_values(_ENV_PATH)
    api_key = env.get("ANTHROPIC_API_KEY") or os.environ.get("ANTHROPIC_API_KEY", "")
    if not api_key:
        raise RuntimeError(
            "ANTHROPIC_API_KEY not found in .env or the environment. "
            "Add it to enable document translation."
        )
    return api_key


async def stream_with_claude(
    system_prompt: str,
    user_message: str,
    max_tokens: int = 8192,
    model: str = DEFAULT_MODEL,
) -> AsyncIterator[tuple[str, str | None]]:
    """Stream a Claude response as ``(text, stop_reason)`` pairs.

    Every text delta is yielded with a ``None`` stop reason. Once the stream
    ends, a final ``("", stop_reason)`` pair reports why the model stopped
    (``"end_turn"``, ``"max_tokens"``, ``"refusal"``...). SDK errors propagate
    as ``anthropic.APIError``.
    """
    import anthropic

    client = anthropic.AsyncAnthropic(api_key=load_api_key())
    async with client.messages.stream(
        model=model,
        max_tokens=max_tokens,
        system=system_prompt,
        messages=[{"role": "user", "content": user_message}],
    ) as stream:
        async for text in stream.text_stream:
            yield text, None
        message = await stream.get_final_message()

    logger.info(
        "Claude stream finished: model=%s stop_reason=%s input_tokens=%s output_tokens=%s",
        model,
        message.stop_reason,
        message.usage.input_tokens,
        message.usage.output_tokens,
    )
    yield "", message.stop_reason
