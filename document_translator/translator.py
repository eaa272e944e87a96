"""Claude-powered streaming translation between Lao and Chinese.

Wraps shared/claude_client.py and turns its deltas into TranslationChunk
values. A ``refusal`` stop reason is reported as a chunk carrying a block
reason; SDK and network errors are raised as ServiceError.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from document_translator.errors import ServiceError
from document_translator.settings import TranslatorSettings, load_settings
from document_translator.stream import TranslationChunk
from document_translator.workflow import Direction
from shared.claude_client import stream_with_claude

logger = logging.getLogger(__name__)

# Stop reasons that mean the model declined to produce the translation.
BLOCKING_STOP_REASONS = frozenset({"refusal"})

_SYSTEM_PROMPT = (
    "You are a professional translator. Translation direction: {source_lang} to "
    "{target_lang}. Output ONLY the translated text, no explanations or extra "
    "notes. Keep the paragraph structure of the original: separate paragraphs "
    "with a single blank line, in the same order, one translated paragraph per "
    "original paragraph."
)

_ANONYMIZE_INSTRUCTION = (
    "Anonymize personally identifiable information in the translation: replace "
    "names of people, ID and passport numbers, phone numbers, email addresses "
    "and street addresses with bracketed placeholders such as [NAME] or [PHONE]."
)


def build_system_prompt(direction: Direction, anonymize: bool) -> str:
    prompt = _SYSTEM_PROMPT.format(
        source_lang=direction.source_language,
        target_lang=direction.target_language,
    )
    if anonymize:
        prompt = f"{prompt} {_ANONYMIZE_INSTRUCTION}"
    return prompt


async def translate_document_stream(
    text: str,
    direction: Direction,
    *,
    anonymize: bool = True,
    settings: TranslatorSettings | None = None,
) -> AsyncIterator[TranslationChunk]:
    """Stream the translation of *text* as TranslationChunk values."""
    import anthropic

    settings = settings or load_settings()
    system = build_system_prompt(direction, anonymize)
    logger.info(
        "Translating %d characters (%s, anonymize=%s) with %s",
        len(text),
        direction.label,
        anonymize,
        settings.model,
    )

    try:
        async for piece, stop_reason in stream_with_claude(
            system_prompt=system,
            user_message=text,
            max_tokens=settings.max_tokens,
            model=settings.model,
        ):
            if stop_reason in BLOCKING_STOP_REASONS:
                yield TranslationChunk(text="", block_reason=stop_reason)
                return
            if piece:
                yield TranslationChunk(text=piece)
    except anthropic.APIError as exc:
        raise ServiceError(f"Translation service error: {exc}") from exc
    except RuntimeError as exc:
        # Missing API key.
        raise ServiceError(str(exc)) from exc
