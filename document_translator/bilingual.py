"""Bilingual export: index-aligned original/translated paragraph pairs.

Paragraphs are paired strictly by position. When one side has fewer
paragraphs the absent side is rendered with a placeholder; indices never
shift and no pairing is dropped.
"""

from __future__ import annotations

from dataclasses import dataclass

from document_translator.paragraphs import split_paragraphs
from document_translator.settings import BilingualLabels

BLOCK_SEPARATOR = "\n\n\n"


@dataclass(frozen=True)
class BilingualParagraph:
    index: int
    original: str | None
    translated: str | None


def pair_paragraphs(original_text: str, translated_text: str) -> list[BilingualParagraph]:
    """Pair the paragraphs of both documents by position."""
    originals = split_paragraphs(original_text)
    translations = split_paragraphs(translated_text)
    count = max(len(originals), len(translations))
    return [
        BilingualParagraph(
            index=i,
            original=originals[i] if i < len(originals) else None,
            translated=translations[i] if i < len(translations) else None,
        )
        for i in range(count)
    ]


def render_block(pair: BilingualParagraph, labels: BilingualLabels) -> str:
    header = labels.block_header.format(n=pair.index + 1)
    original = pair.original if pair.original is not None else labels.missing
    translated = pair.translated if pair.translated is not None else labels.missing
    return (
        f"{header}\n\n"
        f"{labels.original}\n{original}\n\n"
        f"{labels.translated}\n{translated}"
    )


def compose_bilingual(
    original_text: str,
    translated_text: str,
    labels: BilingualLabels | None = None,
) -> str:
    """Render the bilingual document for a source text and its translation.

    Pure: the same inputs and labels always produce the same string.
    """
    labels = labels or BilingualLabels()
    blocks = [render_block(p, labels) for p in pair_paragraphs(original_text, translated_text)]
    return BLOCK_SEPARATOR.join(blocks)
