"""Paragraph segmentation on blank-line boundaries."""

from __future__ import annotations

import re

# One or more blank lines; the blank line may hold whitespace and CRLF endings.
PARAGRAPH_BREAK = re.compile(r"\r?\n\s*\r?\n")


def split_paragraphs(text: str) -> list[str]:
    """Split *text* into paragraphs, dropping any that are blank after trimming."""
    if not text:
        return []
    return [p for p in PARAGRAPH_BREAK.split(text) if p.strip()]
