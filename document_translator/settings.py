"""Runtime settings for the document translator.

Values come from data/config/document-translator.json when present, with the
hardcoded defaults below as fallback.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from shared.claude_client import DEFAULT_MODEL
from shared.config_store import load_config

TOOL_NAME = "document-translator"

_DEFAULT_STATUS_STEPS: list[str] = [
    "Performing initial literal translation...",
    "Polishing for natural fluency...",
    "Finalizing grammar and syntax check...",
]
_DEFAULT_ANONYMIZE_STEP = "Applying anonymization..."

_DEFAULT_BILINGUAL_LABELS: dict[str, str] = {
    "block_header": "--- 段落 {n} ---",
    "original": "原文：",
    "translated": "译文：",
    "missing": "[...段落缺失...]",
}


@dataclass(frozen=True)
class BilingualLabels:
    """Fixed strings used when rendering a bilingual document."""

    block_header: str = _DEFAULT_BILINGUAL_LABELS["block_header"]
    original: str = _DEFAULT_BILINGUAL_LABELS["original"]
    translated: str = _DEFAULT_BILINGUAL_LABELS["translated"]
    missing: str = _DEFAULT_BILINGUAL_LABELS["missing"]


@dataclass(frozen=True)
class TranslatorSettings:
    model: str = DEFAULT_MODEL
    max_tokens: int = 8192
    status_steps: tuple[str, ...] = tuple(_DEFAULT_STATUS_STEPS)
    anonymize_step: str = _DEFAULT_ANONYMIZE_STEP
    tick_seconds: float = 1.0
    step_ticks: int = 3
    labels: BilingualLabels = field(default_factory=BilingualLabels)


def load_settings() -> TranslatorSettings:
    """Build settings from the tool config, falling back to defaults per key."""
    config = load_config(TOOL_NAME) or {}
    labels = {
        **_DEFAULT_BILINGUAL_LABELS,
        **config.get("bilingual_labels", {}),
    }
    return TranslatorSettings(
        model=config.get("model", DEFAULT_MODEL),
        max_tokens=int(config.get("max_tokens", 8192)),
        status_steps=tuple(config.get("status_steps", _DEFAULT_STATUS_STEPS)),
        anonymize_step=config.get("anonymize_step", _DEFAULT_ANONYMIZE_STEP),
        tick_seconds=float(config.get("tick_seconds", 1.0)),
        step_ticks=max(1, int(config.get("step_ticks", 3))),
        labels=BilingualLabels(**{k: labels[k] for k in _DEFAULT_BILINGUAL_LABELS}),
    )
