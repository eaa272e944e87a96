"""Download and clipboard export of a finished translation."""

from __future__ import annotations

from dataclasses import dataclass

from document_translator.bilingual import compose_bilingual
from document_translator.errors import UserActionError
from document_translator.settings import BilingualLabels
from document_translator.workflow import Direction, DownloadMode, Status, WorkflowState

DEFAULT_BASENAME = "translated_document"
NOT_READY_MESSAGE = "There is no finished translation to export yet."


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: bytes
    media_type: str = "text/plain; charset=utf-8"


def _base_name(filename: str) -> str:
    return filename.rsplit(".", 1)[0] if "." in filename else filename


def translated_filename(
    source_filename: str | None,
    direction: Direction,
    mode: DownloadMode = DownloadMode.TRANSLATION,
) -> str:
    """Name of the downloaded file.

    ``report.pdf`` becomes ``report_translated_zh.txt`` (or
    ``report_translated_zh_bilingual.txt``); pasted text has no source name
    and uses ``translated_document.txt``.
    """
    if source_filename and _base_name(source_filename):
        stem = f"{_base_name(source_filename)}_translated_{direction.target_code}"
    else:
        stem = DEFAULT_BASENAME
    if mode is DownloadMode.BILINGUAL:
        stem = f"{stem}_bilingual"
    return f"{stem}.txt"


def _require_complete(state: WorkflowState) -> None:
    if state.status is not Status.COMPLETE or not state.translated_text:
        raise UserActionError(NOT_READY_MESSAGE)


def build_download(state: WorkflowState, labels: BilingualLabels | None = None) -> ExportFile:
    """Build the download for a completed translation in its download mode."""
    _require_complete(state)
    if state.download_mode is DownloadMode.BILINGUAL:
        content = compose_bilingual(state.source_text, state.translated_text, labels)
    else:
        content = state.translated_text
    return ExportFile(
        filename=translated_filename(state.filename, state.direction, state.download_mode),
        content=content.encode("utf-8"),
    )


def clipboard_text(state: WorkflowState) -> str:
    """Full translated text, untransformed."""
    _require_complete(state)
    return state.translated_text
