"""Workflow state and the pure transition function.

``reduce(state, event)`` is the only way a WorkflowState changes. Events
produced by asynchronous work (extraction results, stream chunks, stream
completion, failures) carry the session token that was current when the work
started; once a reset or a new document bumps the session, those events are
ignored so a stale stream can never write into a newer document.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum

from document_translator.errors import ErrorKind

logger = logging.getLogger(__name__)

NO_CONTENT_MESSAGE = "No content to translate. The document might be empty or failed to parse."
EMPTY_DOCUMENT_MESSAGE = "The document does not contain any text."


class Status(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    READY = "ready"
    TRANSLATING = "translating"
    COMPLETE = "complete"
    ERROR = "error"


class Direction(str, Enum):
    LAO_TO_CHINESE = "lo-zh"
    CHINESE_TO_LAO = "zh-lo"

    @property
    def source_language(self) -> str:
        return "Lao" if self is Direction.LAO_TO_CHINESE else "Chinese"

    @property
    def target_language(self) -> str:
        return "Chinese" if self is Direction.LAO_TO_CHINESE else "Lao"

    @property
    def target_code(self) -> str:
        return "zh" if self is Direction.LAO_TO_CHINESE else "lo"

    @property
    def label(self) -> str:
        return f"{self.source_language} to {self.target_language}"


class DownloadMode(str, Enum):
    TRANSLATION = "translation"
    BILINGUAL = "bilingual"


class InputMode(str, Enum):
    UPLOAD = "upload"
    TEXT = "text"


# Statuses in which the direction and anonymize preferences are locked.
BUSY_STATUSES = frozenset({Status.PARSING, Status.TRANSLATING})


@dataclass(frozen=True)
class WorkflowState:
    status: Status = Status.IDLE
    source_text: str = ""
    translated_text: str = ""
    direction: Direction = Direction.LAO_TO_CHINESE
    anonymize: bool = True
    download_mode: DownloadMode = DownloadMode.TRANSLATION
    input_mode: InputMode = InputMode.UPLOAD
    error: str | None = None
    error_kind: ErrorKind | None = None
    filename: str | None = None
    # Text received before a translation failed; kept for display only.
    partial_text: str = ""
    session: int = 0

    @property
    def is_busy(self) -> bool:
        return self.status in BUSY_STATUSES

    @property
    def has_document(self) -> bool:
        return bool(self.filename or self.source_text)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InputModeChanged:
    mode: InputMode


@dataclass(frozen=True)
class FileSelected:
    filename: str


@dataclass(frozen=True)
class ExtractionSucceeded:
    session: int
    text: str


@dataclass(frozen=True)
class TextEntered:
    text: str


@dataclass(frozen=True)
class TranslateRequested:
    pass


@dataclass(frozen=True)
class ChunkReceived:
    session: int
    text: str


@dataclass(frozen=True)
class TranslationCompleted:
    session: int


@dataclass(frozen=True)
class Failed:
    session: int
    message: str
    kind: ErrorKind
    partial_text: str = ""


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class DirectionChanged:
    direction: Direction


@dataclass(frozen=True)
class AnonymizeChanged:
    anonymize: bool


@dataclass(frozen=True)
class DownloadModeChanged:
    mode: DownloadMode


Event = (
    InputModeChanged
    | FileSelected
    | ExtractionSucceeded
    | TextEntered
    | TranslateRequested
    | ChunkReceived
    | TranslationCompleted
    | Failed
    | Reset
    | DirectionChanged
    | AnonymizeChanged
    | DownloadModeChanged
)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def _fresh_document(state: WorkflowState, **changes) -> WorkflowState:
    """A new document state that keeps only the user preferences."""
    return WorkflowState(
        direction=state.direction,
        anonymize=state.anonymize,
        download_mode=state.download_mode,
        session=state.session + 1,
        **changes,
    )


def _is_stale(state: WorkflowState, session: int) -> bool:
    if session != state.session:
        logger.debug("Dropping event for session %d (current %d)", session, state.session)
        return True
    return False


def _input_mode_changed(state: WorkflowState, event: InputModeChanged) -> WorkflowState:
    return replace(state, input_mode=event.mode)


def _file_selected(state: WorkflowState, event: FileSelected) -> WorkflowState:
    return _fresh_document(
        state,
        status=Status.PARSING,
        filename=event.filename,
        input_mode=InputMode.UPLOAD,
    )


def _extraction_succeeded(state: WorkflowState, event: ExtractionSucceeded) -> WorkflowState:
    if _is_stale(state, event.session) or state.status is not Status.PARSING:
        return state
    if not event.text.strip():
        return replace(
            state,
            status=Status.ERROR,
            error=EMPTY_DOCUMENT_MESSAGE,
            error_kind=ErrorKind.INPUT,
        )
    return replace(state, status=Status.READY, source_text=event.text)


def _text_entered(state: WorkflowState, event: TextEntered) -> WorkflowState:
    return _fresh_document(
        state,
        status=Status.READY if event.text.strip() else Status.IDLE,
        source_text=event.text,
        input_mode=InputMode.TEXT,
    )


def _translate_requested(state: WorkflowState, event: TranslateRequested) -> WorkflowState:
    if state.is_busy:
        return state
    if not state.source_text.strip():
        return replace(
            state,
            status=Status.ERROR,
            error=NO_CONTENT_MESSAGE,
            error_kind=ErrorKind.USER_ACTION,
        )
    return replace(
        state,
        status=Status.TRANSLATING,
        translated_text="",
        partial_text="",
        error=None,
        error_kind=None,
        session=state.session + 1,
    )


def _chunk_received(state: WorkflowState, event: ChunkReceived) -> WorkflowState:
    if _is_stale(state, event.session) or state.status is not Status.TRANSLATING:
        return state
    return replace(state, translated_text=state.translated_text + event.text)


def _translation_completed(state: WorkflowState, event: TranslationCompleted) -> WorkflowState:
    if _is_stale(state, event.session) or state.status is not Status.TRANSLATING:
        return state
    return replace(state, status=Status.COMPLETE)


def _failed(state: WorkflowState, event: Failed) -> WorkflowState:
    if _is_stale(state, event.session) or state.status not in BUSY_STATUSES:
        return state
    return replace(
        state,
        status=Status.ERROR,
        error=event.message,
        error_kind=event.kind,
        translated_text="",
        partial_text=state.translated_text or event.partial_text,
    )


def _reset(state: WorkflowState, event: Reset) -> WorkflowState:
    return _fresh_document(state)


def _direction_changed(state: WorkflowState, event: DirectionChanged) -> WorkflowState:
    if state.is_busy:
        return state
    return replace(state, direction=event.direction)


def _anonymize_changed(state: WorkflowState, event: AnonymizeChanged) -> WorkflowState:
    if state.is_busy:
        return state
    return replace(state, anonymize=event.anonymize)


def _download_mode_changed(state: WorkflowState, event: DownloadModeChanged) -> WorkflowState:
    return replace(state, download_mode=event.mode)


_HANDLERS: dict[type, Callable[[WorkflowState, object], WorkflowState]] = {
    InputModeChanged: _input_mode_changed,
    FileSelected: _file_selected,
    ExtractionSucceeded: _extraction_succeeded,
    TextEntered: _text_entered,
    TranslateRequested: _translate_requested,
    ChunkReceived: _chunk_received,
    TranslationCompleted: _translation_completed,
    Failed: _failed,
    Reset: _reset,
    DirectionChanged: _direction_changed,
    AnonymizeChanged: _anonymize_changed,
    DownloadModeChanged: _download_mode_changed,
}


def reduce(state: WorkflowState, event: object) -> WorkflowState:
    """Return the state that follows *state* after *event*.

    Unknown events leave the state untouched.
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        return state
    return handler(state, event)
