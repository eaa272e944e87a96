"""Dispatcher that drives the translation workflow.

TranslationWorkflow owns the single WorkflowState and replaces it through
``reduce`` for every event. It runs extraction and the translation stream,
tags everything they produce with the session token that was current when
they started, and keeps the progress ticker in step with the status.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from functools import partial

from document_translator.errors import ErrorKind, UserActionError, WorkflowError
from document_translator.export import ExportFile, build_download, clipboard_text
from document_translator.extraction import extract_text
from document_translator.settings import TranslatorSettings, load_settings
from document_translator.stream import (
    StreamCompleted,
    StreamProgress,
    TranslationChunk,
    aggregate_stream,
)
from document_translator.ticker import ProgressTicker, status_steps
from document_translator.translator import translate_document_stream
from document_translator.workflow import (
    AnonymizeChanged,
    ChunkReceived,
    Direction,
    DirectionChanged,
    DownloadMode,
    DownloadModeChanged,
    ExtractionSucceeded,
    Failed,
    FileSelected,
    InputMode,
    InputModeChanged,
    Reset,
    Status,
    TextEntered,
    TranslateRequested,
    TranslationCompleted,
    WorkflowState,
    reduce,
)

logger = logging.getLogger(__name__)

Extractor = Callable[[bytes, str, str], str]
Translator = Callable[..., AsyncIterator[TranslationChunk]]
Listener = Callable[[WorkflowState], None]

ALREADY_TRANSLATING_MESSAGE = "A translation is already in progress."
STILL_PARSING_MESSAGE = "The document is still being parsed."
CANCELLED_MESSAGE = "Translation was cancelled."


class TranslationWorkflow:
    """Owns the workflow state for one document at a time."""

    def __init__(
        self,
        extractor: Extractor | None = None,
        translator: Translator | None = None,
        settings: TranslatorSettings | None = None,
        ticker: ProgressTicker | None = None,
    ):
        self.settings = settings or load_settings()
        self._extract = extractor or extract_text
        self._translate = translator or partial(translate_document_stream, settings=self.settings)
        self.ticker = ticker or ProgressTicker(
            tick_seconds=self.settings.tick_seconds,
            step_ticks=self.settings.step_ticks,
        )
        self.state = WorkflowState()
        self._listeners: list[Listener] = []

    # -- Dispatch ------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, event: object) -> WorkflowState:
        previous = self.state
        self.state = reduce(previous, event)
        if self.state is previous:
            return self.state
        if self.state.status is not previous.status:
            logger.debug(
                "%s: %s -> %s (session %d)",
                type(event).__name__,
                previous.status.value,
                self.state.status.value,
                self.state.session,
            )
        self._sync_ticker(previous)
        for listener in list(self._listeners):
            try:
                listener(self.state)
            except Exception:
                logger.exception("State listener failed on %s", type(event).__name__)
        return self.state

    def _sync_ticker(self, previous: WorkflowState) -> None:
        entered = self.state.status is Status.TRANSLATING and (
            previous.status is not Status.TRANSLATING or previous.session != self.state.session
        )
        left = previous.status is Status.TRANSLATING and self.state.status is not Status.TRANSLATING
        try:
            if entered:
                steps = status_steps(
                    self.settings.status_steps,
                    self.state.anonymize,
                    self.settings.anonymize_step,
                )
                self.ticker.start(steps)
            elif left:
                self.ticker.stop()
        except Exception:
            logger.exception("Progress ticker update failed")

    # -- Input ---------------------------------------------------------------

    def set_input_mode(self, mode: InputMode) -> WorkflowState:
        return self.dispatch(InputModeChanged(mode))

    async def select_file(self, file_bytes: bytes, filename: str, content_type: str = "") -> WorkflowState:
        """Start a new document from an uploaded file and extract its text."""
        session = self.dispatch(FileSelected(filename)).session
        try:
            text = await asyncio.to_thread(self._extract, file_bytes, filename, content_type)
        except WorkflowError as exc:
            logger.warning("Extraction of %s failed: %s", filename, exc.message)
            return self.dispatch(Failed(session, exc.message, exc.kind))
        except Exception as exc:
            logger.exception("Unexpected extraction failure for %s", filename)
            return self.dispatch(
                Failed(session, f"Failed to read or parse the uploaded file: {exc}", ErrorKind.EXTRACTION)
            )
        return self.dispatch(ExtractionSucceeded(session, text))

    def enter_text(self, text: str) -> WorkflowState:
        return self.dispatch(TextEntered(text))

    # -- Translation ---------------------------------------------------------

    async def translate(self) -> WorkflowState:
        """Run one translation of the current document to completion.

        Raises UserActionError when a translation is already running or the
        document is still being parsed; the state is left unchanged.
        """
        if self.state.status is Status.TRANSLATING:
            raise UserActionError(ALREADY_TRANSLATING_MESSAGE)
        if self.state.status is Status.PARSING:
            raise UserActionError(STILL_PARSING_MESSAGE)

        state = self.dispatch(TranslateRequested())
        if state.status is not Status.TRANSLATING:
            return state

        session = state.session
        source = self._translate(state.source_text, state.direction, anonymize=state.anonymize)
        events = aggregate_stream(source)
        try:
            async for event in events:
                if self.state.session != session:
                    logger.info("Translation session %d superseded; closing its stream", session)
                    break
                if isinstance(event, StreamProgress):
                    self.dispatch(ChunkReceived(session, event.text))
                elif isinstance(event, StreamCompleted):
                    self.dispatch(TranslationCompleted(session))
                else:
                    self.dispatch(Failed(session, event.message, ErrorKind.SERVICE, event.partial_text))
        except asyncio.CancelledError:
            self.dispatch(Failed(session, CANCELLED_MESSAGE, ErrorKind.SERVICE))
            raise
        finally:
            await events.aclose()
            close = getattr(source, "aclose", None)
            if close is not None:
                await close()
        return self.state

    # -- Preferences & reset -------------------------------------------------

    def reset(self) -> WorkflowState:
        return self.dispatch(Reset())

    def set_direction(self, direction: Direction) -> WorkflowState:
        return self.dispatch(DirectionChanged(direction))

    def set_anonymize(self, anonymize: bool) -> WorkflowState:
        return self.dispatch(AnonymizeChanged(anonymize))

    def set_download_mode(self, mode: DownloadMode) -> WorkflowState:
        return self.dispatch(DownloadModeChanged(mode))

    # -- Output --------------------------------------------------------------

    def progress(self) -> dict:
        return {
            "running": self.ticker.running,
            "elapsed": self.ticker.elapsed,
            "elapsed_display": self.ticker.elapsed_display,
            "message": self.ticker.message,
        }

    def download(self) -> ExportFile:
        return build_download(self.state, self.settings.labels)

    def clipboard(self) -> str:
        return clipboard_text(self.state)

    def close(self) -> None:
        self.ticker.stop()
