"""FastAPI backend for the Document Translator tool.

Exposes the translation workflow: upload or paste a document, translate it
with a streamed Claude response, follow progress, and download the result
as a plain or bilingual text file.

Every endpoint is declared ``async`` so the workflow is only ever touched
from the event loop thread.
"""

from __future__ import annotations

import re
from contextlib import asynccontextmanager
from urllib.parse import quote

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel

from document_translator.controller import TranslationWorkflow
from document_translator.errors import UserActionError
from document_translator.workflow import Direction, DownloadMode, InputMode, WorkflowState

# ---------------------------------------------------------------------------
# In-memory workflow (one document at a time)
# ---------------------------------------------------------------------------

_workflow: TranslationWorkflow | None = None


def _get_workflow() -> TranslationWorkflow:
    global _workflow
    if _workflow is None:
        _workflow = TranslationWorkflow()
    return _workflow


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if _workflow is not None:
        _workflow.close()


app = FastAPI(title="Document Translator API", lifespan=lifespan)


def _state_payload(state: WorkflowState) -> dict:
    return {
        "status": state.status.value,
        "filename": state.filename,
        "input_mode": state.input_mode.value,
        "direction": state.direction.value,
        "anonymize": state.anonymize,
        "download_mode": state.download_mode.value,
        "source_text": state.source_text,
        "translated_text": state.translated_text,
        "partial_text": state.partial_text,
        "error": state.error,
        "error_kind": state.error_kind.value if state.error_kind else None,
        "source_characters": len(state.source_text),
        "translated_characters": len(state.translated_text),
    }


def _content_disposition(filename: str) -> str:
    fallback = re.sub(r"[^A-Za-z0-9._-]", "_", filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class InputModeRequest(BaseModel):
    mode: InputMode


class TextRequest(BaseModel):
    text: str


class PreferencesRequest(BaseModel):
    direction: Direction | None = None
    anonymize: bool | None = None
    download_mode: DownloadMode | None = None


# ---------------------------------------------------------------------------
# State & progress
# ---------------------------------------------------------------------------


@app.get("/api/state")
async def get_state() -> dict:
    return _state_payload(_get_workflow().state)


@app.get("/api/progress")
async def get_progress() -> dict:
    """Elapsed time and current status message of the running translation."""
    return _get_workflow().progress()


@app.get("/api/directions")
async def list_directions() -> list[dict]:
    return [{"value": d.value, "label": d.label} for d in Direction]


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


@app.post("/api/input-mode")
async def set_input_mode(req: InputModeRequest) -> dict:
    return _state_payload(_get_workflow().set_input_mode(req.mode))


@app.post("/api/upload")
async def upload_document(file: UploadFile = File(...)) -> dict:
    """Start a new document from an uploaded PDF, DOCX, TXT or MD file."""
    if not file.filename:
        raise HTTPException(400, "Uploaded file has no name.")
    data = await file.read()
    state = await _get_workflow().select_file(data, file.filename, file.content_type or "")
    return _state_payload(state)


@app.post("/api/text")
async def enter_text(req: TextRequest) -> dict:
    """Start a new document from pasted text."""
    return _state_payload(_get_workflow().enter_text(req.text))


# ---------------------------------------------------------------------------
# Translation
# ---------------------------------------------------------------------------


@app.post("/api/translate")
async def translate() -> dict:
    """Translate the current document; returns the state once the stream ends."""
    try:
        state = await _get_workflow().translate()
    except UserActionError as exc:
        raise HTTPException(409, exc.message)
    return _state_payload(state)


@app.post("/api/reset")
async def reset() -> dict:
    return _state_payload(_get_workflow().reset())


@app.post("/api/preferences")
async def set_preferences(req: PreferencesRequest) -> dict:
    """Update direction, anonymize and download mode.

    Direction and anonymize are locked while a document is being parsed or
    translated.
    """
    workflow = _get_workflow()
    if workflow.state.is_busy and (req.direction is not None or req.anonymize is not None):
        raise HTTPException(409, "Preferences cannot change while a document is being processed.")
    if req.direction is not None:
        workflow.set_direction(req.direction)
    if req.anonymize is not None:
        workflow.set_anonymize(req.anonymize)
    if req.download_mode is not None:
        workflow.set_download_mode(req.download_mode)
    return _state_payload(workflow.state)


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


@app.get("/api/download")
async def download() -> Response:
    try:
        export = _get_workflow().download()
    except UserActionError as exc:
        raise HTTPException(409, exc.message)
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": _content_disposition(export.filename)},
    )


@app.get("/api/clipboard", response_class=PlainTextResponse)
async def clipboard() -> str:
    try:
        return _get_workflow().clipboard()
    except UserActionError as exc:
        raise HTTPException(409, exc.message)
