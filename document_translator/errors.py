"""Error taxonomy for the translation workflow.

Every failure ends up in the workflow's single ``error`` status with a
human-readable message; ``kind`` keeps the category so callers (and tests)
can tell input problems from service failures without parsing messages.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    INPUT = "input"
    EXTRACTION = "extraction"
    SERVICE = "service"
    USER_ACTION = "user_action"


class WorkflowError(Exception):
    """Base class for workflow failures, carrying an ErrorKind."""

    kind: ErrorKind = ErrorKind.SERVICE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputError(WorkflowError):
    """Bad or empty file or text."""

    kind = ErrorKind.INPUT


class UnsupportedFormat(InputError):
    pass


class EmptyDocument(InputError):
    pass


class ExtractionError(WorkflowError):
    """The file parser failed."""

    kind = ErrorKind.EXTRACTION


class CorruptFile(ExtractionError):
    pass


class ServiceError(WorkflowError):
    """The translation stream failed or was blocked."""

    kind = ErrorKind.SERVICE


class UserActionError(WorkflowError):
    """The requested action is not valid in the current state."""

    kind = ErrorKind.USER_ACTION
