"""Typed failures raised by the application layer and mapped to HTTP statuses by the API."""
from __future__ import annotations
from typing import Dict, Type

from qa_forum.domain.common.result import Result


class QAError(Exception):
    kind = "QAError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(QAError):
    """Empty title or content, malformed author."""
    kind = "ValidationError"


class NotFoundError(QAError):
    """Unknown question or answer id, or an answer that belongs to another question."""
    kind = "NotFoundError"


class PermissionDeniedError(QAError):
    """Caller's role does not allow the operation."""
    kind = "PermissionError"


class InvariantViolationError(QAError):
    """A write would have left a thread inconsistent; it was rolled back."""
    kind = "InvariantViolation"


_ERRORS_BY_KIND: Dict[str, Type[QAError]] = {
    cls.kind: cls
    for cls in (ValidationError, NotFoundError, PermissionDeniedError, InvariantViolationError)
}


def error_for(result: Result) -> QAError:
    """Build the exception matching a failed Result's kind."""
    return _ERRORS_BY_KIND.get(result.kind or "", QAError)(result.error or "Operation failed")


def raise_for(result: Result) -> None:
    if not result.is_success:
        raise error_for(result)
