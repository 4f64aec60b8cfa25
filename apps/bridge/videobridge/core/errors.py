"""Structured errors surfaced to the signalling layer."""
from __future__ import annotations

import enum


class ErrorCondition(str, enum.Enum):
    BAD_REQUEST = "bad_request"
    FEATURE_NOT_IMPLEMENTED = "feature_not_implemented"
    INTERNAL_SERVER_ERROR = "internal_server_error"
    ITEM_NOT_FOUND = "item_not_found"


class ProcessingError(Exception):
    """Failure while processing a conference request.

    The signalling layer turns ``condition`` into the error condition of its
    response and ``message`` into the error text.
    """

    def __init__(self, condition: ErrorCondition, message: str | None = None) -> None:
        super().__init__(message or condition.value)
        self.condition = condition
        self.message = message

    def __repr__(self) -> str:
        return f"ProcessingError(condition={self.condition.value!r}, message={self.message!r})"
