"""Tagged error taxonomy shared by the reader, the manager adapters and the engine.

Every failure the sync loops can observe is a :class:`WatchlistarrError` whose
``kind`` names the category, so callers branch on ``exc.kind`` rather than on
message text.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    SOURCE_UNAVAILABLE = "source-unavailable"
    MANAGER_UNAVAILABLE = "manager-unavailable"
    PARSE_FAILURE = "parse-failure"
    NOT_FOUND = "not-found"
    ADD_REJECTED = "add-rejected"
    KIND_MISMATCH = "kind-mismatch"


class WatchlistarrError(RuntimeError):
    """Base class for all categorised sync failures."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        detail: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class SourceUnavailableError(WatchlistarrError):
    """Raised when the watchlist source cannot be reached or rejects the token."""

    kind = ErrorKind.SOURCE_UNAVAILABLE


class ManagerUnavailableError(WatchlistarrError):
    """Raised when a library manager cannot be reached or answers with an error."""

    kind = ErrorKind.MANAGER_UNAVAILABLE


class ParseFailureError(WatchlistarrError):
    """Raised when a response body cannot be decoded into the expected shape."""

    kind = ErrorKind.PARSE_FAILURE


class NotFoundError(WatchlistarrError):
    """Raised when a manager lookup returns no candidates."""

    kind = ErrorKind.NOT_FOUND


class AddRejectedError(WatchlistarrError):
    """Raised when a manager declines an add request; ``detail`` holds its response."""

    kind = ErrorKind.ADD_REJECTED


class KindMismatchError(WatchlistarrError):
    """Raised when an entry is handed to an adapter for the other item kind."""

    kind = ErrorKind.KIND_MISMATCH


__all__ = [
    "AddRejectedError",
    "ErrorKind",
    "KindMismatchError",
    "ManagerUnavailableError",
    "NotFoundError",
    "ParseFailureError",
    "SourceUnavailableError",
    "WatchlistarrError",
]
