"""
Exceptions for upload functionality.

Every failure that leaves the upload engine is a ClassifiedError: a tagged
exception carrying its kind, whether a retry may help, and a hint for the user.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure categories reported to the user"""
    CONFIG = "config"
    AUTH = "auth"
    PORTAL = "portal"
    UPLOAD = "upload"
    NETWORK = "network"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


class ClassifiedError(Exception):
    """Upload failure with a kind, retriable flag and user-facing suggestion."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        retriable: bool,
        suggestion: str,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self._kind = ErrorKind(kind)
        self._message = message
        self._retriable = retriable
        self._suggestion = suggestion
        self._status_code = status_code

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def message(self) -> str:
        return self._message

    @property
    def retriable(self) -> bool:
        return self._retriable

    @property
    def suggestion(self) -> str:
        return self._suggestion

    @property
    def status_code(self) -> Optional[int]:
        return self._status_code

    def __repr__(self) -> str:
        return (
            f"ClassifiedError(kind={self._kind.value!r}, message={self._message!r}, "
            f"retriable={self._retriable!r}, status_code={self._status_code!r})"
        )
