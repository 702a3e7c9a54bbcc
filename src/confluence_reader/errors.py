"""Errors raised by confluence-reader.

All of them derive from :class:`ConfluenceReaderError` and carry:

``code``
    An :class:`ErrorCode`; a plain string comparison works since the enum
    subclasses :class:`str`.
``message``
    What went wrong, phrased for the person running the tool.
``context``
    Structured details.  The keys each class fills in are listed in its
    docstring.
``cause``
    The wrapped exception, if any (also set as ``__cause__``).

Errors answering an HTTP status derive from :class:`ConfluenceReaderAPIError`
and always have ``status_code``, ``method`` and ``path`` in ``context``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    CONFIG_ERROR = "CONFIG_ERROR"
    INVALID_URL = "INVALID_URL"
    API_ERROR = "API_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"
    NETWORK_ERROR = "NETWORK_ERROR"


class ConfluenceReaderError(Exception):
    """Base class of every confluence-reader error.

    Subclasses fix their code through :attr:`default_code`; *code* only
    needs passing when raising the base class directly.
    """

    default_code: ClassVar[ErrorCode] = ErrorCode.API_ERROR

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
        *,
        code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message)
        self.code: ErrorCode = code if code is not None else self.default_code
        self.message = message
        self.context: dict[str, Any] = dict(context) if context else {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# -- input -------------------------------------------------------------------

class ConfluenceReaderConfigError(ConfluenceReaderError):
    """Credentials or routing are missing.  Context: ``missing``."""

    default_code = ErrorCode.CONFIG_ERROR


class ConfluenceReaderURLError(ConfluenceReaderError):
    """A page reference carries no page id.  Context: ``url``."""

    default_code = ErrorCode.INVALID_URL


# -- HTTP status -------------------------------------------------------------

class ConfluenceReaderAPIError(ConfluenceReaderError):
    """Confluence answered with a non-retryable error status."""

    @property
    def status_code(self) -> int | None:
        return self.context.get("status_code")


class ConfluenceReaderValidationError(ConfluenceReaderAPIError):
    """400 or any other unmapped 4xx.  Extra context: ``body``."""

    default_code = ErrorCode.VALIDATION_ERROR


class ConfluenceReaderAuthError(ConfluenceReaderAPIError):
    """401: the scoped token is invalid or expired."""

    default_code = ErrorCode.AUTH_ERROR


class ConfluenceReaderPermissionError(ConfluenceReaderAPIError):
    """403: the token cannot read this page."""

    default_code = ErrorCode.PERMISSION_ERROR


class ConfluenceReaderNotFoundError(ConfluenceReaderAPIError):
    """404: no such page, or it is hidden from the token."""

    default_code = ErrorCode.NOT_FOUND


# -- transport ---------------------------------------------------------------

class ConfluenceReaderRetryExhaustedError(ConfluenceReaderError):
    """Every attempt hit a retryable status.

    Context: ``attempts``, ``last_status_code``.
    """

    default_code = ErrorCode.RETRY_EXHAUSTED


class ConfluenceReaderNetworkError(ConfluenceReaderError):
    """Timeouts or connection failures outlasted the retry budget.

    Context: ``method``, ``path``, ``attempts``.
    """

    default_code = ErrorCode.NETWORK_ERROR
