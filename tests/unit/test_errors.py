"""Tests for the error hierarchy."""

from __future__ import annotations

import pytest

from confluence_reader.errors import (
    ConfluenceReaderAPIError,
    ConfluenceReaderAuthError,
    ConfluenceReaderConfigError,
    ConfluenceReaderError,
    ConfluenceReaderNetworkError,
    ConfluenceReaderNotFoundError,
    ConfluenceReaderPermissionError,
    ConfluenceReaderRetryExhaustedError,
    ConfluenceReaderURLError,
    ConfluenceReaderValidationError,
    ErrorCode,
)

ALL_ERRORS = [
    (ConfluenceReaderConfigError, ErrorCode.CONFIG_ERROR),
    (ConfluenceReaderURLError, ErrorCode.INVALID_URL),
    (ConfluenceReaderValidationError, ErrorCode.VALIDATION_ERROR),
    (ConfluenceReaderAuthError, ErrorCode.AUTH_ERROR),
    (ConfluenceReaderPermissionError, ErrorCode.PERMISSION_ERROR),
    (ConfluenceReaderNotFoundError, ErrorCode.NOT_FOUND),
    (ConfluenceReaderRetryExhaustedError, ErrorCode.RETRY_EXHAUSTED),
    (ConfluenceReaderNetworkError, ErrorCode.NETWORK_ERROR),
]


class TestErrorHierarchy:
    @pytest.mark.parametrize(("cls", "code"), ALL_ERRORS)
    def test_code_and_base_class(self, cls, code):
        err = cls(message="msg", context={"k": "v"})
        assert isinstance(err, ConfluenceReaderError)
        assert err.code == code
        assert err.message == "msg"
        assert err.context == {"k": "v"}
        assert str(err) == "msg"

    @pytest.mark.parametrize(
        "cls",
        [
            ConfluenceReaderValidationError,
            ConfluenceReaderAuthError,
            ConfluenceReaderPermissionError,
            ConfluenceReaderNotFoundError,
        ],
    )
    def test_status_errors_share_api_base(self, cls):
        err = cls("x", context={"status_code": 418})
        assert isinstance(err, ConfluenceReaderAPIError)
        assert err.status_code == 418

    def test_base_class_code(self):
        assert ConfluenceReaderError("x").code == ErrorCode.API_ERROR
        assert ConfluenceReaderError("x", code=ErrorCode.NOT_FOUND).code == ErrorCode.NOT_FOUND

    def test_context_defaults_to_empty_dict(self):
        assert ConfluenceReaderNotFoundError("gone").context == {}

    def test_context_is_copied(self):
        ctx = {"a": 1}
        err = ConfluenceReaderConfigError("x", context=ctx)
        ctx["a"] = 2
        assert err.context == {"a": 1}

    def test_cause_chained(self):
        root = OSError("socket closed")
        err = ConfluenceReaderNetworkError("network", cause=root)
        assert err.cause is root
        assert err.__cause__ is root

    def test_error_code_is_str(self):
        assert ErrorCode.NOT_FOUND == "NOT_FOUND"

    def test_repr(self):
        err = ConfluenceReaderURLError("bad", context={"url": "x"})
        assert repr(err) == (
            "ConfluenceReaderURLError(code=<ErrorCode.INVALID_URL: 'INVALID_URL'>, "
            "message='bad', context={'url': 'x'})"
        )

    def test_repr_without_context(self):
        assert "context" not in repr(ConfluenceReaderAuthError("no"))
