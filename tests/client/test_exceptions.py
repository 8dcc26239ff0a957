"""Unit tests for the backend client exception hierarchy.

This module tests the exception classes defined in client/exceptions.py.
The tests verify:

1. Exception hierarchy and inheritance relationships
2. Default and explicit attributes
3. String representations (__str__) for debugging/logging

The exception hierarchy being tested:
    BackendClientError (base)
    ├── NetworkFailure
    │   └── RequestTimeoutError
    └── HttpError
        ├── UnauthorizedError (HTTP 401)
        ├── NotFoundError (HTTP 404)
        ├── ValidationError (HTTP 422)
        └── ServerError (HTTP 5xx)
"""

import pytest

from client.exceptions import (
    BackendClientError,
    HttpError,
    NetworkFailure,
    NotFoundError,
    RequestTimeoutError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)


class TestHierarchy:
    """Tests for inheritance relationships."""

    @pytest.mark.parametrize(
        "error",
        [
            NetworkFailure("down"),
            RequestTimeoutError("slow"),
            HttpError("bad", status_code=400),
            UnauthorizedError(),
            NotFoundError("missing"),
            ValidationError("invalid"),
            ServerError("boom"),
        ],
    )
    def test_all_are_backend_client_errors(self, error) -> None:
        """A single except clause catches every client error."""
        assert isinstance(error, BackendClientError)

    def test_timeout_is_network_failure(self) -> None:
        assert issubclass(RequestTimeoutError, NetworkFailure)

    @pytest.mark.parametrize("cls", [UnauthorizedError, NotFoundError, ValidationError, ServerError])
    def test_status_errors_are_http_errors(self, cls) -> None:
        assert issubclass(cls, HttpError)
        assert not issubclass(cls, NetworkFailure)


class TestAttributes:
    """Tests for attributes and defaults."""

    def test_unauthorized_defaults(self) -> None:
        error = UnauthorizedError()

        assert error.status_code == 401
        assert error.message == "Not authenticated"

    def test_fixed_status_codes(self) -> None:
        assert NotFoundError("x").status_code == 404
        assert ValidationError("x").status_code == 422

    def test_server_error_status(self) -> None:
        assert ServerError("x").status_code == 500
        assert ServerError("x", status_code=503).status_code == 503

    def test_http_error_keeps_body(self) -> None:
        error = HttpError("bad", status_code=400, details={"field": "title"}, response_body={"message": "bad"})

        assert error.details == {"field": "title"}
        assert error.response_body == {"message": "bad"}

    def test_network_failure_cause(self) -> None:
        cause = OSError("refused")
        error = NetworkFailure("down", url="http://x", cause=cause)

        assert error.cause is cause


class TestStringRepresentation:
    """Tests for __str__."""

    def test_base_message(self) -> None:
        assert str(BackendClientError("oops")) == "oops"

    def test_network_failure_with_url(self) -> None:
        assert str(NetworkFailure("down", url="http://x")) == "down (url: http://x)"
        assert str(NetworkFailure("down")) == "down"

    def test_timeout(self) -> None:
        error = RequestTimeoutError("slow", timeout=5.0, url="http://x")
        assert str(error) == "slow (timeout: 5.0s, url: http://x)"
        assert str(RequestTimeoutError("slow")) == "slow"

    def test_http_error(self) -> None:
        assert str(NotFoundError("Event not found")) == "[HTTP 404] Event not found"
