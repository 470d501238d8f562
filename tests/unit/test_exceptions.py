from __future__ import annotations

import httpx
import pytest

from steadyreq import (
    BodyReadError,
    ConfigurationError,
    RequestConstructionError,
    SteadyRequestError,
    TransportError,
    UrlParseError,
)


@pytest.mark.parametrize(
    "cls", [BodyReadError, ConfigurationError, RequestConstructionError, UrlParseError]
)
def test_exception_hierarchy(cls: type[SteadyRequestError]) -> None:
    """Test that every error derives from SteadyRequestError."""
    exc = cls("failure", method="GET", url="https://example.com")
    assert isinstance(exc, SteadyRequestError)
    assert str(exc) == "failure"
    assert exc.message == "failure"
    assert exc.method == "GET"
    assert exc.url == "https://example.com"
    assert exc.cause is None


def test_configuration_error_is_value_error() -> None:
    """Test that ConfigurationError is a ValueError."""
    assert issubclass(ConfigurationError, ValueError)


def test_steady_request_error_defaults() -> None:
    """Test the default attributes of SteadyRequestError."""
    exc = SteadyRequestError("failure")
    assert exc.method is None
    assert exc.url is None
    assert exc.cause is None


def test_transport_error() -> None:
    """Test the attributes of TransportError after network failures."""
    cause = httpx.ConnectError("refused")
    exc = TransportError(
        "GET request failed", attempts=5, method="GET", url="https://example.com", cause=cause
    )
    assert isinstance(exc, SteadyRequestError)
    assert exc.attempts == 5
    assert exc.status_code is None
    assert exc.cause is cause


def test_transport_error_status_code() -> None:
    """Test the attributes of TransportError after a retryable status."""
    exc = TransportError("giving up", attempts=3, status_code=503)
    assert exc.status_code == 503
    assert exc.method is None
