r"""Exception hierarchy raised by the steadyreq client.

Every failure of the send pipeline is reported with a subclass of
``SteadyRequestError``. A caller either receives a complete response or
one of these exceptions, never a partially populated response.
"""

from __future__ import annotations

__all__ = [
    "BodyReadError",
    "ConfigurationError",
    "RequestConstructionError",
    "SteadyRequestError",
    "TransportError",
    "UrlParseError",
]


class SteadyRequestError(Exception):
    """Base exception for all steadyreq failures.

    Args:
        message: Human readable description of the failure.
        method: The HTTP method of the failed request, if known.
        url: The target URL of the failed request, if known.
        cause: The underlying exception, if any.

    Example:
        ```pycon
        >>> from steadyreq.exceptions import SteadyRequestError
        >>> exc = SteadyRequestError("boom", method="GET", url="https://example.com")
        >>> exc.method, exc.url
        ('GET', 'https://example.com')

        ```
    """

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        url: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.method = method
        self.url = url
        self.cause = cause


class ConfigurationError(SteadyRequestError, ValueError):
    """Raised when an option set or a transport option holds an invalid
    value."""


class UrlParseError(SteadyRequestError):
    """Raised when the target URL is malformed or not absolute.

    No network attempt is made when this error is raised.
    """


class RequestConstructionError(SteadyRequestError):
    """Raised when the request cannot be built from the method, headers
    and body."""


class TransportError(SteadyRequestError):
    """Raised when the transport gives up after exhausting its retry
    budget.

    Args:
        message: Human readable description of the failure.
        attempts: Number of physical attempts that were made.
        status_code: Status code of the last retryable response, or
            ``None`` when the last attempt failed with a network error.
        method: The HTTP method of the failed request.
        url: The target URL of the failed request.
        cause: The last network exception, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        attempts: int,
        status_code: int | None = None,
        method: str | None = None,
        url: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, method=method, url=url, cause=cause)
        self.attempts = attempts
        self.status_code = status_code


class BodyReadError(SteadyRequestError):
    """Raised when the response body cannot be buffered."""
