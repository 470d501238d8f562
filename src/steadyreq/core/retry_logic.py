r"""Retry classification of responses and exceptions.

A response is retryable when its status code is listed in the
transport's ``status_forcelist``. An exception is retryable when it is an
``httpx.RequestError`` that a new attempt could plausibly fix: invalid
schemes, redirect loops, undecodable bodies, malformed requests and
certificate verification failures are not. A custom ``retry_if``
predicate replaces both rules.
"""

from __future__ import annotations

__all__ = [
    "NON_RETRYABLE_EXCEPTIONS",
    "should_retry_exception",
    "should_retry_response",
]

import ssl
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Callable

NON_RETRYABLE_EXCEPTIONS: tuple[type[httpx.RequestError], ...] = (
    httpx.UnsupportedProtocol,
    httpx.TooManyRedirects,
    httpx.DecodingError,
    httpx.LocalProtocolError,
)


def should_retry_response(
    response: httpx.Response,
    status_forcelist: tuple[int, ...],
    retry_if: Callable[[httpx.Response | None, Exception | None], bool] | None = None,
) -> bool:
    """Tell whether a response must be retried.

    Args:
        response: The response of the last attempt.
        status_forcelist: Retryable status codes.
        retry_if: Optional predicate called with ``(response, None)``.

    Returns:
        ``True`` if another attempt should be made.
    """
    if retry_if is not None:
        return bool(retry_if(response, None))
    return response.status_code in status_forcelist


def should_retry_exception(
    exc: Exception,
    retry_if: Callable[[httpx.Response | None, Exception | None], bool] | None = None,
) -> bool:
    """Tell whether a network exception must be retried.

    Args:
        exc: The exception raised by the last attempt.
        retry_if: Optional predicate called with ``(None, exc)``.

    Returns:
        ``True`` if another attempt should be made.

    Example:
        ```pycon
        >>> import httpx
        >>> from steadyreq.core.retry_logic import should_retry_exception
        >>> should_retry_exception(httpx.ConnectError("refused"))
        True
        >>> should_retry_exception(httpx.UnsupportedProtocol("ftp"))
        False

        ```
    """
    if retry_if is not None:
        return bool(retry_if(None, exc))
    if not isinstance(exc, httpx.RequestError) or isinstance(exc, NON_RETRYABLE_EXCEPTIONS):
        return False
    return not isinstance(exc.__cause__, ssl.SSLCertVerificationError)
