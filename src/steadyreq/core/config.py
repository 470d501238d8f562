r"""Transport defaults and configuration functions.

A configuration function receives the client's ``Transport`` while the
client is being constructed and may change any of its fields. Functions
are applied left to right, so the last one to set a field wins:

```python
from steadyreq import new_client
from steadyreq.core.config import with_retry_max, with_timeout

client = new_client(with_timeout(5.0), with_retry_max(2))
```

Values are validated once all functions ran, when the transport is
built.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_MAX",
    "DEFAULT_BACKOFF_MIN",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "RETRY_STATUS_CODES",
    "TransportOption",
    "with_backoff",
    "with_follow_redirects",
    "with_http_transport",
    "with_jitter",
    "with_max_wait_time",
    "with_request_hook",
    "with_retry_if",
    "with_retry_max",
    "with_retry_status_codes",
    "with_timeout",
    "with_tls_verify",
]

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import ssl

    import httpx

    from steadyreq.backoff import BaseBackoffStrategy
    from steadyreq.callbacks import AttemptInfo
    from steadyreq.transport import Transport

# Per-attempt timeout in seconds
DEFAULT_TIMEOUT = 10.0

# Retries after the first attempt; total attempts = DEFAULT_MAX_RETRIES + 1
DEFAULT_MAX_RETRIES = 4

# Exponential backoff bounds in seconds: 1s, 2s, 4s, 8s, ... capped at 30s
DEFAULT_BACKOFF_MIN = 1.0
DEFAULT_BACKOFF_MAX = 30.0

# 429: Too Many Requests
# 500: Internal Server Error
# 502: Bad Gateway
# 503: Service Unavailable
# 504: Gateway Timeout
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)

TransportOption = Callable[["Transport"], None]


def with_timeout(timeout: float) -> TransportOption:
    """Set the attempt timeout in seconds.

    ``httpx`` applies the value to each phase of an attempt separately:
    connecting, writing the request, waiting between two reads of the
    response and acquiring a pooled connection. It is not a wall-clock
    limit on the whole attempt: a server that sends some bytes at least
    every ``timeout`` seconds keeps the attempt alive.

    Example:
        ```pycon
        >>> from steadyreq import new_client
        >>> from steadyreq.core.config import with_timeout
        >>> with new_client(with_timeout(2.0)) as client:
        ...     client.transport.timeout
        ...
        2.0

        ```
    """

    def apply(transport: Transport) -> None:
        transport.timeout = timeout

    return apply


def with_retry_max(max_retries: int) -> TransportOption:
    """Set the number of retries after the first attempt."""

    def apply(transport: Transport) -> None:
        transport.max_retries = max_retries

    return apply


def with_backoff(strategy: BaseBackoffStrategy) -> TransportOption:
    """Replace the backoff strategy used between attempts."""

    def apply(transport: Transport) -> None:
        transport.backoff_strategy = strategy

    return apply


def with_jitter(jitter_factor: float) -> TransportOption:
    """Add up to ``jitter_factor`` times the delay of random jitter."""

    def apply(transport: Transport) -> None:
        transport.jitter_factor = jitter_factor

    return apply


def with_max_wait_time(max_wait_time: float | None) -> TransportOption:
    """Cap a single delay, ``Retry-After`` included."""

    def apply(transport: Transport) -> None:
        transport.max_wait_time = max_wait_time

    return apply


def with_retry_status_codes(*status_codes: int) -> TransportOption:
    """Replace the retryable status codes."""

    def apply(transport: Transport) -> None:
        transport.status_forcelist = tuple(status_codes)

    return apply


def with_retry_if(
    retry_if: Callable[[httpx.Response | None, Exception | None], bool] | None,
) -> TransportOption:
    """Decide retries with a custom predicate.

    The predicate is called with ``(response, None)`` after a response and
    with ``(None, exception)`` after a network failure.
    """

    def apply(transport: Transport) -> None:
        transport.retry_if = retry_if

    return apply


def with_tls_verify(verify: bool | str | ssl.SSLContext) -> TransportOption:
    """Enable TLS certificate verification.

    Verification is disabled by default because the client targets trusted
    internal endpoints. ``verify`` accepts anything ``httpx`` does: a
    boolean, a CA bundle path or an ``ssl.SSLContext``.
    """

    def apply(transport: Transport) -> None:
        transport.verify = verify

    return apply


def with_follow_redirects(follow_redirects: bool) -> TransportOption:
    """Set whether redirects are followed (they are by default)."""

    def apply(transport: Transport) -> None:
        transport.follow_redirects = follow_redirects

    return apply


def with_http_transport(http_transport: httpx.BaseTransport) -> TransportOption:
    """Send requests through a custom ``httpx`` transport.

    Mostly useful with ``httpx.MockTransport`` in tests.
    """

    def apply(transport: Transport) -> None:
        transport.http_transport = http_transport

    return apply


def with_request_hook(hook: Callable[[AttemptInfo], None]) -> TransportOption:
    """Register a hook fired before every physical attempt."""

    def apply(transport: Transport) -> None:
        transport.request_hooks.append(hook)

    return apply
