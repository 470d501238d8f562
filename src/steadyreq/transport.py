r"""Retry-capable transport wrapped by the client.

The transport owns the pooled ``httpx.Client`` and runs the attempt
loop: fire the attempt hooks, send, classify the outcome, sleep and try
again until the request succeeds or the retry budget is exhausted.
Attempts are strictly sequential and block the calling thread. The
timeout bounds each network phase of an attempt (connect, write, read
and pool acquisition) rather than the attempt as a whole.
"""

from __future__ import annotations

__all__ = ["Transport"]

import logging
import time
from typing import TYPE_CHECKING

import httpx

from steadyreq.backoff import ExponentialBackoff
from steadyreq.callbacks import invoke_on_attempt
from steadyreq.core.config import (
    DEFAULT_BACKOFF_MAX,
    DEFAULT_BACKOFF_MIN,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    RETRY_STATUS_CODES,
)
from steadyreq.core.retry_logic import should_retry_exception, should_retry_response
from steadyreq.core.validation import validate_retry_params, validate_timeout
from steadyreq.exceptions import TransportError
from steadyreq.utils.sleep import calculate_sleep_time

if TYPE_CHECKING:
    import ssl
    from collections.abc import Callable, Iterable

    from steadyreq.backoff import BaseBackoffStrategy
    from steadyreq.callbacks import AttemptInfo
    from steadyreq.core.config import TransportOption

logger: logging.Logger = logging.getLogger(__name__)


class Transport:
    """Retry-capable HTTP transport.

    The fields hold the defaults of ``steadyreq.core.config`` until the
    configuration functions change them. ``build`` validates the fields
    and creates the underlying ``httpx.Client``; the transport must not be
    modified afterwards.

    Attributes:
        timeout: Timeout in seconds of each network phase of an attempt.
        max_retries: Number of retries after the first attempt.
        backoff_strategy: Delay policy between attempts.
        jitter_factor: Relative random jitter added to delays.
        max_wait_time: Optional cap of a single delay.
        status_forcelist: Retryable status codes.
        retry_if: Optional predicate replacing the default retry rules.
        verify: TLS verification setting passed to ``httpx``. Disabled by
            default.
        follow_redirects: Whether redirects are followed.
        http_transport: Optional ``httpx`` transport, e.g. a mock.
        request_hooks: Hooks fired before every attempt.

    Example:
        ```pycon
        >>> from steadyreq.core.config import with_retry_max
        >>> from steadyreq.transport import Transport
        >>> transport = Transport.from_options([with_retry_max(1)])
        >>> transport.max_retries
        1
        >>> transport.close()

        ```
    """

    def __init__(self) -> None:
        self.timeout: float = DEFAULT_TIMEOUT
        self.max_retries: int = DEFAULT_MAX_RETRIES
        self.backoff_strategy: BaseBackoffStrategy = ExponentialBackoff(
            base_delay=DEFAULT_BACKOFF_MIN, max_delay=DEFAULT_BACKOFF_MAX
        )
        self.jitter_factor: float = 0.0
        self.max_wait_time: float | None = None
        self.status_forcelist: tuple[int, ...] = RETRY_STATUS_CODES
        self.retry_if: Callable[[httpx.Response | None, Exception | None], bool] | None = None
        self.verify: bool | str | ssl.SSLContext = False
        self.follow_redirects: bool = True
        self.http_transport: httpx.BaseTransport | None = None
        self.request_hooks: list[Callable[[AttemptInfo], None]] = []
        self._client: httpx.Client | None = None

    @classmethod
    def from_options(
        cls,
        options: Iterable[TransportOption],
        *,
        hooks: Iterable[Callable[[AttemptInfo], None]] = (),
    ) -> Transport:
        """Create a transport, apply ``options`` in order and build it.

        Args:
            options: Configuration functions, applied left to right.
            hooks: Attempt hooks registered after every option ran, so
                they fire after the hooks added by ``options``.

        Returns:
            The built transport.

        Raises:
            ConfigurationError: If the resulting configuration is invalid.
        """
        transport = cls()
        for option in options:
            option(transport)
        transport.request_hooks.extend(hooks)
        transport.build()
        return transport

    @property
    def http_client(self) -> httpx.Client:
        """The underlying ``httpx.Client``.

        Raises:
            RuntimeError: If the transport was not built.
        """
        if self._client is None:
            msg = "Transport.build() must be called before sending requests"
            raise RuntimeError(msg)
        return self._client

    def build(self) -> None:
        """Validate the configuration and create the ``httpx.Client``.

        Raises:
            ConfigurationError: If a field is out of range.
        """
        validate_timeout(self.timeout)
        validate_retry_params(
            max_retries=self.max_retries,
            jitter_factor=self.jitter_factor,
            max_wait_time=self.max_wait_time,
        )
        self._client = httpx.Client(
            timeout=self.timeout,
            verify=self.verify,
            follow_redirects=self.follow_redirects,
            transport=self.http_transport,
        )

    def close(self) -> None:
        """Close the pooled connections."""
        if self._client is not None:
            self._client.close()

    def build_request(
        self,
        method: str,
        url: httpx.URL,
        *,
        headers: dict[str, str],
        content: bytes | None,
    ) -> httpx.Request:
        """Build a request carrying the client default headers."""
        return self.http_client.build_request(method, url, headers=headers, content=content)

    def send(self, request: httpx.Request) -> httpx.Response:
        """Send ``request``, retrying transient failures.

        The response is returned unread: the caller must read and close
        it. Responses that trigger a retry are closed by the transport.

        Args:
            request: The request to send. Its body must be in memory so
                that every attempt sends the same bytes.

        Returns:
            The first response that is not retried.

        Raises:
            TransportError: If the last attempt failed with a network
                error, or with a retryable status once the retries are
                exhausted.
        """
        client = self.http_client
        method, url = request.method, str(request.url)
        for attempt in range(self.max_retries + 1):
            invoke_on_attempt(
                self.request_hooks,
                request=request,
                attempt=attempt,
                max_retries=self.max_retries,
            )
            response: httpx.Response | None = None
            try:
                response = client.send(request, stream=True)
            except httpx.RequestError as exc:
                retryable = should_retry_exception(exc, self.retry_if)
                logger.debug(
                    f"{method} request to {url} encountered {type(exc).__name__} on attempt "
                    f"{attempt + 1}/{self.max_retries + 1}: {exc}"
                )
                if not retryable or attempt >= self.max_retries:
                    raise TransportError(
                        f"{method} request to {url} failed after {attempt + 1} attempts: {exc}",
                        attempts=attempt + 1,
                        method=method,
                        url=url,
                        cause=exc,
                    ) from exc
            else:
                if not self._should_retry(response):
                    if attempt > 0:
                        logger.debug(f"{method} request to {url} succeeded on attempt {attempt + 1}")
                    return response
                logger.debug(
                    f"{method} request to {url} failed with status {response.status_code} "
                    f"(attempt {attempt + 1}/{self.max_retries + 1})"
                )
                if attempt >= self.max_retries:
                    response.close()
                    raise TransportError(
                        f"{method} request to {url} giving up after {attempt + 1} attempts "
                        f"with status {response.status_code}",
                        attempts=attempt + 1,
                        status_code=response.status_code,
                        method=method,
                        url=url,
                    )

            sleep_time = calculate_sleep_time(
                attempt,
                response=response,
                backoff_strategy=self.backoff_strategy,
                jitter_factor=self.jitter_factor,
                max_wait_time=self.max_wait_time,
            )
            if response is not None:
                response.close()
            logger.debug(f"Waiting {sleep_time:.2f}s before retrying {method} {url}")
            time.sleep(sleep_time)

        # max_retries >= 0, so the last iteration always returns or raises
        msg = "retry loop exited without a result"  # pragma: no cover
        raise RuntimeError(msg)  # pragma: no cover

    def _should_retry(self, response: httpx.Response) -> bool:
        try:
            return should_retry_response(response, self.status_forcelist, self.retry_if)
        except Exception:
            response.close()
            raise
